"""
Data models for the RSVP notification domain.

These type-safe data structures define clear contracts between components.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List


class AttendanceStatus(str, Enum):
    """Attendance choices a guest can submit."""
    ALONE = 'ALONE'
    WITH_PARTNER = 'WITH_PARTNER'
    ABSENT = 'ABSENT'


@dataclass(frozen=True)
class RSVPInput:
    """
    A single guest RSVP as received from the caller.

    Only presence is guaranteed by the transport layer; email and phone
    number formats are passed through untouched.

    Attributes:
        name: Guest full name (non-empty)
        email: Guest email address
        phone_number: Guest phone number
        attendance_status: One of AttendanceStatus
    """
    name: str
    email: str
    phone_number: str
    attendance_status: AttendanceStatus


@dataclass(frozen=True)
class ServerConfig:
    """
    Mail account and recipient configuration, loaded once per process.

    Attributes:
        mail_user: Mail account identity (also the envelope sender)
        mail_credential: Mail account password or app password
        recipient_address: Notification recipient (comma-separated for several)
    """
    mail_user: str = ''
    mail_credential: str = field(default='', repr=False)
    recipient_address: str = ''

    @property
    def recipients(self) -> List[str]:
        """Recipient addresses as a list (empty entries dropped)."""
        return [a.strip() for a in (self.recipient_address or '').split(',') if a.strip()]

    @property
    def is_complete(self) -> bool:
        return not self.missing_fields()

    def missing_fields(self) -> List[str]:
        """
        Name the environment variables whose values are absent or empty.

        Returns:
            List of variable names, in declaration order
        """
        missing = []
        if not self.mail_user:
            missing.append('EMAIL_USER')
        if not self.mail_credential:
            missing.append('EMAIL_PASS')
        if not self.recipients:
            missing.append('RECIPIENT_EMAIL')
        return missing


@dataclass(frozen=True)
class ComposedMessage:
    """
    Notification email ready for delivery.

    Attributes:
        from_display: From header, '"name" <mail_user>'
        to_address: To header as configured
        subject: Subject line
        body_html: Rendered HTML body
        body_text: Plain-text alternative (no styling)
        status_label: Human-readable attendance label
        emphasis: "negative" for absent guests, otherwise "positive"
    """
    from_display: str
    to_address: str
    subject: str
    body_html: str
    body_text: str = ''
    status_label: str = ''
    emphasis: str = 'positive'

    @property
    def recipients(self) -> List[str]:
        return [a.strip() for a in self.to_address.split(',') if a.strip()]


@dataclass(frozen=True)
class GuestConfirmation:
    """
    Result returned to the caller after a successful submission.

    Attributes:
        name: Guest name echoed from the input
        email: Guest email echoed from the input
        message: Human-readable outcome
        success: Always True when a confirmation exists
    """
    name: str
    email: str
    message: str
    success: bool

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the response payload shape."""
        return {
            'name': self.name,
            'email': self.email,
            'message': self.message,
            'success': self.success,
        }

    def __repr__(self) -> str:
        """Human-readable representation for logging."""
        return f"GuestConfirmation(success={self.success}, name={self.name})"
