"""
Notification composition for RSVP submissions.

Turns an RSVPInput plus the server configuration into the email the host
receives. Composition is pure: the HTML template is injected at construction
time, so compose() performs no I/O and cannot fail.
"""

import re
from typing import Any, Dict

from .models import AttendanceStatus, ComposedMessage, RSVPInput, ServerConfig
from services import templates as template_service

NOTIFICATION_TEMPLATE = 'rsvp_notification.html'

STATUS_LABELS: Dict[AttendanceStatus, str] = {
    AttendanceStatus.ALONE: 'Attending Alone (Confirmed)',
    AttendanceStatus.WITH_PARTNER: 'Attending With Partner (Confirmed)',
    AttendanceStatus.ABSENT: 'Will NOT be attending (Absent)',
}
UNKNOWN_STATUS_LABEL = 'Unknown'

EMPHASIS_POSITIVE = 'positive'
EMPHASIS_NEGATIVE = 'negative'

EMPHASIS_COLORS = {
    EMPHASIS_POSITIVE: '#388E3C',
    EMPHASIS_NEGATIVE: '#D32F2F',
}

SUBJECT_PREFIX = '[RSVP Confirmation] New Guest Response: '

_HEADER_CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]+')


def status_label(attendance_status: Any) -> str:
    """
    Human-readable label for an attendance status.

    Accepts enum members or their raw string values; anything unrecognized
    maps to "Unknown".
    """
    try:
        return STATUS_LABELS.get(attendance_status, UNKNOWN_STATUS_LABEL)
    except TypeError:
        # unhashable input
        return UNKNOWN_STATUS_LABEL


def emphasis_for(attendance_status: Any) -> str:
    """Styling flag for the status field: negative only for absent guests."""
    if attendance_status == AttendanceStatus.ABSENT:
        return EMPHASIS_NEGATIVE
    return EMPHASIS_POSITIVE


def _header_safe(value: str) -> str:
    """Replace CR/LF and other control characters so a value stays on one header line."""
    return _HEADER_CONTROL_CHARS.sub(' ', value or '')


def _quoted_display_name(name: str) -> str:
    """Escape a display name for use inside an RFC 5322 quoted-string."""
    return _header_safe(name).replace('\\', '\\\\').replace('"', '\\"')


class MessageComposer:
    """
    Builds notification emails from RSVP submissions.

    Args:
        template: HTML body template with {name}, {email}, {phone_number},
            {status_label}, {status_color} and {emphasis} placeholders
    """

    def __init__(self, template: str):
        # Fail at cold start, not per submission, if the template has unknown placeholders
        template_service.render_template(
            template,
            name='', email='', phone_number='',
            status_label='', status_color='', emphasis='',
        )
        self.template = template

    @classmethod
    def from_template_service(cls) -> 'MessageComposer':
        """Create a composer with the packaged (or S3-overridden) template."""
        return cls(template_service.load_template(NOTIFICATION_TEMPLATE))

    def compose(self, rsvp: RSVPInput, config: ServerConfig) -> ComposedMessage:
        """
        Compose the host notification for one RSVP.

        Args:
            rsvp: Guest submission
            config: Server configuration (sender identity and recipient)

        Returns:
            ComposedMessage: Headers plus HTML and plain-text bodies
        """
        label = status_label(rsvp.attendance_status)
        emphasis = emphasis_for(rsvp.attendance_status)

        body_html = template_service.render_template(
            self.template,
            name=rsvp.name,
            email=rsvp.email,
            phone_number=rsvp.phone_number,
            status_label=label,
            status_color=EMPHASIS_COLORS[emphasis],
            emphasis=emphasis,
        )

        return ComposedMessage(
            from_display=f'"{_quoted_display_name(rsvp.name)}" <{config.mail_user}>',
            to_address=config.recipient_address,
            subject=f"{SUBJECT_PREFIX}{_header_safe(rsvp.name)}",
            body_html=body_html,
            body_text=self._render_text(rsvp, label),
            status_label=label,
            emphasis=emphasis,
        )

    @staticmethod
    def _render_text(rsvp: RSVPInput, label: str) -> str:
        return (
            "New RSVP Submission Received\n"
            "\n"
            "A new guest has submitted their attendance confirmation for the event.\n"
            "\n"
            f"Full Name: {rsvp.name}\n"
            f"Email: {rsvp.email}\n"
            f"Phone Number: {rsvp.phone_number}\n"
            f"Attendance Status: {label}\n"
            "\n"
            f"(Guest email for direct reply: {rsvp.email})\n"
        )
