"""
RSVP submission pipeline - core business logic.

This module handles one guest submission end to end:
1. Check the mail configuration is complete
2. Compose the host notification
3. Deliver it through the configured MailSender (single attempt)
4. Return a GuestConfirmation, or raise

All-or-nothing: a confirmation is returned only when delivery succeeded.
Failures are logged and raised, never returned as partial results.
"""

import logging
import time
from typing import Optional

from .composer import MessageComposer
from .models import GuestConfirmation, RSVPInput, ServerConfig

logger = logging.getLogger(__name__)

SUCCESS_MESSAGE = 'RSVP submitted successfully and notification email sent.'


# ============================================================================
# Custom Exception Classes
# ============================================================================

class ConfigurationError(Exception):
    """Raised when required mail configuration is missing or invalid."""
    pass


class DeliveryError(Exception):
    """Raised when the notification email could not be delivered."""
    pass


# ============================================================================
# Submission Handler
# ============================================================================

class SubmissionHandler:
    """
    Orchestrates configuration check, composition and delivery for RSVPs.

    Configuration and the mail sender are injected once and shared read-only
    across invocations.

    Args:
        config: Server mail configuration
        mail_sender: Object with a send(ComposedMessage) method
        composer: MessageComposer (defaults to the packaged template)
    """

    def __init__(
        self,
        config: ServerConfig,
        mail_sender,
        composer: Optional[MessageComposer] = None
    ):
        self.config = config
        self.mail_sender = mail_sender
        self.composer = composer or MessageComposer.from_template_service()

    def check_configuration(self) -> None:
        """
        Verify the mail configuration is complete.

        Raises:
            ConfigurationError: If any required value is absent or empty
        """
        missing = self.config.missing_fields()
        if missing:
            logger.error(f"Missing required environment variables: {', '.join(missing)}")
            raise ConfigurationError(
                f"Server configuration incomplete (missing {', '.join(missing)}). "
                f"Cannot send email."
            )

    def submit_rsvp(self, rsvp: RSVPInput) -> GuestConfirmation:
        """
        Notify the host about one RSVP.

        Args:
            rsvp: Guest submission

        Returns:
            GuestConfirmation with success=True

        Raises:
            ConfigurationError: Configuration incomplete (nothing is sent)
            DeliveryError: The single delivery attempt failed
        """
        self.check_configuration()

        message = self.composer.compose(rsvp, self.config)
        logger.info(
            f"Composed notification: guest={rsvp.name}, status={message.status_label}, "
            f"recipients={len(message.recipients)}"
        )

        start_time = time.time()
        try:
            self.mail_sender.send(message)
        except Exception as e:
            logger.error(f"Error sending email for guest {rsvp.name}: {e}", exc_info=True)
            raise DeliveryError(f"Failed to send notification email: {e}") from e

        logger.info(f"Email sent for guest: {rsvp.name} ({time.time() - start_time:.2f}s)")

        return GuestConfirmation(
            name=rsvp.name,
            email=rsvp.email,
            message=SUCCESS_MESSAGE,
            success=True
        )
