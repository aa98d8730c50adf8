"""
Outbound mail delivery for RSVP notifications.

Two senders share one interface, send(ComposedMessage) -> None, and raise on
failure. Neither retries: one call is one delivery attempt.

Usage:
    from integrations import mail_sender

    sender = mail_sender.create_mail_sender(config, settings)
    sender.send(message)
"""

import logging
import smtplib
import ssl
from abc import ABC, abstractmethod
from email.message import EmailMessage

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from domain.models import ComposedMessage, ServerConfig

logger = logging.getLogger(__name__)


def build_mime_message(message: ComposedMessage) -> EmailMessage:
    """
    Build a multipart/alternative MIME message (plain text + HTML).

    Args:
        message: Composed notification

    Returns:
        EmailMessage ready for SMTP or raw SES submission
    """
    mime = EmailMessage()
    mime['From'] = message.from_display
    mime['To'] = ', '.join(message.recipients)
    mime['Subject'] = message.subject
    mime.set_content(message.body_text or message.subject)
    mime.add_alternative(message.body_html, subtype='html')
    return mime


class MailSender(ABC):
    """Interface for notification senders."""

    @abstractmethod
    def send(self, message: ComposedMessage) -> None:
        """
        Deliver one message.

        Raises:
            Exception: Any transport failure (wrapped by the caller)
        """


class SmtpMailSender(MailSender):
    """
    Sends through an authenticated SMTP account (Gmail app password by default).

    Port 465 uses implicit TLS, any other port upgrades with STARTTLS.
    """

    def __init__(self, config: ServerConfig, host: str = 'smtp.gmail.com',
                 port: int = 465, timeout: float = 30.0):
        self.config = config
        self.host = host
        self.port = port
        self.timeout = timeout

    def _connect(self) -> smtplib.SMTP:
        context = ssl.create_default_context()
        if self.port == 465:
            return smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)

        server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)
        try:
            server.starttls(context=context)
        except Exception:
            # not yet inside send()'s with block
            server.close()
            raise
        return server

    def send(self, message: ComposedMessage) -> None:
        mime = build_mime_message(message)
        logger.info(
            f"Sending via SMTP: host={self.host}:{self.port}, "
            f"recipients={len(message.recipients)}"
        )

        with self._connect() as server:
            server.login(self.config.mail_user, self.config.mail_credential)
            server.send_message(
                mime,
                from_addr=self.config.mail_user,
                to_addrs=message.recipients
            )

        logger.info("SMTP delivery accepted")


class SesMailSender(MailSender):
    """
    Sends through Amazon SES using the raw email API.

    The Lambda execution role provides credentials; mail_user must be a
    verified SES identity.
    """

    def __init__(self, config: ServerConfig, region: str = 'us-west-2',
                 timeout: float = 30.0, client=None):
        self.config = config
        self.region = region
        self.client = client or self._initialize_ses_client(region, timeout)

    @staticmethod
    def _initialize_ses_client(region: str, timeout: float):
        """
        Initialize boto3 SES client with timeout configuration.

        Returns:
            boto3.client: Configured SES client
        """
        # NO retries, a single delivery attempt per submission
        client_config = Config(
            retries={
                'max_attempts': 0,
                'mode': 'standard'
            },
            connect_timeout=10,
            read_timeout=timeout
        )

        client = boto3.client('ses', region_name=region, config=client_config)
        logger.info(f"SES client initialized: region={region}, read_timeout={timeout}s, no retries")
        return client

    def send(self, message: ComposedMessage) -> None:
        mime = build_mime_message(message)
        logger.info(f"Sending via SES: region={self.region}, recipients={len(message.recipients)}")

        try:
            response = self.client.send_raw_email(
                Source=self.config.mail_user,
                Destinations=message.recipients,
                RawMessage={'Data': mime.as_bytes()}
            )
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            error_message = e.response.get('Error', {}).get('Message', str(e))
            logger.error(f"SES rejected message: error_code={error_code}, error_message={error_message}")
            raise
        except BotoCoreError as e:
            logger.error(f"SES request failed: {e}")
            raise

        logger.info(f"SES delivery accepted: MessageId={response.get('MessageId')}")


def create_mail_sender(config: ServerConfig, settings) -> MailSender:
    """
    Pick the sender implementation named by settings.transport.

    Args:
        config: Mail account configuration
        settings: settings.MailSettings

    Returns:
        MailSender instance (no connection is opened yet)
    """
    if settings.transport == 'ses':
        return SesMailSender(config, region=settings.aws_region, timeout=settings.timeout)
    return SmtpMailSender(
        config,
        host=settings.smtp_host,
        port=settings.smtp_port,
        timeout=settings.timeout
    )
