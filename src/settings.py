"""
Environment configuration for the RSVP notification Lambda.

Read once at cold start. Mail account completeness is *not* enforced here:
an incomplete ServerConfig is returned as-is so health checks can report it
and each submission is rejected with ConfigurationError.
"""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from domain.models import ServerConfig
from domain.submission import ConfigurationError

logger = logging.getLogger(__name__)

SUPPORTED_TRANSPORTS = ('smtp', 'ses')


@dataclass(frozen=True)
class MailSettings:
    """
    How notifications leave the system.

    Attributes:
        transport: "smtp" or "ses"
        smtp_host: SMTP server hostname
        smtp_port: 465 for implicit TLS, 587 for STARTTLS
        timeout: Delivery timeout in seconds
        aws_region: Region for the SES client
    """
    transport: str = 'smtp'
    smtp_host: str = 'smtp.gmail.com'
    smtp_port: int = 465
    timeout: float = 30.0
    aws_region: str = 'us-west-2'


def load_server_config(environ: Optional[Mapping[str, str]] = None) -> ServerConfig:
    """
    Read mail account identity, credential and recipient from the environment.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        ServerConfig: Possibly incomplete configuration
    """
    env = os.environ if environ is None else environ

    config = ServerConfig(
        mail_user=env.get('EMAIL_USER', '').strip(),
        mail_credential=env.get('EMAIL_PASS', ''),
        recipient_address=env.get('RECIPIENT_EMAIL', '').strip(),
    )

    missing = config.missing_fields()
    if missing:
        logger.error(
            f"Mail configuration incomplete, submissions will be rejected: "
            f"missing {', '.join(missing)}"
        )
    else:
        logger.info(
            f"Mail configuration loaded: user={config.mail_user}, "
            f"recipients={len(config.recipients)}"
        )
    return config


def load_mail_settings(environ: Optional[Mapping[str, str]] = None) -> MailSettings:
    """
    Read delivery transport settings from the environment.

    Raises:
        ConfigurationError: If MAIL_TRANSPORT is unsupported or a number is malformed
    """
    env = os.environ if environ is None else environ

    transport = env.get('MAIL_TRANSPORT', 'smtp').strip().lower()
    if transport not in SUPPORTED_TRANSPORTS:
        raise ConfigurationError(
            f"MAIL_TRANSPORT must be one of {', '.join(SUPPORTED_TRANSPORTS)}, "
            f"got: '{transport}'"
        )

    try:
        smtp_port = int(env.get('SMTP_PORT', '465'))
        timeout = float(env.get('MAIL_TIMEOUT', '30'))
    except ValueError as e:
        raise ConfigurationError(f"Invalid numeric mail setting: {e}") from e

    region = env.get('AWS_REGION', env.get('AWS_DEFAULT_REGION', 'us-west-2'))

    settings = MailSettings(
        transport=transport,
        smtp_host=env.get('SMTP_HOST', 'smtp.gmail.com'),
        smtp_port=smtp_port,
        timeout=timeout,
        aws_region=region,
    )
    logger.info(
        f"Mail transport: {settings.transport} "
        f"(smtp={settings.smtp_host}:{settings.smtp_port}, region={settings.aws_region}, "
        f"timeout={settings.timeout}s)"
    )
    return settings
