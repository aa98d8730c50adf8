"""
Notification template loading and rendering.

The host notification layout ships with the function in src/templates/.
Setting TEMPLATE_BUCKET lets a deployment swap in its own layout from S3;
the template is read once, at cold start, when the composer is built.
"""

import html
import logging
import os
from pathlib import Path

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

logger = logging.getLogger(__name__)

TEMPLATE_BUCKET = os.environ.get('TEMPLATE_BUCKET')
TEMPLATE_KEY_PREFIX = os.environ.get('TEMPLATE_KEY_PREFIX', 'templates/')

# src/services/templates.py -> src/templates/ (/var/task/templates/ in Lambda)
TEMPLATES_DIR = Path(__file__).parent.parent / 'templates'

# One attempt, short timeouts: a slow bucket must not stall a cold start
s3_client = boto3.client('s3', config=Config(
    retries={'max_attempts': 1, 'mode': 'standard'},
    connect_timeout=5,
    read_timeout=10
))


def read_packaged_template(template_name: str) -> str:
    """
    Read a template shipped in the deployment package.

    Raises:
        ValueError: If the file is not packaged
    """
    path = TEMPLATES_DIR / template_name
    try:
        return path.read_text(encoding='utf-8')
    except FileNotFoundError:
        raise ValueError(f"Template '{template_name}' is not packaged (expected {path})")


def fetch_template_override(template_name: str) -> str:
    """
    Fetch s3://TEMPLATE_BUCKET/TEMPLATE_KEY_PREFIX<template_name>.

    Raises:
        ClientError, BotoCoreError: If the object cannot be read
    """
    key = f"{TEMPLATE_KEY_PREFIX}{template_name}"
    response = s3_client.get_object(Bucket=TEMPLATE_BUCKET, Key=key)
    return response['Body'].read().decode('utf-8')


def load_template(template_name: str) -> str:
    """
    Return the S3 override when one is configured and readable, else the packaged file.

    An unreadable override is logged and ignored so a bucket misconfiguration
    never takes the RSVP API down.
    """
    if TEMPLATE_BUCKET:
        try:
            content = fetch_template_override(template_name)
            logger.info(f"Notification template {template_name} loaded from s3://{TEMPLATE_BUCKET}")
            return content
        except (ClientError, BotoCoreError) as e:
            logger.warning(
                f"Template override s3://{TEMPLATE_BUCKET}/{TEMPLATE_KEY_PREFIX}{template_name} "
                f"unavailable ({e.__class__.__name__}), using packaged template"
            )

    content = read_packaged_template(template_name)
    logger.info(f"Notification template {template_name} loaded from package")
    return content


def render_template(template: str, **variables) -> str:
    """
    Fill an HTML template, escaping every string value (quotes included).

    Raises:
        ValueError: If the template references a variable that was not given

    Example:
        >>> render_template("<td>{name}</td>", name="<b>Ana</b>")
        '<td>&lt;b&gt;Ana&lt;/b&gt;</td>'
    """
    escaped = {
        key: html.escape(value, quote=True) if isinstance(value, str) else value
        for key, value in variables.items()
    }
    try:
        return template.format(**escaped)
    except KeyError as e:
        missing_var = str(e).strip("'")
        raise ValueError(f"Missing required variable in template: {missing_var}")
