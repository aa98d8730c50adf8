"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
import pytest

# Add src to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
os.environ.setdefault('EMAIL_USER', 'rsvp-bot@example.com')
os.environ.setdefault('EMAIL_PASS', 'test-app-password')
os.environ.setdefault('RECIPIENT_EMAIL', 'host@example.com')
os.environ.setdefault('MAIL_TRANSPORT', 'smtp')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')
os.environ.pop('TEMPLATE_BUCKET', None)

from domain.models import AttendanceStatus, RSVPInput, ServerConfig


@pytest.fixture
def server_config():
    """Complete mail configuration."""
    return ServerConfig(
        mail_user='rsvp-bot@example.com',
        mail_credential='test-app-password',
        recipient_address='host@example.com'
    )


@pytest.fixture
def rsvp():
    """Sample guest submission."""
    return RSVPInput(
        name='Ana Lopez',
        email='ana@example.com',
        phone_number='555-1234',
        attendance_status=AttendanceStatus.WITH_PARTNER
    )
