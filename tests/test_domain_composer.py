"""
Tests for notification composition.
"""

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

from domain import composer as composer_module
from domain.composer import MessageComposer, emphasis_for, status_label
from domain.models import AttendanceStatus, RSVPInput
from services import templates


@pytest.fixture
def composer():
    """Composer using the packaged template."""
    return MessageComposer.from_template_service()


def _rsvp(**overrides):
    fields = dict(
        name='Ana Lopez',
        email='ana@example.com',
        phone_number='555-1234',
        attendance_status=AttendanceStatus.WITH_PARTNER
    )
    fields.update(overrides)
    return RSVPInput(**fields)


class TestStatusLabel:
    """Test attendance label mapping."""

    @pytest.mark.parametrize('status,expected', [
        (AttendanceStatus.ALONE, 'Attending Alone (Confirmed)'),
        (AttendanceStatus.WITH_PARTNER, 'Attending With Partner (Confirmed)'),
        (AttendanceStatus.ABSENT, 'Will NOT be attending (Absent)'),
    ])
    def test_known_statuses(self, status, expected):
        """Test each defined status has its label."""
        assert status_label(status) == expected

    def test_raw_string_values(self):
        """Test raw wire values map like enum members."""
        assert status_label('ALONE') == 'Attending Alone (Confirmed)'

    @pytest.mark.parametrize('value', ['MAYBE', '', None, 42, ['ALONE']])
    def test_unknown_status(self, value):
        """Test unrecognized values map to Unknown instead of failing."""
        assert status_label(value) == 'Unknown'

    def test_emphasis(self):
        """Test only absent guests get negative emphasis."""
        assert emphasis_for(AttendanceStatus.ABSENT) == 'negative'
        assert emphasis_for(AttendanceStatus.ALONE) == 'positive'
        assert emphasis_for(AttendanceStatus.WITH_PARTNER) == 'positive'
        assert emphasis_for('MAYBE') == 'positive'


class TestCompose:
    """Test MessageComposer.compose."""

    def test_compose_headers(self, composer, server_config):
        """Test subject, from and to headers."""
        message = composer.compose(_rsvp(), server_config)

        assert message.subject == '[RSVP Confirmation] New Guest Response: Ana Lopez'
        assert message.from_display == '"Ana Lopez" <rsvp-bot@example.com>'
        assert message.to_address == 'host@example.com'

    def test_compose_body_fields(self, composer, server_config):
        """Test the body lists every submitted field."""
        message = composer.compose(_rsvp(), server_config)

        assert 'Ana Lopez' in message.body_html
        assert 'ana@example.com' in message.body_html
        assert '555-1234' in message.body_html
        assert 'Attending With Partner (Confirmed)' in message.body_html
        assert '#388E3C' in message.body_html
        assert 'Phone Number: 555-1234' in message.body_text
        assert message.status_label == 'Attending With Partner (Confirmed)'
        assert message.emphasis == 'positive'

    def test_compose_absent_guest(self, composer, server_config):
        """Test absent guests get the absent label and negative styling."""
        message = composer.compose(_rsvp(attendance_status=AttendanceStatus.ABSENT), server_config)

        assert message.status_label == 'Will NOT be attending (Absent)'
        assert message.emphasis == 'negative'
        assert '#D32F2F' in message.body_html
        assert '#388E3C' not in message.body_html

    def test_compose_unknown_status(self, composer, server_config):
        """Test composition stays total for unrecognized statuses."""
        message = composer.compose(_rsvp(attendance_status='MAYBE'), server_config)

        assert message.status_label == 'Unknown'
        assert message.emphasis == 'positive'

    def test_compose_is_deterministic(self, composer, server_config):
        """Test same input yields an identical message."""
        first = composer.compose(_rsvp(), server_config)
        second = composer.compose(_rsvp(), server_config)

        assert first == second

    def test_compose_escapes_html(self, composer, server_config):
        """Test markup in guest fields is escaped in the HTML body."""
        message = composer.compose(
            _rsvp(name='<script>alert(1)</script>', phone_number='"><img src=x>'),
            server_config
        )

        assert '<script>' not in message.body_html
        assert '&lt;script&gt;alert(1)&lt;/script&gt;' in message.body_html
        assert '<img' not in message.body_html
        assert '&quot;&gt;&lt;img src=x&gt;' in message.body_html

    def test_compose_strips_header_line_breaks(self, composer, server_config):
        """Test CR/LF in the name never reach a header."""
        message = composer.compose(_rsvp(name='Ana\r\nBcc: victim@example.com'), server_config)

        assert '\r' not in message.subject and '\n' not in message.subject
        assert '\r' not in message.from_display and '\n' not in message.from_display
        assert message.subject.endswith('Ana Bcc: victim@example.com')

    def test_compose_quotes_display_name(self, composer, server_config):
        """Test quotes in the name cannot close the display-name string."""
        message = composer.compose(_rsvp(name='Ana "The Guest"'), server_config)

        assert message.from_display == '"Ana \\"The Guest\\"" <rsvp-bot@example.com>'
        assert message.subject == '[RSVP Confirmation] New Guest Response: Ana "The Guest"'

    def test_compose_does_not_mutate_input(self, composer, server_config):
        """Test the input is left unchanged."""
        rsvp = _rsvp(name='<b>Ana</b>')
        composer.compose(rsvp, server_config)

        assert rsvp.name == '<b>Ana</b>'


class TestComposerTemplate:
    """Test template injection."""

    def test_custom_template(self, server_config):
        """Test a composer built from an explicit template."""
        composer = MessageComposer(
            '<p>{name}|{email}|{phone_number}|{status_label}|{status_color}|{emphasis}</p>'
        )

        message = composer.compose(_rsvp(attendance_status=AttendanceStatus.ALONE), server_config)

        assert message.body_html == (
            '<p>Ana Lopez|ana@example.com|555-1234|Attending Alone (Confirmed)|#388E3C|positive</p>'
        )

    def test_template_with_unknown_placeholder_rejected(self):
        """Test a broken template fails at construction, not per submission."""
        with pytest.raises(ValueError, match="guest_count"):
            MessageComposer('<p>{name} {guest_count}</p>')

    def test_packaged_template_name(self):
        """Test the composer loads the packaged notification template."""
        assert composer_module.NOTIFICATION_TEMPLATE == 'rsvp_notification.html'
        assert (templates.TEMPLATES_DIR / composer_module.NOTIFICATION_TEMPLATE).exists()
