"""
Tests for the send-email Lambda entry points.
"""

import json
import smtplib
from unittest.mock import MagicMock, patch

import pytest
import sys
import os

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))

import send_email_handler
from domain.models import MailSettings


@pytest.fixture
def post_event(valid_body):
    """API Gateway REST proxy event with a valid body."""
    return {
        'resource': '/send-email',
        'path': '/send-email',
        'httpMethod': 'POST',
        'headers': {'Content-Type': 'application/json'},
        'isBase64Encoded': False,
        'body': json.dumps(valid_body)
    }


@pytest.fixture
def mock_smtp_session():
    """Patch SMTP_SSL and return the session the handler will use."""
    with patch('integrations.smtp_transport.smtplib.SMTP_SSL') as mock_smtp_ssl:
        session = MagicMock()
        mock_smtp_ssl.return_value = session
        yield session


class TestLambdaHandler:
    """Test the main Lambda handler function."""

    def test_module_settings_loaded_from_environment(self):
        assert send_email_handler.mail_settings.sender_address == 'sender@gmail.com'
        assert send_email_handler.mail_settings.is_configured is True

    def test_lambda_handler_success(self, post_event, lambda_context, mock_smtp_session):
        """Test successful send through the real SMTP port with a mocked session."""
        response = send_email_handler.lambda_handler(post_event, lambda_context)

        assert response['statusCode'] == 200
        body = json.loads(response['body'])
        assert body['success'] is True
        assert body['message'] == 'Email sent successfully'
        assert body['recipient'] == 'a@b.com'

        # One session to verify, one to send
        assert mock_smtp_session.login.call_count == 2
        mime = mock_smtp_session.send_message.call_args[0][0]
        assert body['messageId'] == mime['Message-ID']
        assert mime['Subject'] == 'Hi'
        assert mime.get_content().strip() == 'Hello'

    def test_lambda_handler_preflight(self, lambda_context, mock_smtp_session):
        response = send_email_handler.lambda_handler({'httpMethod': 'OPTIONS'}, lambda_context)

        assert response['statusCode'] == 200
        assert response['headers']['Access-Control-Allow-Origin'] == '*'
        mock_smtp_session.login.assert_not_called()

    def test_lambda_handler_validation_failure(self, lambda_context, mock_smtp_session):
        event = {'httpMethod': 'POST', 'body': json.dumps({'receiver_email': 'a@b'})}

        response = send_email_handler.lambda_handler(event, lambda_context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['details'] == [
            'receiver_email must be a valid email address',
            'subject is required',
            'body_text is required',
        ]
        mock_smtp_session.login.assert_not_called()

    def test_lambda_handler_connectivity_failure(self, post_event, lambda_context, mock_smtp_session):
        mock_smtp_session.login.side_effect = smtplib.SMTPAuthenticationError(535, b'bad credentials')

        response = send_email_handler.lambda_handler(post_event, lambda_context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['error'] == 'Email service unavailable'
        mock_smtp_session.send_message.assert_not_called()

    def test_lambda_handler_multiline_subject(self, lambda_context, mock_smtp_session):
        event = {'httpMethod': 'POST', 'body': json.dumps({
            'receiver_email': 'a@b.com',
            'subject': 'Line one\nLine two',
            'body_text': 'Hello'
        })}

        response = send_email_handler.lambda_handler(event, lambda_context)

        assert response['statusCode'] == 200
        mime = mock_smtp_session.send_message.call_args[0][0]
        assert mime['Subject'] == 'Line one Line two'

    def test_lambda_handler_unencodable_password(self, post_event, lambda_context, mock_smtp_session):
        mock_smtp_session.login.side_effect = UnicodeEncodeError(
            'ascii', 'pässwort', 1, 2, 'ordinal not in range(128)'
        )
        settings = MailSettings(sender_address='sender@gmail.com', sender_password='pässwort')

        with patch.object(send_email_handler.request_handler, 'settings', settings):
            response = send_email_handler.lambda_handler(post_event, lambda_context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['error'] == 'Email service unavailable'
        mock_smtp_session.send_message.assert_not_called()

    def test_lambda_handler_recipient_rejected(self, post_event, lambda_context, mock_smtp_session):
        mock_smtp_session.send_message.side_effect = smtplib.SMTPRecipientsRefused({
            'a@b.com': (550, b'5.1.1 user unknown')
        })

        response = send_email_handler.lambda_handler(post_event, lambda_context)

        assert response['statusCode'] == 400
        assert json.loads(response['body'])['error'] == 'Invalid recipient'

    def test_lambda_handler_missing_configuration(self, post_event, lambda_context, mock_smtp_session):
        unconfigured = MailSettings(sender_address=None, sender_password=None)

        with patch.object(send_email_handler.request_handler, 'settings', unconfigured):
            response = send_email_handler.lambda_handler(post_event, lambda_context)

        assert response['statusCode'] == 500
        assert json.loads(response['body'])['error'] == 'Server configuration error'
        mock_smtp_session.login.assert_not_called()

    def test_lambda_handler_without_context(self, post_event, mock_smtp_session):
        response = send_email_handler.lambda_handler(post_event, None)

        assert response['statusCode'] == 200


def test_health_check(lambda_context):
    """Test health check endpoint."""
    response = send_email_handler.health_check({}, lambda_context)

    assert response['statusCode'] == 200
    body = json.loads(response['body'])
    assert body['status'] == 'healthy'
    assert body['environment'] == 'test'
    assert body['emailConfigured'] is True
