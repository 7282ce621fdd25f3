"""
Pytest configuration and fixtures for all tests.
"""

import os
import sys
from unittest.mock import Mock

import pytest

# Add src and hooks to Python path before any imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../src'))
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '../hooks'))

# Set up test environment variables before importing any modules
os.environ.setdefault('AWS_DEFAULT_REGION', 'us-west-2')
os.environ.setdefault('ENVIRONMENT', 'test')
os.environ.setdefault('LOG_LEVEL', 'INFO')
os.environ.setdefault('GMAIL_USER', 'sender@gmail.com')
os.environ.setdefault('GMAIL_APP_PASSWORD', 'test-app-password')

from domain.models import SendReceipt  # noqa: E402


class FakeMailPort:
    """Mail port double that records calls in order."""

    def __init__(self, message_id='abc123', verify_error=None, send_error=None):
        self.message_id = message_id
        self.verify_error = verify_error
        self.send_error = send_error
        self.calls = []
        self.sent_messages = []

    def verify_connectivity(self):
        self.calls.append('verify_connectivity')
        if self.verify_error:
            raise self.verify_error

    def send(self, message):
        self.calls.append('send')
        self.sent_messages.append(message)
        if self.send_error:
            raise self.send_error
        return SendReceipt(message_id=self.message_id)


@pytest.fixture
def fake_mail_port():
    """Fresh FakeMailPort returning message id 'abc123'."""
    return FakeMailPort()


@pytest.fixture
def make_fake_mail_port():
    """Factory for FakeMailPort with custom failures."""
    return FakeMailPort


@pytest.fixture
def lambda_context():
    """Mock Lambda context."""
    context = Mock()
    context.aws_request_id = "test-request-id"
    context.invoked_function_arn = "arn:aws:lambda:us-west-2:123456789012:function:send-email-test"
    context.function_name = "send-email-test"
    return context


@pytest.fixture
def valid_body():
    return {
        'receiver_email': 'a@b.com',
        'subject': ' Hi ',
        'body_text': ' Hello '
    }
