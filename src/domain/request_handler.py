"""
Send-email request pipeline - core business logic.

This module handles one API Gateway proxy event end to end:
1. Answer CORS preflight (OPTIONS) requests
2. Parse the JSON body
3. Validate the request fields
4. Check the mail configuration
5. Verify connectivity with the mail port, then send
6. Map the outcome to a JSON response

Every stage returns through the response builder. No exceptions propagate
out of handle().
"""

import logging
from typing import Any, Callable, Dict, Optional

from .models import MailSettings
from .validation import InvalidJsonError, parse_body, validate_request, to_email_request
from . import responses
from integrations.mail_port import (
    AuthError,
    MailConnectionError,
    MailPort,
    MailPortError,
    RecipientRejectedError,
)

logger = logging.getLogger(__name__)

MailPortFactory = Callable[[MailSettings], MailPort]


def get_http_method(event: Dict[str, Any]) -> str:
    """
    Read the HTTP method from a REST API (v1) or HTTP API (v2) proxy event.

    Returns:
        Upper-cased method, or '' when absent
    """
    method = event.get('httpMethod')
    if not method:
        http_context = (event.get('requestContext') or {}).get('http') or {}
        method = http_context.get('method')
    return (method or '').upper()


def send_error_response(error: Exception) -> Dict[str, Any]:
    """Map a send failure to its categorized error response."""
    if isinstance(error, AuthError):
        return responses.error_response(500, 'Authentication failed', 'Invalid email credentials')
    if isinstance(error, MailConnectionError):
        return responses.error_response(500, 'Connection failed', 'Unable to connect to email server')
    if isinstance(error, RecipientRejectedError):
        return responses.error_response(
            400, 'Invalid recipient', 'The recipient email address is invalid or does not exist'
        )
    return responses.error_response(500, 'Email sending failed', 'An error occurred while sending the email')


class EmailRequestHandler:
    """
    Handles the send-email request pipeline.

    Settings are fixed at construction; the mail port is created per request
    and only after the request and configuration checks pass.
    """

    def __init__(self, settings: MailSettings, mail_port_factory: MailPortFactory):
        self.settings = settings
        self.mail_port_factory = mail_port_factory

    def handle(self, event: Dict[str, Any], request_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Process a single proxy event.

        Args:
            event: API Gateway proxy event
            request_id: Lambda request id (for log correlation)

        Returns:
            Proxy response dict (statusCode, headers, body)
        """
        try:
            return self._handle(event, request_id)
        except Exception as e:
            logger.error(f"Unexpected error handling request {request_id}: {e}", exc_info=True)
            return responses.internal_error_response()

    def _log_port_failure(self, stage: str, error: Exception, request_id: Optional[str]) -> None:
        # Categorized failures were already logged in detail by the transport
        if isinstance(error, MailPortError):
            logger.info(f"{stage} failed for request {request_id}: {type(error).__name__}")
        else:
            logger.error(f"{stage} failed for request {request_id} ({type(error).__name__}): {error}")

    def _handle(self, event: Dict[str, Any], request_id: Optional[str]) -> Dict[str, Any]:
        method = get_http_method(event)
        logger.info(f"Handling {method or 'UNKNOWN'} request {request_id}")

        if method == 'OPTIONS':
            return responses.preflight_response()

        try:
            body = parse_body(event.get('body'), bool(event.get('isBase64Encoded')))
        except InvalidJsonError as e:
            logger.info(f"Rejected request {request_id}: {e}")
            return responses.invalid_json_response()

        errors = validate_request(body)
        if errors:
            logger.info(f"Rejected request {request_id}: {len(errors)} validation error(s)")
            return responses.validation_failed_response(errors)

        if not self.settings.is_configured:
            logger.error("Email service not configured: sender address or password missing")
            return responses.configuration_error_response()

        email_request = to_email_request(body)
        mail_port = self.mail_port_factory(self.settings)

        try:
            mail_port.verify_connectivity()
        except Exception as e:
            self._log_port_failure('Connectivity check', e, request_id)
            return responses.service_unavailable_response()

        message = email_request.to_mail_message(self.settings.sender_address)

        try:
            receipt = mail_port.send(message)
        except Exception as e:
            self._log_port_failure('Send', e, request_id)
            return send_error_response(e)

        logger.info(f"Email sent for request {request_id}: message_id={receipt.message_id}")
        return responses.success_response(receipt.message_id, email_request.receiver_email)
