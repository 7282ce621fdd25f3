"""
AWS Lambda handler for the send-email HTTP endpoint (API Gateway proxy).

Thin orchestration layer that delegates to EmailRequestHandler.
Settings are loaded once per cold start and reused across invocations.
"""

import logging
import os
from typing import Dict, Any

from domain.request_handler import EmailRequestHandler
from domain.responses import build_response
from integrations.smtp_transport import SmtpMailPort
from services.settings import load_mail_settings

# Configure logging
logger = logging.getLogger()
logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

# Add console handler for local testing (AWS Lambda provides handlers automatically)
if not logger.handlers:
    console_handler = logging.StreamHandler()
    formatter = logging.Formatter('%(levelname)s - %(message)s')
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

# Initialize once at module level (reused across invocations)
mail_settings = load_mail_settings()
request_handler = EmailRequestHandler(mail_settings, SmtpMailPort.from_settings)


def lambda_handler(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Send an email described by the request body.

    Expected body (POST):
    {
        "receiver_email": "user@example.com",
        "subject": "Subject line",
        "body_text": "Plain text body"
    }

    Args:
        event: API Gateway proxy event
        context: Lambda context

    Returns:
        Proxy response dict with statusCode, CORS headers and JSON body
    """
    request_id = getattr(context, 'aws_request_id', None)
    return request_handler.handle(event, request_id)


def health_check(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Simple health check endpoint for monitoring.
    """
    return build_response(200, {
        'status': 'healthy',
        'environment': mail_settings.environment,
        'emailConfigured': mail_settings.is_configured
    })
