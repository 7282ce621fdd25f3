"""
HTTP response construction for the send-email endpoint.

Every branch of the request handler returns through build_response().
"""

import json
from typing import Dict, Any, List, Optional

CORS_HEADERS = {
    'Content-Type': 'application/json',
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type',
    'Access-Control-Allow-Methods': 'POST, OPTIONS'
}


def build_response(
    status_code: int,
    body: Dict[str, Any],
    headers: Optional[Dict[str, str]] = None
) -> Dict[str, Any]:
    """
    Build an API Gateway proxy response.

    Args:
        status_code: HTTP status code
        body: JSON-serializable response body
        headers: Optional headers merged over the defaults

    Returns:
        Dict with statusCode, headers and JSON string body
    """
    return {
        'statusCode': status_code,
        'headers': {**CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body)
    }


def error_response(
    status_code: int,
    error: str,
    message: str,
    details: Optional[List[str]] = None
) -> Dict[str, Any]:
    """Build an error response with a stable short code and human message."""
    body = {
        'error': error,
        'message': message
    }
    if details is not None:
        body['details'] = details
    return build_response(status_code, body)


def preflight_response() -> Dict[str, Any]:
    return build_response(200, {})


def success_response(message_id: str, recipient: str) -> Dict[str, Any]:
    return build_response(200, {
        'success': True,
        'message': 'Email sent successfully',
        'messageId': message_id,
        'recipient': recipient
    })


def invalid_json_response() -> Dict[str, Any]:
    return error_response(400, 'Invalid JSON in request body', 'Request body must be valid JSON')


def validation_failed_response(details: List[str]) -> Dict[str, Any]:
    return error_response(400, 'Validation failed', 'Invalid request parameters', details)


def configuration_error_response() -> Dict[str, Any]:
    return error_response(500, 'Server configuration error', 'Email service not properly configured')


def service_unavailable_response() -> Dict[str, Any]:
    return error_response(500, 'Email service unavailable', 'Unable to connect to email service')


def internal_error_response() -> Dict[str, Any]:
    return error_response(500, 'Internal server error', 'An unexpected error occurred')
