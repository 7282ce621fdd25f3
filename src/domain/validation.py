"""
Request body parsing and validation.

Both functions are pure: they never log, never touch configuration and never
reach the mail port.
"""

import base64
import binascii
import json
import re
from typing import Dict, Any, List, Optional

from .models import EmailRequest

# local@domain.tld with no whitespace and a single '@' boundary per part
EMAIL_PATTERN = re.compile(r'[^\s@]+@[^\s@]+\.[^\s@]+')

REQUIRED_TEXT_FIELDS = ('subject', 'body_text')


class InvalidJsonError(Exception):
    """Raised when the request body cannot be decoded into a JSON object."""
    pass


def parse_body(raw_body: Optional[str], is_base64_encoded: bool = False) -> Dict[str, Any]:
    """
    Decode the raw request body into a mapping.

    Args:
        raw_body: Body string from the proxy event (may be None or empty)
        is_base64_encoded: Whether API Gateway base64-encoded the body

    Returns:
        Dict with the decoded JSON object ({} for an empty body)

    Raises:
        InvalidJsonError: If the body is not valid JSON or not a JSON object
    """
    if not raw_body:
        return {}

    if is_base64_encoded:
        try:
            raw_body = base64.b64decode(raw_body, validate=True).decode('utf-8')
        except (binascii.Error, UnicodeDecodeError) as e:
            raise InvalidJsonError(f"Body is not valid base64 UTF-8: {e}")

    try:
        parsed = json.loads(raw_body)
    except json.JSONDecodeError as e:
        raise InvalidJsonError(f"Body is not valid JSON: {e}")

    if not isinstance(parsed, dict):
        raise InvalidJsonError(
            f"Body must be a JSON object, got {type(parsed).__name__}"
        )

    return parsed


def is_valid_email(value: Any) -> bool:
    """Check the basic local@domain.tld shape."""
    return isinstance(value, str) and EMAIL_PATTERN.fullmatch(value) is not None


def validate_request(body: Dict[str, Any]) -> List[str]:
    """
    Validate a parsed request body.

    Every field is checked; errors come back in the fixed order
    receiver_email, subject, body_text with at most one entry per field.

    Args:
        body: Parsed request body

    Returns:
        List of error strings (empty when the request is valid)

    Example:
        >>> validate_request({'receiver_email': 'a@b', 'subject': 'Hi'})
        ['receiver_email must be a valid email address', 'body_text is required']
    """
    errors = []

    receiver_email = body.get('receiver_email')
    if not receiver_email:
        errors.append('receiver_email is required')
    elif not is_valid_email(receiver_email):
        errors.append('receiver_email must be a valid email address')

    for field_name in REQUIRED_TEXT_FIELDS:
        value = body.get(field_name)
        if not value:
            errors.append(f'{field_name} is required')
        elif not isinstance(value, str):
            errors.append(f'{field_name} must be a string')
        elif not value.strip():
            errors.append(f'{field_name} cannot be empty')

    return errors


def to_email_request(body: Dict[str, Any]) -> EmailRequest:
    """Build an EmailRequest from a body that passed validate_request()."""
    return EmailRequest(
        receiver_email=body['receiver_email'],
        subject=body['subject'],
        body_text=body['body_text']
    )
