"""
Mail configuration loading.

Settings are read from the environment once per process (cold start) and
passed explicitly to the request handler.
"""

import logging
import os
from typing import Mapping, Optional

from botocore.exceptions import BotoCoreError, ClientError

from domain.models import MailSettings

logger = logging.getLogger(__name__)

DEFAULT_SMTP_HOST = 'smtp.gmail.com'
DEFAULT_SMTP_PORT = 465
DEFAULT_SMTP_TIMEOUT = 10.0


def _read_number(environ: Mapping[str, str], key: str, default, cast):
    raw = environ.get(key)
    if not raw:
        return default
    try:
        return cast(raw)
    except ValueError:
        logger.warning(f"Invalid {key}={raw!r}, using default {default}")
        return default


def _resolve_password(environ: Mapping[str, str]) -> Optional[str]:
    """
    Return the SMTP secret from GMAIL_APP_PASSWORD, or from the SSM
    parameter named by GMAIL_APP_PASSWORD_PARAMETER.

    A failed SSM lookup returns None so the configuration guard reports it.
    """
    password = environ.get('GMAIL_APP_PASSWORD')
    if password:
        return password

    parameter_name = environ.get('GMAIL_APP_PASSWORD_PARAMETER')
    if not parameter_name:
        return None

    # ssm creates its boto3 client on import
    from services import ssm

    try:
        password = ssm.get_secure_parameter(parameter_name)
        logger.info(f"Loaded SMTP password from SSM parameter {parameter_name}")
        return password
    except (ValueError, ClientError, BotoCoreError) as e:
        logger.error(f"Failed to load SMTP password from SSM parameter {parameter_name}: {e}")
        return None


def load_mail_settings(environ: Optional[Mapping[str, str]] = None) -> MailSettings:
    """
    Build MailSettings from environment variables.

    Args:
        environ: Mapping to read from (defaults to os.environ)

    Returns:
        MailSettings (check is_configured before sending)
    """
    if environ is None:
        environ = os.environ

    settings = MailSettings(
        sender_address=environ.get('GMAIL_USER') or None,
        sender_password=_resolve_password(environ),
        smtp_host=environ.get('SMTP_HOST') or DEFAULT_SMTP_HOST,
        smtp_port=_read_number(environ, 'SMTP_PORT', DEFAULT_SMTP_PORT, int),
        smtp_timeout=_read_number(environ, 'SMTP_TIMEOUT', DEFAULT_SMTP_TIMEOUT, float),
        environment=environ.get('ENVIRONMENT', 'dev')
    )

    if settings.is_configured:
        logger.info(f"Mail settings loaded: {settings!r}")
    else:
        logger.warning(f"Mail settings incomplete: {settings!r}")

    return settings
