"""
SSM Parameter Store utilities for Lambda handlers.

This module reads secrets (the SMTP app password) from AWS Systems Manager
Parameter Store.
"""

import logging

import boto3
from botocore.config import Config
from botocore.exceptions import ClientError

logger = logging.getLogger(__name__)

# Configure SSM client with timeouts to prevent hanging the cold start
ssm_config = Config(
    retries={
        'max_attempts': 1,  # 1 attempt total (no retries)
        'mode': 'standard'
    },
    connect_timeout=5,
    read_timeout=10
)

# Initialize SSM client at module level (reused across invocations)
ssm_client = boto3.client('ssm', config=ssm_config)


def get_secure_parameter(name: str) -> str:
    """
    Fetch and decrypt a SecureString parameter.

    Args:
        name: Parameter name (e.g. "/send-email/gmail-app-password")

    Returns:
        str: The decrypted parameter value

    Raises:
        ValueError: If the name is empty or the parameter does not exist
        ClientError: For other AWS service errors

    Example:
        >>> password = get_secure_parameter("/send-email/gmail-app-password")
    """
    if not name:
        raise ValueError("SSM parameter name cannot be empty")

    try:
        response = ssm_client.get_parameter(Name=name, WithDecryption=True)
        return response['Parameter']['Value']
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code', '')
        if error_code == 'ParameterNotFound':
            logger.error(f"SSM parameter not found: {name}")
            raise ValueError(f"SSM parameter not found: {name}")
        else:
            error_message = e.response.get('Error', {}).get('Message', str(e))
            logger.error(
                f"Failed to read SSM parameter: name={name}, "
                f"error_code={error_code}, error_message={error_message}"
            )
            raise
