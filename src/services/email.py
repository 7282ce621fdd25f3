"""
Outgoing email construction.

This module builds the MIME message handed to the SMTP session.
"""

import logging
import re
from email import policy
from email.message import EmailMessage
from email.utils import make_msgid, formatdate

from domain.models import MailMessage

logger = logging.getLogger(__name__)

LINE_BREAKS = re.compile(r"[\r\n]+")


def fold_header_value(value: str) -> str:
    """
    Replace line breaks with single spaces; header values must be one line.

    Example:
        >>> fold_header_value("Line one\\nLine two")
        "Line one Line two"
    """
    return LINE_BREAKS.sub(' ', value)


def sender_domain(address: str) -> str:
    """
    Return the domain part of an address, used for Message-ID generation.

    Example:
        >>> sender_domain("me@gmail.com")
        "gmail.com"
    """
    _, separator, domain = address.rpartition('@')
    return domain if separator and domain else 'localhost'


def build_mime_message(message: MailMessage) -> EmailMessage:
    """
    Build a plain text MIME message with a generated Message-ID.

    Args:
        message: Domain message (subject and text already trimmed)

    Returns:
        EmailMessage ready for smtplib.SMTP.send_message()

    Example:
        >>> mime = build_mime_message(MailMessage(
        ...     from_address="me@gmail.com", to_address="you@example.com",
        ...     subject="Hi", text="Hello"))
        >>> mime['Subject']
        "Hi"
    """
    mime = EmailMessage(policy=policy.SMTP)
    mime['From'] = message.from_address
    mime['To'] = message.to_address
    mime['Subject'] = fold_header_value(message.subject)
    mime['Date'] = formatdate(localtime=False, usegmt=True)
    mime['Message-ID'] = make_msgid(domain=sender_domain(message.from_address))
    mime.set_content(message.text)

    logger.debug(f"Built MIME message {mime['Message-ID']} for {message.to_address}")
    return mime
