"""
SMTP Mail Port

This module implements the mail port over an authenticated SMTP session
(Gmail by default). Each call opens its own session; nothing is pooled
across invocations.

Usage:
    from integrations.smtp_transport import SmtpMailPort

    port = SmtpMailPort.from_settings(settings)
    port.verify_connectivity()
    receipt = port.send(message)
    print(receipt.message_id)
"""

import logging
import smtplib
import ssl

from domain.models import MailMessage, MailSettings, SendReceipt
from integrations.mail_port import (
    AuthError,
    ConnectivityError,
    MailConnectionError,
    RecipientRejectedError,
    SendError,
)
from services import email as email_service

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465
RECIPIENT_REJECTED_CODE = 550


def categorize_smtp_error(error: Exception) -> SendError:
    """
    Translate an smtplib/socket failure into the closed SendError set.

    Only reply code 550 counts as a rejected recipient; 551-554 fall through
    to the generic category.

    Args:
        error: Exception raised while building the message or talking to the server

    Returns:
        SendError (or subclass) instance, not yet raised
    """
    if isinstance(error, smtplib.SMTPAuthenticationError):
        return AuthError(f"SMTP authentication failed: {error}")

    if isinstance(error, smtplib.SMTPRecipientsRefused):
        codes = [code for code, _ in error.recipients.values()]
        if RECIPIENT_REJECTED_CODE in codes:
            return RecipientRejectedError(f"Recipient rejected: {error.recipients}")
        return SendError(f"Recipients refused: {error.recipients}")

    if isinstance(error, (smtplib.SMTPConnectError, smtplib.SMTPServerDisconnected)):
        return MailConnectionError(f"SMTP connection failed: {error}")

    if isinstance(error, smtplib.SMTPResponseException):
        if error.smtp_code == RECIPIENT_REJECTED_CODE:
            return RecipientRejectedError(f"Recipient rejected: {error.smtp_code} {error.smtp_error!r}")
        return SendError(f"SMTP error {error.smtp_code}: {error.smtp_error!r}")

    if isinstance(error, smtplib.SMTPException):
        return SendError(f"SMTP error: {error}")

    # Socket-level failures: refused, unreachable, timeouts, TLS errors
    if isinstance(error, OSError):
        return MailConnectionError(f"Connection to SMTP server failed: {error}")

    return SendError(f"Unexpected send failure: {error}")


class SmtpMailPort:
    """
    Mail port backed by an authenticated SMTP session.

    Port 465 uses implicit TLS; any other port upgrades with STARTTLS.
    """

    def __init__(self, host: str, port: int, username: str, password: str, timeout: float = 10.0):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.timeout = timeout

    @classmethod
    def from_settings(cls, settings: MailSettings) -> 'SmtpMailPort':
        return cls(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.sender_address,
            password=settings.sender_password,
            timeout=settings.smtp_timeout
        )

    def _open_session(self) -> smtplib.SMTP:
        """
        Connect, secure and log in.

        Returns:
            Logged-in SMTP session (caller must quit it)

        Raises:
            smtplib.SMTPException, OSError: On connection or login failure
            UnicodeEncodeError: If smtplib cannot encode the credentials
        """
        context = ssl.create_default_context()

        if self.port == IMPLICIT_TLS_PORT:
            session = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout, context=context)
        else:
            session = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        try:
            if self.port != IMPLICIT_TLS_PORT:
                session.starttls(context=context)
            session.login(self.username, self.password)
        except Exception:
            session.close()
            raise

        return session

    def _quit(self, session: smtplib.SMTP) -> None:
        """End the session; a failed QUIT is logged, never raised."""
        try:
            session.quit()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP QUIT failed, closing connection: error_type={type(e).__name__}, error={e}")
            session.close()

    def verify_connectivity(self) -> None:
        """
        Open a session, log in and quit.

        Raises:
            ConnectivityError: If the session cannot be opened or the login fails
                               for any reason (including credentials smtplib
                               cannot encode)
        """
        logger.info(f"Verifying SMTP connectivity: host={self.host}, port={self.port}")

        try:
            session = self._open_session()
        except Exception as e:
            logger.error(
                f"SMTP connectivity check failed: host={self.host}, port={self.port}, "
                f"error_type={type(e).__name__}, error={e}"
            )
            raise ConnectivityError(f"Unable to reach {self.host}:{self.port}: {e}") from e

        self._quit(session)
        logger.info("SMTP connectivity verified")

    def send(self, message: MailMessage) -> SendReceipt:
        """
        Send one plain text message.

        Args:
            message: Message to deliver

        Returns:
            SendReceipt with the generated Message-ID

        Raises:
            SendError: Categorized failure (AuthError, MailConnectionError,
                       RecipientRejectedError or generic SendError)
        """
        message_id = None

        try:
            mime = email_service.build_mime_message(message)
            message_id = mime['Message-ID']

            logger.info(
                f"Sending email via SMTP: message_id={message_id}, "
                f"to={message.to_address}, subject_length={len(message.subject)}"
            )

            session = self._open_session()
            try:
                session.send_message(mime)
            finally:
                self._quit(session)
        except Exception as e:
            send_error = categorize_smtp_error(e)
            logger.error(
                f"SMTP send failed: message_id={message_id}, "
                f"category={type(send_error).__name__}, "
                f"error_type={type(e).__name__}, error={e}"
            )
            raise send_error from e

        logger.info(f"Email accepted by SMTP server: message_id={message_id}")
        return SendReceipt(message_id=message_id)
