"""
Data models for the send-email domain.

These type-safe data structures define clear contracts between components.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class EmailRequest:
    """
    Validated email request received from the HTTP caller.

    Attributes:
        receiver_email: Recipient address (as sent by the caller)
        subject: Subject line (untrimmed)
        body_text: Plain text body (untrimmed)
    """
    receiver_email: str
    subject: str
    body_text: str

    def to_mail_message(self, sender_address: str) -> 'MailMessage':
        """Build the outgoing message, trimming subject and body."""
        return MailMessage(
            from_address=sender_address,
            to_address=self.receiver_email,
            subject=self.subject.strip(),
            text=self.body_text.strip()
        )


@dataclass(frozen=True)
class MailMessage:
    """
    Message handed to the mail port.

    Attributes:
        from_address: Configured sender address
        to_address: Recipient address
        subject: Trimmed subject line
        text: Trimmed plain text body
    """
    from_address: str
    to_address: str
    subject: str
    text: str


@dataclass(frozen=True)
class SendReceipt:
    """Successful delivery hand-off to the provider."""
    message_id: str


@dataclass(frozen=True)
class MailSettings:
    """
    Process-wide mail configuration, built once at cold start.

    Attributes:
        sender_address: SMTP account, also used as the From address
        sender_password: SMTP secret (app password)
        smtp_host: SMTP server hostname
        smtp_port: SMTP server port (465 = implicit TLS, otherwise STARTTLS)
        smtp_timeout: Socket timeout in seconds
        environment: Deployment stage label
    """
    sender_address: Optional[str]
    sender_password: Optional[str]
    smtp_host: str = 'smtp.gmail.com'
    smtp_port: int = 465
    smtp_timeout: float = 10.0
    environment: str = 'dev'

    @property
    def is_configured(self) -> bool:
        """True when both sender account and secret are available."""
        return bool(self.sender_address and self.sender_password)

    def __repr__(self) -> str:
        """Representation for logging (never includes the secret)."""
        return (
            f"MailSettings(sender_address={self.sender_address}, "
            f"smtp_host={self.smtp_host}, smtp_port={self.smtp_port}, "
            f"configured={self.is_configured})"
        )
