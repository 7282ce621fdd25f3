"""
Mail port: the boundary between the request handler and any mail provider.

Transports translate provider-specific failures into the closed exception
set below before anything reaches the handler.
"""

from typing import Protocol

from domain.models import MailMessage, SendReceipt


# ============================================================================
# Exception Classes
# ============================================================================

class MailPortError(Exception):
    """Base class for every categorized mail port failure."""
    pass


class ConnectivityError(MailPortError):
    """Raised when the provider cannot be reached or refuses the session before sending."""
    pass


class SendError(MailPortError):
    """Raised when sending fails for a reason with no more specific category."""
    pass


class AuthError(SendError):
    """Raised when the provider rejects the configured credentials."""
    pass


class MailConnectionError(SendError):
    """Raised when the connection to the provider fails while sending."""
    pass


class RecipientRejectedError(SendError):
    """Raised when the provider permanently rejects the recipient (SMTP 550)."""
    pass


# ============================================================================
# Port Protocol
# ============================================================================

class MailPort(Protocol):
    """Protocol implemented by mail transports."""

    def verify_connectivity(self) -> None:
        """Check that the provider is reachable and accepts the credentials."""
        ...

    def send(self, message: MailMessage) -> SendReceipt:
        """Send one message and return the provider's message id."""
        ...
