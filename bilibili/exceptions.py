"""Exceptions raised by the Bilibili client."""

from networking.exceptions import RequestCancelledError


class BilibiliError(Exception):
    """Base class for Bilibili client errors."""


class SessionBootstrapError(BilibiliError):
    """Base class for failures while deriving the session cookie."""


class SessionBootstrapTransportError(SessionBootstrapError):
    """Raised when the landing-page request fails at the transport level."""


class SessionCookieMissingError(SessionBootstrapError):
    """Raised when the landing page did not set the ``buvid3`` cookie."""


class SigningError(BilibiliError):
    """
    Raised when a URL cannot be signed.

    Signers should raise this for malformed URLs or key failures; the client
    passes whatever a signer raises through untouched.
    """


class RequestConstructionError(BilibiliError):
    """Raised when an outgoing request cannot be built from method/URL/body."""


class ConfigurationError(BilibiliError):
    """Raised when client configuration from the environment is invalid."""


__all__ = [
    "BilibiliError",
    "ConfigurationError",
    "RequestCancelledError",
    "RequestConstructionError",
    "SessionBootstrapError",
    "SessionBootstrapTransportError",
    "SessionCookieMissingError",
    "SigningError",
]
