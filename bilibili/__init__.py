"""
Bilibili web API client.

Session cookies, one-shot ``buvid3`` bootstrap and signed request assembly
for the Bilibili API, built on httpx.
"""

from .client import BilibiliClient, BootstrapState
from .config import ClientConfig, RequestConfig, Signer, load_cookies_from_env
from .exceptions import (
    BilibiliError,
    ConfigurationError,
    RequestCancelledError,
    RequestConstructionError,
    SessionBootstrapError,
    SessionBootstrapTransportError,
    SessionCookieMissingError,
    SigningError,
)

__all__ = [
    "BilibiliClient",
    "BilibiliError",
    "BootstrapState",
    "ClientConfig",
    "ConfigurationError",
    "RequestCancelledError",
    "RequestConfig",
    "RequestConstructionError",
    "SessionBootstrapError",
    "SessionBootstrapTransportError",
    "SessionCookieMissingError",
    "Signer",
    "SigningError",
    "load_cookies_from_env",
]
