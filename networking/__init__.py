"""
Networking helpers shared by the vendor clients.

This package centralises cookie modelling, cancellation scopes, and the
httpx transport plumbing that binds outgoing requests to a scope so a
caller can abort in-flight and future network operations.
"""

from .cancellation import CancelScope
from .exceptions import NetworkingError, RequestCancelledError
from .http import CANCEL_SCOPE_EXTENSION, CancellableTransport, create_httpx_client
from .models import Cookie, parse_cookie_header, parse_set_cookie, render_cookie_header

__all__ = [
    "CANCEL_SCOPE_EXTENSION",
    "CancelScope",
    "CancellableTransport",
    "Cookie",
    "NetworkingError",
    "RequestCancelledError",
    "create_httpx_client",
    "parse_cookie_header",
    "parse_set_cookie",
    "render_cookie_header",
]
