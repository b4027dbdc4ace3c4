from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Callable, List, Optional

import dotenv
import httpx

from networking.cancellation import CancelScope
from networking.models import Cookie, parse_cookie_header

from .common import DEFAULT_USER_AGENT
from .exceptions import ConfigurationError

# Turns a URL into the same URL with signature query parameters appended.
Signer = Callable[[str], str]


@dataclass(slots=True, frozen=True)
class ClientConfig:
    """
    Construction-time options for ``BilibiliClient``.

    Attributes:
        transport: httpx transport used for every request. ``None`` creates a
            standard ``httpx.AsyncHTTPTransport`` per client.
        cancel_scope: Scope governing all network operations of the client.
            ``None`` creates a fresh scope that nobody else can cancel.
        signer: URL signing function applied when a request asks for signing.
        user_agent: Value of the ``User-Agent`` header on every request.
        timeout: httpx timeout for the client. ``None`` keeps httpx defaults.
    """

    transport: Optional[httpx.AsyncBaseTransport] = None
    cancel_scope: Optional[CancelScope] = None
    signer: Optional[Signer] = None
    user_agent: str = DEFAULT_USER_AGENT
    timeout: Optional[httpx.Timeout] = None

    @classmethod
    def from_env(
        cls,
        env_file: Optional[str] = None,
        *,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        cancel_scope: Optional[CancelScope] = None,
        signer: Optional[Signer] = None,
    ) -> "ClientConfig":
        """
        Build a config from ``BILIBILI_*`` environment variables.

        Reads ``BILIBILI_USER_AGENT`` and ``BILIBILI_TIMEOUT`` (seconds). When
        ``env_file`` is given it is loaded first without overriding variables
        already present in the environment.
        """
        if env_file:
            dotenv.load_dotenv(env_file)

        user_agent = os.getenv("BILIBILI_USER_AGENT") or DEFAULT_USER_AGENT

        timeout = None
        raw_timeout = os.getenv("BILIBILI_TIMEOUT")
        if raw_timeout:
            try:
                seconds = float(raw_timeout)
            except ValueError as exc:
                raise ConfigurationError(f"BILIBILI_TIMEOUT must be a number, got '{raw_timeout}'") from exc
            if seconds <= 0:
                raise ConfigurationError(f"BILIBILI_TIMEOUT must be positive, got {seconds}")
            timeout = httpx.Timeout(seconds)

        return cls(
            transport=transport,
            cancel_scope=cancel_scope,
            signer=signer,
            user_agent=user_agent,
            timeout=timeout,
        )


@dataclass(slots=True, frozen=True)
class RequestConfig:
    """
    Per-request options for ``BilibiliClient.build_request``.

    Attributes:
        sign: Pass the URL through the client's signer first (default).
    """

    sign: bool = True


def load_cookies_from_env(env_file: Optional[str] = None) -> List[Cookie]:
    """Parse the raw ``BILIBILI_COOKIE`` header string, empty when unset."""
    if env_file:
        dotenv.load_dotenv(env_file)

    raw = os.getenv("BILIBILI_COOKIE", "")
    try:
        return parse_cookie_header(raw)
    except ValueError as exc:
        raise ConfigurationError(f"BILIBILI_COOKIE is malformed: {exc}") from exc
