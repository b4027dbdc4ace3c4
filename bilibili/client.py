"""
Bilibili web API client.

Holds the session cookies for one account, derives the anonymous ``buvid3``
device cookie once, and assembles signed requests for the API. Dispatching
the built requests is left to the caller (``send()`` is a thin convenience
over the configured httpx client).
"""

from __future__ import annotations

import asyncio
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

import httpx

from helpers.unified_logger import get_client_logger
from networking.cancellation import CancelScope
from networking.http import CANCEL_SCOPE_EXTENSION, create_httpx_client
from networking.models import Cookie, parse_set_cookie, render_cookie_header

from .common import BUVID3_COOKIE, LANDING_URL, REFERER
from .config import ClientConfig, RequestConfig
from .exceptions import (
    RequestConstructionError,
    SessionBootstrapTransportError,
    SessionCookieMissingError,
    SigningError,
)

# RFC 9110 token characters
_METHOD_TOKEN = re.compile(r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+")


class BootstrapState(str, Enum):
    UNBOOTSTRAPPED = "unbootstrapped"
    BOOTSTRAPPING = "bootstrapping"
    BOOTSTRAPPED = "bootstrapped"
    FAILED = "failed"


class BilibiliClient:
    """
    Session state holder and request assembler for the Bilibili API.

    One instance per logical account. The instance is bound to the event
    loop on which ``bootstrap()`` is first awaited.

    Usage:
        async with BilibiliClient(cookies, ClientConfig(signer=wbi.sign)) as client:
            await client.bootstrap()
            request = client.build_request("GET", "https://api.bilibili.com/x/web-interface/nav")
            response = await client.send(request)
    """

    def __init__(
        self,
        cookies: Optional[Iterable[Cookie]] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self.logger = get_client_logger("bilibili")

        self._cookies: List[Cookie] = list(cookies or [])
        self._buvid3: Optional[Cookie] = None
        self._bootstrap_task: Optional[asyncio.Future] = None

        self._cancel_scope = self.config.cancel_scope if self.config.cancel_scope is not None else CancelScope()
        self._http = create_httpx_client(self.config.transport, timeout=self.config.timeout)

    # ------------------------------------------------------------------
    # Session state
    # ------------------------------------------------------------------

    @property
    def cookies(self) -> Tuple[Cookie, ...]:
        return tuple(self._cookies)

    @property
    def buvid3(self) -> Optional[Cookie]:
        return self._buvid3

    @property
    def cancel_scope(self) -> CancelScope:
        return self._cancel_scope

    @property
    def http_client(self) -> httpx.AsyncClient:
        return self._http

    @property
    def bootstrap_state(self) -> BootstrapState:
        task = self._bootstrap_task
        if task is None:
            return BootstrapState.UNBOOTSTRAPPED
        if not task.done():
            return BootstrapState.BOOTSTRAPPING
        if task.cancelled() or task.exception() is not None:
            return BootstrapState.FAILED
        return BootstrapState.BOOTSTRAPPED

    def set_cookies(self, cookies: Iterable[Cookie]) -> None:
        """Replace the caller-supplied cookies. The ``buvid3`` cookie is kept."""
        self._cookies = list(cookies)
        self.logger.debug(f"Replaced session cookies ({len(self._cookies)} entries)")

    async def bootstrap(self) -> Cookie:
        """
        Derive the ``buvid3`` cookie from the landing page, at most once.

        Every caller awaits the same single attempt. Once it has finished,
        later calls return the cached cookie or re-raise the cached error;
        a failed instance stays failed.

        The cookie is read from the raw ``Set-Cookie`` headers; no cookie
        policy (domain match, expiry) is applied.

        Raises:
            SessionCookieMissingError: The landing page did not set ``buvid3``.
            SessionBootstrapTransportError: The landing-page request failed
                with an ``httpx.HTTPError`` or an ``OSError`` (socket, TLS,
                timeout) from the transport. Any other exception raised by
                an injected transport is a bug there and propagates as is.
            RequestCancelledError: The client's cancel scope fired first.
        """
        if self._bootstrap_task is None:
            self.logger.debug("Starting buvid3 bootstrap")
            self._bootstrap_task = asyncio.ensure_future(self._fetch_buvid3())
        # Shielded so one waiter being cancelled does not abort the shared attempt.
        return await asyncio.shield(self._bootstrap_task)

    async def _fetch_buvid3(self) -> Cookie:
        request = httpx.Request(
            "GET",
            LANDING_URL,
            headers={"User-Agent": self.config.user_agent},
            extensions=self._request_extensions(),
        )
        try:
            response = await self._http.send(request)
        except (httpx.HTTPError, OSError) as exc:
            raise SessionBootstrapTransportError(f"Landing page request failed: {exc}") from exc

        for header in response.headers.get_list("set-cookie"):
            cookie = parse_set_cookie(header)
            if cookie is not None and cookie.name == BUVID3_COOKIE:
                self._buvid3 = cookie
                self.logger.debug("Obtained buvid3 cookie")
                return self._buvid3

        raise SessionCookieMissingError(
            f"Landing page responded {response.status_code} without a {BUVID3_COOKIE} cookie"
        )

    # ------------------------------------------------------------------
    # Request assembly
    # ------------------------------------------------------------------

    def build_request(
        self,
        method: str,
        url: str,
        body: Any = None,
        config: Optional[RequestConfig] = None,
    ) -> httpx.Request:
        """
        Assemble a ready-to-send request. No network I/O happens here.

        The URL is signed first (unless ``config.sign`` is off), then the
        ``buvid3`` cookie and every stored cookie are attached in order,
        followed by the fixed ``User-Agent`` and ``Referer`` headers. The
        request carries the client's cancel scope.

        Args:
            method: HTTP method, e.g. ``"GET"``.
            url: Absolute http(s) URL. It is kept verbatim except for the
                normalisation ``httpx.URL`` applies: the host is lowercased
                and a default port (:80 / :443) is dropped.
            body: Optional raw body (bytes, str or byte iterator).
            config: Per-request options, defaults to ``RequestConfig()``.

        Raises:
            SigningError: Signing was requested but no signer is configured.
            RequestConstructionError: Method, URL or body are unusable.
            Exception: Anything raised by the signer, unchanged.
        """
        config = config or RequestConfig()

        if config.sign:
            if self.config.signer is None:
                raise SigningError("URL signing requested but no signer is configured")
            url = self.config.signer(url)

        if not isinstance(method, str) or not _METHOD_TOKEN.fullmatch(method):
            raise RequestConstructionError(f"Invalid HTTP method {method!r}")

        try:
            target = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as exc:
            raise RequestConstructionError(f"Invalid URL {url!r}: {exc}") from exc
        if target.scheme not in ("http", "https") or not target.host:
            raise RequestConstructionError(f"URL must be absolute http(s), got {url!r}")

        headers: Dict[str, str] = {}
        attached = ([self._buvid3] if self._buvid3 is not None else []) + list(self._cookies)
        if attached:
            headers["Cookie"] = render_cookie_header(attached)
        headers["User-Agent"] = self.config.user_agent
        headers["Referer"] = REFERER

        try:
            request = httpx.Request(
                method,
                target,
                headers=headers,
                content=body,
                extensions=self._request_extensions(),
            )
        except (TypeError, ValueError) as exc:
            raise RequestConstructionError(f"Cannot build {method} request for {url!r}: {exc}") from exc

        self.logger.debug(f"Built {request.method} request for {target.host}{target.path}")
        return request

    def _request_extensions(self) -> Dict[str, Any]:
        return {
            "timeout": self._http.timeout.as_dict(),
            CANCEL_SCOPE_EXTENSION: self._cancel_scope,
        }

    # ------------------------------------------------------------------
    # Dispatch and lifecycle
    # ------------------------------------------------------------------

    async def send(self, request: httpx.Request) -> httpx.Response:
        """Dispatch a built request through the configured transport."""
        return await self._http.send(request)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> "BilibiliClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()
