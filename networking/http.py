from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from .cancellation import CancelScope

CANCEL_SCOPE_EXTENSION = "cancel_scope"


class CancellableTransport(httpx.AsyncBaseTransport):
    """
    Transport wrapper that honours the cancel scope attached to a request.

    Requests carrying a ``CancelScope`` under ``CANCEL_SCOPE_EXTENSION`` are
    raced against that scope; requests without one pass straight through.
    """

    def __init__(self, transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self._transport = transport if transport is not None else httpx.AsyncHTTPTransport()

    @property
    def wrapped(self) -> httpx.AsyncBaseTransport:
        return self._transport

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        scope: Optional[CancelScope] = request.extensions.get(CANCEL_SCOPE_EXTENSION)
        if scope is None:
            return await self._transport.handle_async_request(request)
        return await scope.run(self._transport.handle_async_request(request))

    async def aclose(self) -> None:
        await self._transport.aclose()


def create_httpx_client(
    transport: Optional[httpx.AsyncBaseTransport] = None,
    *,
    timeout: Optional[httpx.Timeout] = None,
    **kwargs: Any,
) -> httpx.AsyncClient:
    """
    Return an AsyncClient whose requests respect their cancel scope.

    Args:
        transport: Underlying transport. When ``None``, a standard
            ``httpx.AsyncHTTPTransport`` is created for this client.
        timeout: Optional explicit timeout. If omitted, httpx defaults are used.
        **kwargs: Additional parameters forwarded to ``httpx.AsyncClient``.
    """
    client_kwargs: Dict[str, Any] = dict(kwargs)

    if timeout is not None:
        client_kwargs["timeout"] = timeout

    client_kwargs["transport"] = CancellableTransport(transport)

    return httpx.AsyncClient(**client_kwargs)
