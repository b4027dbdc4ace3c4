from __future__ import annotations

import asyncio
from typing import Awaitable, Optional, TypeVar

from .exceptions import RequestCancelledError

T = TypeVar("T")


class CancelScope:
    """
    Caller-owned switch that aborts every network operation bound to it.

    A scope starts live. Once ``cancel()`` is called it stays cancelled:
    in-flight operations wrapped with ``run()`` are interrupted and later
    ones fail immediately with ``RequestCancelledError``.

    Usage:
        scope = CancelScope()
        client = BilibiliClient(config=ClientConfig(cancel_scope=scope))
        ...
        scope.cancel("shutting down")

    ``cancel()`` must be called from the thread running the event loop.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: Optional[str] = None

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "cancelled") -> None:
        """Cancel the scope. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    async def wait(self) -> None:
        """Block until the scope is cancelled."""
        await self._event.wait()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelledError(self._reason or "cancelled")

    async def run(self, awaitable: Awaitable[T]) -> T:
        """
        Await ``awaitable`` unless the scope fires first.

        Raises:
            RequestCancelledError: The scope was cancelled before or while
                the operation ran. The operation itself is cancelled.
        """
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            self.raise_if_cancelled()

        operation = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            done, _ = await asyncio.wait({operation, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            operation.cancel()
            waiter.cancel()
            raise

        if operation in done:
            waiter.cancel()
            return operation.result()

        operation.cancel()
        # Let the interrupted operation unwind before reporting cancellation.
        await asyncio.gather(operation, return_exceptions=True)
        raise RequestCancelledError(self._reason or "cancelled")

    def __repr__(self) -> str:
        state = f"cancelled ({self._reason})" if self.cancelled else "live"
        return f"<CancelScope {state}>"
