"""Custom exceptions for transport and cancellation utilities."""


class NetworkingError(Exception):
    """Base class for networking-related errors."""


class RequestCancelledError(NetworkingError):
    """Raised when a cancellation scope fires before an operation completes."""

    def __init__(self, reason: str = "cancelled") -> None:
        super().__init__(reason)
        self.reason = reason
