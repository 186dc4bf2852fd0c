"""
Cooperative cancellation.

Every public parser and validator entry point takes an optional
``cancel`` token and checks it before doing work and between rows.
"""

from __future__ import annotations

import threading
import time


class OperationCancelled(Exception):
    """Raised when a cancel token fired before the operation finished."""

    def __init__(self, reason: str = "operation cancelled") -> None:
        self.reason = reason
        super().__init__(reason)


class CancelToken:
    """
    Cancellation flag shared between a caller and a running parse.

    A token is cancelled explicitly via ``cancel()`` or implicitly once its
    deadline (monotonic clock) has passed.
    """

    def __init__(self, deadline: float | None = None) -> None:
        self._event = threading.Event()
        self._deadline = deadline
        self._reason = "operation cancelled"

    @classmethod
    def with_timeout(cls, seconds: float) -> CancelToken:
        """Create a token that expires ``seconds`` from now."""
        return cls(deadline=time.monotonic() + seconds)

    def cancel(self, reason: str | None = None) -> None:
        if reason:
            self._reason = reason
        self._event.set()

    @property
    def cancelled(self) -> bool:
        if self._event.is_set():
            return True
        if self._deadline is not None and time.monotonic() >= self._deadline:
            self._reason = "deadline exceeded"
            self._event.set()
            return True
        return False

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled if the token has fired."""
        if self.cancelled:
            raise OperationCancelled(self._reason)


def check_cancelled(cancel: CancelToken | None) -> None:
    """Raise OperationCancelled if ``cancel`` is set and has fired."""
    if cancel is not None:
        cancel.raise_if_cancelled()
