"""Cooperative cancellation token.

A token is handed to relay calls, retry waits and token streams. Work polls
it with ``raise_if_cancelled``, sleeps on it with ``wait`` (which returns
early on cancel) and registers callbacks that fire once on cancel; the relay
uses a callback to close the live HTTP response so a blocked read aborts.
"""

from __future__ import annotations

import logging
from threading import Event, Lock
from typing import Callable, Iterable

from .cancelled_error import CancelledError
from .state import State

Callback = Callable[[], None]

_logger = logging.getLogger("omnirelay.cancellation")


def _fire(callbacks: Iterable[Callback]) -> None:
    for callback in callbacks:
        try:
            callback()
        except Exception:  # noqa: BLE001 - one failing callback must not skip the rest
            _logger.debug("cancel callback failed", exc_info=True)


class CancellationToken:
    """Thread-safe cancellation flag with callbacks.

    ``CancellationToken(parent=p)`` (or ``p.child()``) is cancelled together
    with ``p``, inheriting its reason.
    """

    def __init__(self, *, parent: "CancellationToken | None" = None) -> None:
        self._state = State()
        self._lock = Lock()
        self._done = Event()
        if parent is not None:
            parent.link_child(self)

    @property
    def cancelled(self) -> bool:
        return self._state.cancelled

    @property
    def reason(self) -> str | None:
        """Reason given to :meth:`cancel`, if any."""
        return self._state.reason

    def cancel(self, reason: str | None = None) -> None:
        """Mark the token cancelled and fire pending callbacks. Idempotent."""
        with self._lock:
            if self._state.cancelled:
                return
            self._state.cancelled = True
            self._state.reason = reason
            pending, self._state.callbacks = self._state.callbacks, []
        self._done.set()
        _fire(pending)

    def add_callback(self, callback: Callback) -> Callable[[], None]:
        """Run ``callback`` once on cancel (immediately if already cancelled).

        Returns a function that unregisters the callback.
        """
        with self._lock:
            late = self._state.cancelled
            if not late:
                self._state.callbacks.append(callback)
        if late:
            _fire([callback])

        def remove() -> None:
            with self._lock:
                if callback in self._state.callbacks:
                    self._state.callbacks.remove(callback)

        return remove

    def link_child(self, token: "CancellationToken") -> "CancellationToken":
        """Cancel ``token`` whenever this token is cancelled; returns ``token``."""
        self.add_callback(lambda: token.cancel(self.reason))
        return token

    def child(self) -> "CancellationToken":
        return CancellationToken(parent=self)

    def raise_if_cancelled(self) -> None:
        if self._state.cancelled:
            raise CancelledError(self._state.reason or "operation cancelled")

    def wait(self, seconds: float) -> None:
        """Block up to ``seconds``.

        Raises:
            CancelledError: if the token is cancelled before or during the wait.
        """
        self.raise_if_cancelled()
        if seconds > 0 and self._done.wait(seconds):
            self.raise_if_cancelled()

    def __repr__(self) -> str:  # pragma: no cover - introspection aid
        return f"CancellationToken(cancelled={self._state.cancelled}, reason={self._state.reason!r})"


__all__ = ["CancellationToken"]
