"""Host-side cancellation signal for a single completion opportunity."""

from __future__ import annotations

import logging
from typing import Callable

LOG = logging.getLogger(__name__)

CancellationListener = Callable[[], None]


class CancellationToken:
    """Read-only view handed to the provider; fires listeners once."""

    def __init__(self) -> None:
        self._cancelled = False
        self._listeners: list[CancellationListener] = []

    @property
    def is_cancellation_requested(self) -> bool:
        return self._cancelled

    def on_cancellation_requested(self, listener: CancellationListener) -> Callable[[], None]:
        """Register a listener; returns an unsubscribe handle.

        Listeners registered after cancellation run immediately.
        """

        if self._cancelled:
            listener()
            return lambda: None
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            try:
                self._listeners.remove(listener)
            except ValueError:
                pass

        return _unsubscribe

    def _fire(self) -> None:
        if self._cancelled:
            return
        self._cancelled = True
        listeners = tuple(self._listeners)
        self._listeners.clear()
        for listener in listeners:
            try:
                listener()
            except Exception:
                LOG.exception("Cancellation listener failed")


class CancellationTokenSource:
    """Owner side of a :class:`CancellationToken`."""

    def __init__(self) -> None:
        self._token = CancellationToken()

    @property
    def token(self) -> CancellationToken:
        return self._token

    def cancel(self) -> None:
        self._token._fire()

    def dispose(self) -> None:
        """Drop listeners without firing them."""

        self._token._listeners.clear()


__all__ = ["CancellationListener", "CancellationToken", "CancellationTokenSource"]
