"""Async debounce gate used by the suggestion coordinator."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any


class DebounceHandle:
    """Scheduled-fire handle returned by :meth:`DebounceGate.schedule`."""

    __slots__ = ("_task", "_fired", "_cancelled")

    def __init__(self) -> None:
        self._task: asyncio.Task[Any] | None = None
        self._fired = False
        self._cancelled = False

    @property
    def fired(self) -> bool:
        return self._fired

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def pending(self) -> bool:
        return not (self._fired or self._cancelled)


class DebounceGate:
    """Utility that coalesces rapid-fire triggers into a single coroutine run."""

    def __init__(self) -> None:
        self._current: DebounceHandle | None = None

    def schedule(self, delay_ms: float, action: Callable[[], Awaitable[Any]]) -> DebounceHandle:
        """Run ``action`` once ``delay_ms`` has elapsed, cancelling any pending invocation."""

        if self._current is not None:
            self.cancel(self._current)
        handle = DebounceHandle()
        loop = asyncio.get_running_loop()
        handle._task = loop.create_task(self._runner(handle, max(delay_ms, 0) / 1000, action))
        self._current = handle
        return handle

    def cancel(self, handle: DebounceHandle | None = None) -> None:
        """Prevent ``handle`` (or the current handle) from firing.

        Safe to call repeatedly and on handles that already fired.
        """

        handle = handle or self._current
        if handle is None:
            return
        if handle is self._current:
            self._current = None
        if not handle.pending:
            return
        handle._cancelled = True
        if handle._task is not None:
            handle._task.cancel()

    async def _runner(
        self,
        handle: DebounceHandle,
        delay: float,
        action: Callable[[], Awaitable[Any]],
    ) -> None:
        try:
            await asyncio.sleep(delay)
        except asyncio.CancelledError:
            return
        if handle._cancelled:
            return
        handle._fired = True
        if handle is self._current:
            self._current = None
        await action()


__all__ = ["DebounceGate", "DebounceHandle"]
