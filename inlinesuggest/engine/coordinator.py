"""Debounced, single-flight coordinator turning editor triggers into suggestions.

Each call to :meth:`SuggestionCoordinator.provide_inline_completion_items`
starts one cycle::

    Idle -> Debouncing -> InFlight -> Delivered | Dropped | Failed

A new trigger tears down the previous cycle synchronously, before its own
timer is scheduled, so at most one cycle (and one backend call) is alive at a
time. Only backend failures are reported to the user; cancelled, stale and
empty cycles resolve quietly with an empty :class:`InlineCompletionList`.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from inlinesuggest.config import AppConfig

from .cancellation import CancellationToken
from .channel import BusyIndicator, RequestChannel, RequestHandle
from .debounce import DebounceGate, DebounceHandle
from .document import TextDocument
from .errors import BackendError, EmptySuggestion, RequestCancelled, StaleSuggestion
from .models import (
    CompletionContext,
    CycleReport,
    CycleState,
    DropReason,
    GeneratedSuggestion,
    InlineCompletionList,
    Position,
    Trigger,
)
from .presentation import clean, extract_text, package, to_completion_list
from .prompt import build_payload

LOG = logging.getLogger(__name__)

ErrorReporter = Callable[[str], None]
CycleListener = Callable[[CycleReport], None]


@dataclass(slots=True, eq=False)
class _PendingRequest:
    """One debounce-to-completion lifecycle."""

    trigger: Trigger
    result: asyncio.Future[InlineCompletionList]
    state: CycleState = CycleState.DEBOUNCING
    timer: DebounceHandle | None = None
    request: RequestHandle | None = None
    release_token: Callable[[], None] | None = None

    @property
    def completed(self) -> bool:
        return self.result.done()


class SuggestionCoordinator:
    """Owns the pending request and every state transition of a suggestion cycle."""

    def __init__(
        self,
        config: AppConfig | None = None,
        *,
        channel: RequestChannel | None = None,
        gate: DebounceGate | None = None,
        indicator: BusyIndicator | None = None,
        report_error: ErrorReporter | None = None,
    ) -> None:
        self._config = config or AppConfig()
        self._channel = channel or RequestChannel(self._config, indicator=indicator)
        self._gate = gate or DebounceGate()
        self._report_error = report_error or _log_backend_error
        self._pending: _PendingRequest | None = None
        self._listeners: set[CycleListener] = set()
        self._last_report: CycleReport | None = None
        self._disposed = False

    @property
    def state(self) -> CycleState:
        """State of the live cycle, or ``IDLE`` when there is none."""

        if self._pending is None:
            return CycleState.IDLE
        return self._pending.state

    @property
    def pending_version(self) -> int | None:
        """Document version captured by the live cycle."""

        if self._pending is None:
            return None
        return self._pending.trigger.version

    @property
    def last_report(self) -> CycleReport | None:
        return self._last_report

    @property
    def disposed(self) -> bool:
        return self._disposed

    async def provide_inline_completion_items(
        self,
        document: TextDocument,
        position: Position,
        context: CompletionContext | None = None,
        token: CancellationToken | None = None,
    ) -> InlineCompletionList:
        """Start a cycle for ``document`` at ``position`` and wait for its result.

        Never raises for dropped or failed cycles; an empty list means there is
        no suggestion this time.
        """

        if self._disposed or (token is not None and token.is_cancellation_requested):
            return InlineCompletionList()
        trigger = Trigger(
            text=document.get_text(),
            version=document.version,
            position=position,
            uri=document.uri,
        )
        cycle = _PendingRequest(trigger=trigger, result=asyncio.get_running_loop().create_future())
        self._replace_pending(cycle)
        cycle.timer = self._gate.schedule(self._config.debounce_ms, lambda: self._fire(cycle, document))
        if token is not None:
            cycle.release_token = token.on_cancellation_requested(
                lambda: self._drop(cycle, DropReason.CANCELLED)
            )
        LOG.debug(
            "Suggestion cycle scheduled",
            extra={
                "version": trigger.version,
                "trigger_kind": (context or CompletionContext()).trigger_kind.value,
            },
        )
        try:
            return await asyncio.shield(cycle.result)
        except asyncio.CancelledError:
            self._drop(cycle, DropReason.CANCELLED)
            raise

    def cancel_pending(self) -> None:
        """Drop the live cycle, if any, as cancelled by the host."""

        if self._pending is not None:
            self._drop(self._pending, DropReason.CANCELLED)

    def subscribe(self, listener: CycleListener) -> Callable[[], None]:
        """Subscribe to terminal cycle reports; returns an unsubscribe handle."""

        self._listeners.add(listener)

        def _unsubscribe() -> None:
            self._listeners.discard(listener)

        return _unsubscribe

    def dispose(self) -> None:
        """Release the pending request and the busy indicator. Idempotent."""

        self.cancel_pending()
        self._channel.cancel()
        self._disposed = True

    async def aclose(self) -> None:
        self.dispose()
        await self._channel.aclose()

    def _replace_pending(self, cycle: _PendingRequest) -> _PendingRequest | None:
        """Install ``cycle`` as the live one after cancelling its predecessor."""

        previous = self._pending
        if previous is not None:
            self._drop(previous, DropReason.CANCELLED)
        self._pending = cycle
        return previous

    async def _fire(self, cycle: _PendingRequest, document: TextDocument) -> None:
        if cycle.completed:
            return
        cycle.state = CycleState.IN_FLIGHT
        LOG.debug("Requesting suggestion", extra={"version": cycle.trigger.version})
        cycle.request = self._channel.send(build_payload(cycle.trigger, self._config))
        try:
            data = await cycle.request.result()
            suggestion = self._validate(cycle, document, data)
        except RequestCancelled:
            self._drop(cycle, DropReason.CANCELLED)
        except StaleSuggestion:
            self._drop(cycle, DropReason.STALE)
        except EmptySuggestion:
            self._drop(cycle, DropReason.EMPTY)
        except BackendError as exc:
            self._fail(cycle, str(exc))
        except asyncio.CancelledError:
            self._drop(cycle, DropReason.CANCELLED)
            raise
        except Exception:
            LOG.exception("Suggestion cycle failed", extra={"version": cycle.trigger.version})
            self._fail(cycle, "Unexpected error while generating a suggestion")
        else:
            self._finish(cycle, CycleState.DELIVERED, suggestion=suggestion)

    def _validate(self, cycle: _PendingRequest, document: TextDocument, data: Any) -> GeneratedSuggestion:
        if cycle.completed or cycle is not self._pending:
            raise RequestCancelled("Cycle was superseded")
        trigger = cycle.trigger
        if document.version != trigger.version:
            raise StaleSuggestion(f"Document moved from version {trigger.version} to {document.version}")
        text = clean(extract_text(data))
        if not text:
            raise EmptySuggestion("Backend returned no text")
        return package(text, trigger.position, trigger.version, uri=trigger.uri)

    def _drop(self, cycle: _PendingRequest, reason: DropReason) -> None:
        self._finish(cycle, CycleState.DROPPED, reason=reason)

    def _fail(self, cycle: _PendingRequest, message: str) -> None:
        if cycle.completed:
            return
        self._finish(cycle, CycleState.FAILED, message=message)
        try:
            self._report_error(message)
        except Exception:
            LOG.exception("Error reporter failed", extra={"version": cycle.trigger.version})

    def _finish(
        self,
        cycle: _PendingRequest,
        state: CycleState,
        *,
        reason: DropReason | None = None,
        suggestion: GeneratedSuggestion | None = None,
        message: str | None = None,
    ) -> None:
        if cycle.completed:
            return
        cycle.state = state
        if cycle.timer is not None:
            self._gate.cancel(cycle.timer)
        if cycle.request is not None and not cycle.request.settled:
            cycle.request.cancel()
        if cycle.release_token is not None:
            cycle.release_token()
            cycle.release_token = None
        if self._pending is cycle:
            self._pending = None
        result = to_completion_list(suggestion) if suggestion is not None else InlineCompletionList()
        cycle.result.set_result(result)
        report = CycleReport(
            version=cycle.trigger.version,
            state=state,
            reason=reason,
            suggestion=suggestion,
            message=message,
        )
        self._last_report = report
        LOG.debug(
            "Suggestion cycle finished",
            extra={
                "version": report.version,
                "state": state.value,
                "reason": reason.value if reason else None,
            },
        )
        self._notify(report)

    def _notify(self, report: CycleReport) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(report)
            except Exception:
                LOG.exception("Cycle listener failed", extra={"state": report.state.value})


def _log_backend_error(message: str) -> None:
    LOG.warning("Suggestion backend error: %s", message)


__all__ = ["CycleListener", "ErrorReporter", "SuggestionCoordinator"]
