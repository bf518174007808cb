"""Single outbound call to the generation backend, with cooperative cancellation."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol

import httpx

from inlinesuggest.config import AppConfig

from .errors import BackendError, BackendTimeout, MalformedResponse, RequestCancelled, SuggestionError
from .prompt import GenerationPayload

LOG = logging.getLogger(__name__)


class BusyIndicator(Protocol):
    """Anything that can signal "a request is running" to the user."""

    def show(self) -> None: ...

    def hide(self) -> None: ...


class NullBusyIndicator:
    """Indicator used when the host does not provide one."""

    def show(self) -> None:
        return None

    def hide(self) -> None:
        return None


class RequestHandle:
    """Cancellation handle for one in-flight call."""

    def __init__(self, task: asyncio.Task[Any]) -> None:
        self._task = task
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def settled(self) -> bool:
        return self._task.done()

    def cancel(self) -> None:
        """Abandon the call; any later resolution is reported as cancelled."""

        self._cancelled = True
        if not self._task.done():
            self._task.cancel()

    async def result(self) -> Any:
        """Wait for the decoded response body.

        Raises :class:`RequestCancelled` if :meth:`cancel` ran first, whatever
        the transport ended up doing.
        """

        try:
            data = await self._task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if self._cancelled and not (current is not None and current.cancelling()):
                raise RequestCancelled("Request cancelled") from None
            raise
        except SuggestionError:
            if self._cancelled:
                raise RequestCancelled("Request cancelled") from None
            raise
        if self._cancelled:
            raise RequestCancelled("Request cancelled")
        return data


class RequestChannel:
    """Posts generation payloads with httpx, keeping at most one call in flight."""

    def __init__(
        self,
        config: AppConfig,
        *,
        client: httpx.AsyncClient | None = None,
        indicator: BusyIndicator | None = None,
    ) -> None:
        self._endpoint = config.endpoint
        self._timeout_ms = config.timeout_ms
        self._timeout = config.timeout_seconds
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(self._timeout))
        self._owns_client = client is None
        self._indicator: BusyIndicator = indicator or NullBusyIndicator()
        self._current: RequestHandle | None = None

    @property
    def in_flight(self) -> bool:
        return self._current is not None

    def send(self, payload: GenerationPayload) -> RequestHandle:
        """Start the call and return its handle; an older call is cancelled first."""

        if self._current is not None:
            self._current.cancel()
        loop = asyncio.get_running_loop()
        task = loop.create_task(self._post(payload))
        handle = RequestHandle(task)
        self._current = handle
        self._indicator.show()
        task.add_done_callback(lambda _task, settled=handle: self._settle(settled))
        return handle

    def cancel(self) -> None:
        """Cancel the current call, if any, and hide the busy indicator now."""

        handle = self._current
        self._current = None
        if handle is not None:
            handle.cancel()
        self._indicator.hide()

    async def aclose(self) -> None:
        self.cancel()
        if self._owns_client:
            await self._client.aclose()

    def _settle(self, handle: RequestHandle) -> None:
        if handle is not self._current:
            return
        self._current = None
        self._indicator.hide()

    async def _post(self, payload: GenerationPayload) -> Any:
        LOG.debug("Posting generation request", extra={"endpoint": self._endpoint, "model": payload.model})
        try:
            response = await asyncio.wait_for(
                self._client.post(self._endpoint, json=payload.as_json()),
                timeout=self._timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise BackendTimeout(f"Request timed out after {self._timeout_ms} ms") from exc
        except httpx.HTTPError as exc:
            raise BackendError(str(exc) or "Could not reach the generation backend") from exc
        if response.is_error:
            raise BackendError(_error_message(response), status_code=response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise MalformedResponse("Generation backend returned a non-JSON body") from exc


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, str) and error.strip():
            return error.strip()
    return f"HTTP {response.status_code} from generation backend"


__all__ = ["BusyIndicator", "NullBusyIndicator", "RequestChannel", "RequestHandle"]
