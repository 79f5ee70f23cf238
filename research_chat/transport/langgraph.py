"""HTTP transport streaming runs from a LangGraph-compatible agent server."""

from __future__ import annotations

import json
import logging
import threading
import time
from collections.abc import Iterable, Iterator, Mapping, Sequence
from typing import Any

import httpx

from ..model import Message, SubmitPayload
from ..settings import StreamSettings
from ..telemetry import log_event
from ..util.cancellation import CancellationEvent
from .base import TransportError, TransportSignals


logger = logging.getLogger(__name__)

STREAM_MODES: tuple[str, ...] = ("values", "updates")


def iter_sse_events(lines: Iterable[str]) -> Iterator[tuple[str, Any]]:
    """Yield ``(event, data)`` pairs from server-sent-event *lines*.

    ``data`` is the decoded JSON payload; frames whose data is not valid JSON
    are logged and skipped.  Frames without an ``event`` field are reported as
    ``"message"``.
    """
    event_name: str | None = None
    data_lines: list[str] = []

    def _flush() -> tuple[str, Any] | None:
        if not data_lines:
            return None
        raw = "\n".join(data_lines)
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Skipping malformed stream frame %r: %.200s", event_name, raw)
            return None
        return event_name or "message", data

    for line in lines:
        if line == "":
            frame = _flush()
            if frame is not None:
                yield frame
            event_name = None
            data_lines = []
            continue
        if line.startswith(":"):
            continue
        field_name, _sep, value = line.partition(":")
        if value.startswith(" "):
            value = value[1:]
        if field_name == "event":
            event_name = value
        elif field_name == "data":
            data_lines.append(value)
    frame = _flush()
    if frame is not None:
        yield frame


class LangGraphStreamTransport:
    """Run the research agent through the LangGraph HTTP API.

    ``submit`` blocks the calling thread while the run streams; ``stop`` may be
    called from any thread, including from a listener, and takes effect before
    the next frame is dispatched.
    """

    def __init__(
        self,
        settings: StreamSettings,
        *,
        dev: bool | None = None,
        http_transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.settings = settings
        self.signals = TransportSignals()
        self._base_url = settings.resolve_api_url(dev=dev)
        self._http_transport = http_transport
        self._messages: tuple[Message, ...] = ()
        self._is_loading = False
        self._thread_id: str | None = None
        self._run_id: str | None = None
        self._lock = threading.Lock()
        self._cancel = CancellationEvent()

    # ------------------------------------------------------------------
    @property
    def base_url(self) -> str:
        return self._base_url

    # ------------------------------------------------------------------
    @property
    def messages(self) -> tuple[Message, ...]:
        return self._messages

    # ------------------------------------------------------------------
    @property
    def is_loading(self) -> bool:
        return self._is_loading

    # ------------------------------------------------------------------
    @property
    def thread_id(self) -> str | None:
        return self._thread_id

    # ------------------------------------------------------------------
    def _client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self._base_url,
            timeout=httpx.Timeout(self.settings.timeout_seconds),
            transport=self._http_transport,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Accept": "text/event-stream"}
        if self.settings.api_key:
            headers["X-Api-Key"] = self.settings.api_key
        return headers

    # ------------------------------------------------------------------
    def _set_messages(self, messages: Sequence[Message]) -> None:
        new_messages = tuple(messages)
        if new_messages == self._messages:
            return
        self._messages = new_messages
        self.signals.thread_changed.emit()

    def _set_loading(self, value: bool) -> None:
        if value == self._is_loading:
            return
        self._is_loading = value
        self.signals.thread_changed.emit()

    # ------------------------------------------------------------------
    def _ensure_thread(self, client: httpx.Client) -> str:
        if self._thread_id is not None:
            return self._thread_id
        response = client.post("/threads", json={}, headers=self._headers())
        response.raise_for_status()
        try:
            body = response.json()
        except ValueError as exc:
            raise TransportError("Agent server returned a malformed thread payload") from exc
        thread_id = body.get("thread_id") if isinstance(body, Mapping) else None
        if not isinstance(thread_id, str) or not thread_id:
            raise TransportError("Agent server did not return a thread identifier")
        self._thread_id = thread_id
        logger.debug("Created agent thread %s", thread_id)
        return thread_id

    # ------------------------------------------------------------------
    def submit(self, payload: SubmitPayload) -> None:
        """Stream one run for *payload*, dispatching frames as they arrive."""
        self._cancel.clear()
        self._set_messages(payload.messages)
        self._set_loading(True)
        start = time.monotonic()
        final_values: Mapping[str, Any] | None = None
        frames = 0
        body = {
            "assistant_id": self.settings.assistant_id,
            "input": payload.to_dict(messages_key=self.settings.messages_key),
            "stream_mode": list(STREAM_MODES),
        }
        try:
            with self._client() as client:
                thread_id = self._ensure_thread(client)
                path = f"/threads/{thread_id}/runs/stream"
                log_event(
                    "STREAM_REQUEST",
                    {
                        "url": f"{self._base_url}{path}",
                        "headers": self._headers(),
                        "body": body,
                    },
                    level=logging.DEBUG,
                )
                with client.stream(
                    "POST", path, json=body, headers=self._headers()
                ) as response:
                    response.raise_for_status()
                    for event_name, data in iter_sse_events(response.iter_lines()):
                        if self._cancel.cancelled:
                            break
                        frames += 1
                        values = self._dispatch(event_name, data)
                        if values is not None:
                            final_values = values
                        if event_name == "end":
                            break
        except httpx.HTTPError as exc:
            log_event(
                "STREAM_RESULT",
                {"error": str(exc), "frames": frames},
                start_time=start,
                level=logging.ERROR,
            )
            raise TransportError(str(exc)) from exc
        except KeyboardInterrupt:
            # The run id is still known here; it is cleared below.
            self.stop()
            raise
        finally:
            with self._lock:
                self._run_id = None
            self._set_loading(False)

        cancelled = self._cancel.cancelled
        log_event(
            "STREAM_RESULT",
            {"frames": frames, "cancelled": cancelled, "messages": len(self._messages)},
            start_time=start,
        )
        if not cancelled:
            self.signals.finished.emit(final_values)

    # ------------------------------------------------------------------
    def _dispatch(self, event_name: str, data: Any) -> Mapping[str, Any] | None:
        if event_name == "metadata":
            run_id = data.get("run_id") if isinstance(data, Mapping) else None
            with self._lock:
                self._run_id = run_id if isinstance(run_id, str) else None
            return None
        if event_name == "updates":
            if isinstance(data, Mapping):
                self.signals.update_received.emit(data)
            return None
        if event_name == "values":
            if not isinstance(data, Mapping):
                return None
            raw_messages = data.get(self.settings.messages_key)
            if isinstance(raw_messages, Sequence) and not isinstance(raw_messages, str):
                self._set_messages(
                    [
                        Message.from_dict(item)
                        for item in raw_messages
                        if isinstance(item, Mapping)
                    ]
                )
            return data
        if event_name == "error":
            message = None
            if isinstance(data, Mapping):
                message = data.get("message") or data.get("error")
            log_event("STREAM_ERROR", {"error": data}, level=logging.ERROR)
            raise TransportError(str(message or "Agent run failed"))
        logger.debug("Ignoring stream frame %r", event_name)
        return None

    # ------------------------------------------------------------------
    def stop(self) -> None:
        """Abort the active run and ask the server to cancel it."""
        self._cancel.set()
        with self._lock:
            thread_id = self._thread_id
            run_id = self._run_id
        if thread_id is None or run_id is None:
            return
        try:
            with self._client() as client:
                response = client.post(
                    f"/threads/{thread_id}/runs/{run_id}/cancel",
                    headers=self._headers(),
                )
                response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("Failed to cancel run %s on the agent server: %s", run_id, exc)


__all__ = ["LangGraphStreamTransport", "STREAM_MODES", "iter_sse_events"]
