"""Folding of streamed ``data:`` events into a single response.

Each framed line carries at most one JSON event envelope. Events are folded
into a :class:`ResponseState` value in arrival order:

    - status: ignored (backend progress is not shown to users)
    - metadata: field-level merge of columns, rows, visualization, success
    - chunk: full-so-far text that replaces the current text
    - complete: final text, latches the state and fires ``on_complete``
    - error: latches the state and raises :class:`UpstreamError`

Malformed lines and unknown event types are skipped without ending the
session.
"""

import json
import logging
from collections.abc import Callable, Mapping
from typing import Any

from src.models.schemas import EventType, QueryResult, ResponseState, Visualization
from src.streaming.errors import DEFAULT_UPSTREAM_MESSAGE, UpstreamError

logger = logging.getLogger(__name__)

DATA_PREFIX = "data:"

ChunkCallback = Callable[[str], None]
CompleteCallback = Callable[[QueryResult], None]


def parse_event_line(line: str) -> dict[str, Any] | None:
    """Extract the JSON event carried by one framed line.

    Args:
        line: A complete line from the framer.

    Returns:
        The event object, or None for comments, blank lines, empty
        payloads and payloads that are not a JSON object.
    """
    line = line.strip()
    if not line.startswith(DATA_PREFIX):
        return None

    payload = line[len(DATA_PREFIX):].strip()
    if not payload:
        return None

    try:
        event = json.loads(payload)
    except (ValueError, RecursionError):
        logger.debug(f"Skipping malformed event payload: {payload[:80]!r}")
        return None

    if not isinstance(event, dict):
        logger.debug(f"Skipping non-object event payload: {payload[:80]!r}")
        return None
    return event


def _string_field(event: Mapping[str, Any], name: str) -> str:
    value = event.get(name)
    return value if isinstance(value, str) else ""


def chunk_text(event: Mapping[str, Any]) -> str:
    """Resolve the text of a ``chunk`` event.

    A non-empty ``accumulated`` snapshot wins over ``text``; either value is
    treated as the full text so far.
    """
    return _string_field(event, "accumulated") or _string_field(event, "text")


def _merge_metadata(state: ResponseState, event: Mapping[str, Any]) -> ResponseState:
    update: dict[str, Any] = {}

    columns = event.get("columns")
    if isinstance(columns, list):
        update["columns"] = [str(column) for column in columns]

    rows = event.get("rows")
    if isinstance(rows, list) and all(isinstance(row, list) for row in rows):
        update["rows"] = rows

    visualization = event.get("visualization")
    if visualization is not None:
        try:
            update["visualization"] = Visualization(visualization)
        except ValueError:
            logger.debug(f"Ignoring unknown visualization: {visualization!r}")

    success = event.get("success")
    if isinstance(success, bool):
        update["success"] = success

    return state.model_copy(update=update) if update else state


def fold_event(state: ResponseState, event: Mapping[str, Any]) -> ResponseState:
    """Apply one event to the response state.

    Pure: returns a new state and never invokes callbacks. A completed
    state is returned unchanged.

    Args:
        state: Current response-in-progress.
        event: Parsed event envelope.

    Returns:
        The state after the event.
    """
    if state.completed:
        return state

    event_type = event.get("type")

    if event_type == EventType.METADATA:
        return _merge_metadata(state, event)

    if event_type == EventType.CHUNK:
        text = chunk_text(event)
        if not text:
            return state
        return state.model_copy(update={"accumulated_text": text})

    if event_type == EventType.COMPLETE:
        # A complete event without an explicit flag counts as success
        event_success = event.get("success", True)
        return state.model_copy(
            update={
                "accumulated_text": _string_field(event, "text") or state.accumulated_text,
                "success": event_success is True or state.success,
                "completed": True,
            }
        )

    if event_type == EventType.ERROR:
        return state.model_copy(
            update={
                "completed": True,
                "error": _string_field(event, "message") or DEFAULT_UPSTREAM_MESSAGE,
            }
        )

    if event_type != EventType.STATUS:
        logger.debug(f"Ignoring event with unknown type: {event_type!r}")
    return state


class EventAccumulator:
    """Drives :func:`fold_event` for one session and fires callbacks.

    ``on_chunk`` receives the full text so far for every non-empty chunk
    event. ``on_complete`` fires at most once, from a ``complete`` event or
    from :meth:`finish`.
    """

    def __init__(
        self,
        on_chunk: ChunkCallback,
        on_complete: CompleteCallback,
        state: ResponseState | None = None,
    ) -> None:
        self._on_chunk = on_chunk
        self._on_complete = on_complete
        self._state = state or ResponseState()

    @property
    def state(self) -> ResponseState:
        return self._state

    @property
    def completed(self) -> bool:
        return self._state.completed

    def apply(self, line: str) -> None:
        """Fold one framed line into the session state.

        Args:
            line: A complete line from the framer.

        Raises:
            UpstreamError: If the line carries an ``error`` event.
        """
        if self._state.completed:
            return

        event = parse_event_line(line)
        if event is None:
            return

        self._state = fold_event(self._state, event)

        if self._state.error is not None:
            raise UpstreamError(self._state.error)

        if self._state.completed:
            self._on_complete(self._state.to_result())
            return

        if event.get("type") == EventType.CHUNK:
            text = chunk_text(event)
            if text:
                self._on_chunk(text)

    def finish(self) -> None:
        """Complete the session from accumulated state at end of stream.

        Does nothing when a ``complete`` or ``error`` event already ended it.
        """
        if self._state.completed:
            return

        state = self._state
        logger.info("Stream ended without a terminal event, completing from accumulated state")
        self._state = state.model_copy(update={"completed": True})
        self._on_complete(state.to_result(success=bool(state.accumulated_text) or state.success))
