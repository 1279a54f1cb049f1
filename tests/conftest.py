"""Pytest fixtures and shared test configuration.

Provides reusable fixtures for unit and integration tests.

Fixtures:
    - recorder: Collects on_chunk / on_complete / on_error calls
    - mock_session_id: Consistent session ID for tests
"""

import json
from collections.abc import AsyncIterator, Iterable
from typing import Any

import pytest

from src.models.schemas import QueryResult
from src.streaming.errors import StreamingError


def sse_line(event: dict[str, Any]) -> str:
    """Encode one event as a ``data:`` line."""
    return f"data: {json.dumps(event)}\n"


class CallbackRecorder:
    """Records every callback invocation of one session."""

    def __init__(self) -> None:
        self.chunks: list[str] = []
        self.results: list[QueryResult] = []
        self.errors: list[StreamingError] = []

    def on_chunk(self, text: str) -> None:
        self.chunks.append(text)

    def on_complete(self, result: QueryResult) -> None:
        self.results.append(result)

    def on_error(self, error: StreamingError) -> None:
        self.errors.append(error)

    @property
    def terminal_calls(self) -> int:
        return len(self.results) + len(self.errors)

    @property
    def result(self) -> QueryResult:
        assert len(self.results) == 1, f"Expected one result, got {self.results}"
        return self.results[0]

    @property
    def error(self) -> StreamingError:
        assert len(self.errors) == 1, f"Expected one error, got {self.errors}"
        return self.errors[0]


class ChunkStream:
    """Async byte stream that records whether it was closed."""

    def __init__(self, chunks: Iterable[bytes], fail_with: Exception | None = None) -> None:
        self._chunks = list(chunks)
        self._fail_with = fail_with
        self.close_count = 0
        self.chunks_read = 0

    def __aiter__(self) -> AsyncIterator[bytes]:
        return self._iterate()

    async def _iterate(self) -> AsyncIterator[bytes]:
        for chunk in self._chunks:
            self.chunks_read += 1
            yield chunk
        if self._fail_with is not None:
            raise self._fail_with

    async def aclose(self) -> None:
        self.close_count += 1


@pytest.fixture
def recorder() -> CallbackRecorder:
    """Fresh callback recorder per test."""
    return CallbackRecorder()


@pytest.fixture
def mock_session_id() -> str:
    """Generate consistent session ID for testing.

    Returns:
        Predictable session ID for test assertions.
    """
    return "session-1700000000000"
