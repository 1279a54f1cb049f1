"""Incremental decoding of streamed answers.

Consumes a live, chunked ``data: <json>`` event stream and rebuilds one
coherent answer from it.

Responsibilities:
    - Line framing across chunk boundaries, including split multi-byte text
    - Event parsing that skips comments, blank lines and malformed payloads
    - Folding events into a response-in-progress with a completion latch
    - Callback dispatch with exactly one terminal outcome per session

Knows nothing about HTTP, credentials or rendering.
"""

from src.streaming.accumulator import EventAccumulator, fold_event, parse_event_line
from src.streaming.decoder import decode_stream
from src.streaming.errors import (
    QueryAPIError,
    StreamingError,
    TransportError,
    UpstreamError,
)
from src.streaming.line_framer import LineFramer

__all__ = [
    "EventAccumulator",
    "LineFramer",
    "QueryAPIError",
    "StreamingError",
    "TransportError",
    "UpstreamError",
    "decode_stream",
    "fold_event",
    "parse_event_line",
]
