"""Streaming entry point: byte stream in, callbacks out."""

import logging
from collections.abc import AsyncIterable, Callable

from src.models.schemas import QueryResult
from src.streaming.accumulator import ChunkCallback, CompleteCallback, EventAccumulator
from src.streaming.errors import DEFAULT_STREAMING_MESSAGE, StreamingError
from src.streaming.line_framer import LineFramer

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[StreamingError], None]


async def _release(byte_stream: AsyncIterable[bytes]) -> None:
    aclose = getattr(byte_stream, "aclose", None)
    if aclose is not None:
        await aclose()


async def _read_until_complete(
    byte_stream: AsyncIterable[bytes],
    framer: LineFramer,
    accumulator: EventAccumulator,
) -> None:
    async for chunk in byte_stream:
        for line in framer.feed(chunk):
            accumulator.apply(line)
            if accumulator.completed:
                return

    trailing = framer.finish()
    if trailing is not None:
        accumulator.apply(trailing)
    accumulator.finish()


async def decode_stream(
    byte_stream: AsyncIterable[bytes],
    on_chunk: ChunkCallback,
    on_complete: CompleteCallback,
    on_error: ErrorCallback,
) -> None:
    """Decode a live event stream into one answer.

    Reads chunks sequentially, frames them into lines and folds each line
    into the response state. Stops at the first ``complete`` or ``error``
    event; a stream that ends without one completes from whatever was
    accumulated. The stream is closed on every exit path.

    Exactly one of ``on_complete`` or ``on_error`` is invoked. Failures are
    never raised to the caller.

    Args:
        byte_stream: Open response body yielding raw chunks.
        on_chunk: Receives the full text so far, superseding earlier calls.
        on_complete: Receives the final result.
        on_error: Receives the failure that ended the session.
    """
    framer = LineFramer()
    results: list[QueryResult] = []
    accumulator = EventAccumulator(on_chunk=on_chunk, on_complete=results.append)

    try:
        try:
            await _read_until_complete(byte_stream, framer, accumulator)
        finally:
            await _release(byte_stream)
    except StreamingError as e:
        logger.warning(f"Stream ended with error: {e.message}")
        on_error(e)
        return
    except Exception as e:
        logger.warning(f"Stream failed while decoding: {e!r}")
        on_error(StreamingError(str(e) or DEFAULT_STREAMING_MESSAGE))
        return

    logger.info(f"Stream completed (success={results[0].success})")
    on_complete(results[0])
