"""Error types raised while asking questions and decoding answers."""

DEFAULT_UPSTREAM_MESSAGE = (
    "The assistant could not find relevant information for this question."
)
DEFAULT_STREAMING_MESSAGE = "Streaming request failed"
CONNECTION_FAILED_MESSAGE = (
    "Unable to connect to the server. Please check your connection."
)


class StreamingError(Exception):
    """Base class for failures surfaced through ``on_error``."""

    def __init__(self, message: str = DEFAULT_STREAMING_MESSAGE) -> None:
        super().__init__(message)
        self.message = message


class UpstreamError(StreamingError):
    """Raised when the service sends an explicit ``error`` event."""

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or DEFAULT_UPSTREAM_MESSAGE)


class TransportError(StreamingError):
    """Connection refused, non-2xx status or body read failure."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class QueryAPIError(StreamingError):
    """Raised by the non-streaming ask-question call."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
