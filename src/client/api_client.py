"""HTTP client for the ask-question API.

Wraps the streaming and non-streaming endpoints behind one callback
contract: ``on_chunk`` for live text, then exactly one of ``on_complete``
or ``on_error``.
"""

import logging
from collections.abc import AsyncIterator, Callable

import httpx
from pydantic import ValidationError

from src.client.config import ClientConfig, get_client_config
from src.models.schemas import QueryResult, QuestionRequest
from src.streaming.decoder import ErrorCallback, decode_stream
from src.streaming.errors import (
    CONNECTION_FAILED_MESSAGE,
    QueryAPIError,
    StreamingError,
    TransportError,
)

logger = logging.getLogger(__name__)

ChunkCallback = Callable[[str], None]
CompleteCallback = Callable[[QueryResult], None]


class QueryAPIClient:
    """Client for asking questions of the query service.

    Each call opens its own ``httpx.AsyncClient`` so concurrent questions
    never share a connection or response state.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            transport: Optional httpx transport (used by tests).
        """
        self._config = config or get_client_config()
        self._transport = transport
        self._auth_headers: dict[str, str] = {}
        self.set_auth(token=self._config.auth_token, api_key=self._config.api_key)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def auth_headers(self) -> dict[str, str]:
        return dict(self._auth_headers)

    def set_auth(self, token: str | None = None, api_key: str | None = None) -> None:
        """Set credentials sent with every request.

        A bearer token takes precedence over an API key. Passing neither
        clears both headers.
        """
        if token:
            self._auth_headers = {"Authorization": f"Bearer {token}"}
        elif api_key:
            self._auth_headers = {"X-API-Key": api_key}
        else:
            self._auth_headers = {}

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            transport=self._transport,
            headers={"Content-Type": "application/json", **self._auth_headers},
        )

    async def ask_question(self, request: QuestionRequest) -> QueryResult:
        """Ask a question and wait for the complete answer.

        Args:
            request: The question payload.

        Returns:
            The parsed QueryResult.

        Raises:
            QueryAPIError: On connection failure, non-2xx status or a body
                that is not a valid result.
        """
        url = f"{self._config.api_base_url}/ask/question"
        try:
            async with self._client() as client:
                response = await client.post(url, json=request.to_payload())
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise QueryAPIError(
                _error_detail(e.response) or "API request failed",
                status_code=e.response.status_code,
            ) from e
        except httpx.RequestError as e:
            logger.warning(f"Connection to {url} failed: {e!r}")
            raise QueryAPIError(CONNECTION_FAILED_MESSAGE) from e

        try:
            return QueryResult.model_validate(response.json())
        except (ValueError, ValidationError) as e:
            raise QueryAPIError("Malformed response from server") from e

    async def ask_question_stream(
        self,
        request: QuestionRequest,
        on_chunk: ChunkCallback,
        on_complete: CompleteCallback,
        on_error: ErrorCallback,
    ) -> None:
        """Ask a question over the streaming endpoint.

        Transport failures before the body is read are reported through
        ``on_error``; once the body is open, :func:`decode_stream` owns the
        outcome. Never raises for network or protocol failures.

        Args:
            request: The question payload.
            on_chunk: Receives the full text so far, superseding earlier calls.
            on_complete: Receives the final result.
            on_error: Receives the failure that ended the session.
        """
        url = self._config.streaming_url
        decoding = False
        logger.info(f"Streaming question to {url} (session={request.session_id})")
        try:
            async with (
                self._client() as client,
                client.stream(
                    "POST",
                    url,
                    json=request.to_payload(),
                    headers={"Accept": "text/event-stream"},
                ) as response,
            ):
                if not response.is_success:
                    await response.aread()
                    raise TransportError(
                        response.text or f"HTTP error! status: {response.status_code}",
                        status_code=response.status_code,
                    )
                decoding = True
                await decode_stream(_body_chunks(response), on_chunk, on_complete, on_error)
        except TransportError as e:
            logger.warning(f"Streaming request rejected: HTTP {e.status_code}")
            on_error(e)
        except httpx.RequestError as e:
            if decoding:
                # Outcome already reported by decode_stream
                logger.warning(f"Error closing stream from {url}: {e!r}")
                return
            logger.warning(f"Connection to {url} failed: {e!r}")
            on_error(TransportError(CONNECTION_FAILED_MESSAGE))

    async def answer_question(
        self,
        request: QuestionRequest,
        on_chunk: ChunkCallback,
        on_complete: CompleteCallback,
        on_error: ErrorCallback,
        streaming: bool | None = None,
    ) -> None:
        """Ask a question with the configured delivery mode.

        The non-streaming path behaves like a stream holding a single
        ``complete`` event: no ``on_chunk`` calls, then the terminal callback.

        Args:
            request: The question payload.
            on_chunk: Receives live text (streaming only).
            on_complete: Receives the final result.
            on_error: Receives the failure that ended the session.
            streaming: Overrides ``config.use_streaming`` when given.
        """
        use_streaming = self._config.use_streaming if streaming is None else streaming
        if use_streaming:
            await self.ask_question_stream(request, on_chunk, on_complete, on_error)
            return

        try:
            result = await self.ask_question(request)
        except StreamingError as e:
            on_error(e)
            return
        on_complete(result)

    async def health_check(self) -> bool:
        """Check whether the query service is reachable and healthy."""
        try:
            async with self._client() as client:
                response = await client.get(f"{self._config.api_base_url}/health")
        except httpx.RequestError as e:
            logger.debug(f"Health check failed: {e!r}")
            return False
        return response.is_success


async def _body_chunks(response: httpx.Response) -> AsyncIterator[bytes]:
    try:
        async for chunk in response.aiter_bytes():
            yield chunk
    except httpx.HTTPError as e:
        raise TransportError(f"Failed to read response body: {e}") from e


def _error_detail(response: httpx.Response) -> str | None:
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None
    for key in ("error", "message"):
        detail = body.get(key)
        if isinstance(detail, str) and detail:
            return detail
    return None
