"""Client configuration with environment variable loading.

Pydantic-based configuration for the query service client.
"""

import os

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator, model_validator

# Load environment variables from .env file
load_dotenv()

DEFAULT_API_BASE_URL = "http://localhost:8000/api/v1"
STREAMING_PATH = "/ask/question/stream"


def _env_flag(name: str, default: bool = True) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() != "false"


class ClientConfig(BaseModel):
    """Configuration for the query service client.

    Attributes:
        api_base_url: Base URL of the ask-question API.
        streaming_url: Full URL of the streaming endpoint.
        use_streaming: Whether questions are asked over the streaming endpoint.
        timeout: Request timeout in seconds.
        auth_token: Bearer token sent as Authorization header.
        api_key: API key sent as X-API-Key when no token is set.
    """

    api_base_url: str = Field(
        default_factory=lambda: os.getenv("QUERY_API_BASE_URL") or DEFAULT_API_BASE_URL,
        description="Base URL of the query service API",
    )
    streaming_url: str | None = Field(
        default_factory=lambda: os.getenv("QUERY_API_STREAMING_URL") or None,
        description="Streaming endpoint (derived from api_base_url when unset)",
    )
    use_streaming: bool = Field(
        default_factory=lambda: _env_flag("QUERY_USE_STREAMING"),
        description="Use the streaming endpoint for questions",
    )
    timeout: float = Field(
        default_factory=lambda: float(os.getenv("QUERY_API_TIMEOUT", "120")),
        gt=0.0,
        description="Request timeout in seconds",
    )
    auth_token: str | None = Field(
        default_factory=lambda: os.getenv("QUERY_API_TOKEN") or None,
        description="Bearer token for the query service",
    )
    api_key: str | None = Field(
        default_factory=lambda: os.getenv("QUERY_API_KEY") or None,
        description="API key for the query service",
    )

    @field_validator("api_base_url", "streaming_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalise URLs so paths can be appended."""
        if v is None:
            return v
        v = v.strip().rstrip("/")
        if not v:
            raise ValueError("URL must not be empty")
        return v

    @model_validator(mode="after")
    def derive_streaming_url(self) -> "ClientConfig":
        if self.streaming_url is None:
            self.streaming_url = f"{self.api_base_url}{STREAMING_PATH}"
        return self


def get_client_config() -> ClientConfig:
    """Create client configuration from environment.

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig()
