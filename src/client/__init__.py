"""Query service client.

Sends natural-language questions to the ask-question API and delivers the
answer through callbacks, streamed or in one piece.
"""

from src.client.api_client import QueryAPIClient
from src.client.config import ClientConfig, get_client_config

__all__ = ["ClientConfig", "QueryAPIClient", "get_client_config"]
