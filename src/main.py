"""Main application entry point.

Runs the NiceGUI chat interface against the configured query service.
Environment variables are loaded from .env file.
"""

import logging
import os
import sys

from dotenv import load_dotenv

# Load environment variables before any other imports that might need them
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler(sys.stdout)],
)
logger = logging.getLogger(__name__)


def main() -> None:
    """Application entry point."""
    from nicegui import ui

    from src.client.config import get_client_config
    from src.ui.chat_page import chat_page  # noqa: F401 - Registers the page

    config = get_client_config()
    mode = "streaming" if config.use_streaming else "request/response"
    logger.info(f"Query service: {config.api_base_url} ({mode})")

    port = int(os.getenv("PORT", "8080"))
    logger.info(f"Chat UI available at http://localhost:{port}/")

    ui.run(
        title="Data Assistant",
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        reload=False,
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "data-assistant-secret"),
    )


if __name__ in {"__main__", "__mp_main__"}:
    main()
