"""Main application entry point.

Runs FastAPI with NiceGUI mounted for the chat interface on one port.
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


def run() -> None:
    """Build the application and serve it with uvicorn.

    FastAPI serves the artifact endpoint, NiceGUI serves the chat page.
    Both accessible on the same port.
    """
    import uvicorn
    from nicegui import ui

    from reportchat.api.app import create_app
    from reportchat.client.config import get_client_config
    from reportchat.client.report_client import ReportClient
    from reportchat.rendering.resources import ResourceRegistry
    from reportchat.ui.chat_page import register_chat_page

    config = get_client_config()
    resources = ResourceRegistry(url_prefix="/artifacts")
    client = ReportClient(config)

    app = create_app(resources, client)
    register_chat_page(resources, client, config)

    # Mount NiceGUI onto FastAPI
    ui.run_with(
        app,
        title="Report Chat",
        favicon="📊",
        storage_secret=os.getenv("NICEGUI_STORAGE_SECRET", "report-chat-secret"),
    )

    port = int(os.getenv("PORT", "8000"))
    logger.info(f"Report backend: {config.api_base_url}")
    logger.info(f"Chat UI available at http://localhost:{port}/")
    logger.info(f"API docs available at http://localhost:{port}/docs")

    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
    )


def main() -> None:
    """Application entry point."""
    logger.info("Starting Report Chat")
    run()


if __name__ == "__main__":
    main()
