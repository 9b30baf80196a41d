"""FastAPI application factory and configuration.

Main application entry point with lifespan management, middleware,
and router registration.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from reportchat.api.artifacts import router as artifacts_router
from reportchat.client.report_client import ReportClient
from reportchat.rendering.resources import ResourceRegistry

logger = logging.getLogger(__name__)


def create_app(
    resources: ResourceRegistry,
    client: ReportClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        resources: Registry whose handles the artifact endpoint serves.
        client: Report client to close on shutdown, if the app owns one.

    Returns:
        Configured FastAPI application instance.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
        """Release outstanding handles and close the backend client on shutdown."""
        logger.info("Starting Report Chat API...")
        yield
        logger.info("Shutting down Report Chat API...")
        resources.release_all()
        if client is not None:
            await client.aclose()

    application = FastAPI(
        title="Report Chat API",
        description=(
            "Conversational front end for a report-generation backend. "
            "Serves generated PDF and DOCX reports to the chat interface."
        ),
        version="0.1.0",
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    application.state.resources = resources

    application.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["*"],
    )

    application.include_router(artifacts_router)

    @application.get("/health")
    async def health_check() -> dict[str, str]:
        """Check service health status."""
        return {"status": "healthy", "service": "report-chat"}

    return application
