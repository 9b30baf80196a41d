"""FastAPI application serving generated report documents.

Endpoints:
    - GET /health: Service health status
    - GET /artifacts/{handle}: Binary report behind a resource handle

Also hosts the NiceGUI chat page when run through ``reportchat.main``.
"""

from reportchat.api.app import create_app

__all__ = ["create_app"]
