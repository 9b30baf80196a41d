"""Report Chat - conversational front end for a report-generation backend.

Combines httpx for backend calls, Pydantic for typed results and artifacts,
FastAPI for serving generated documents, and NiceGUI for the chat interface.

Components:
    - client: report requests and content-type classification
    - rendering: artifact resolution, HTML sanitization, resource handles
    - session: chat sessions, message logs, conversation orchestration
    - api: HTTP endpoints for generated documents
    - ui: Web interface for chat interactions
    - models: Result, artifact and session schemas
"""

__version__ = "0.1.0"
