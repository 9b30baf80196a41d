"""Pydantic models shared across the client, rendering and session layers.

Models:
    - RequestFormat: Report format requested by the user
    - ReportResult: Classified backend response (tagged union)
    - Artifact: Displayable message payload (tagged union)
    - Session / Message: Chat state owned by the session store
    - SessionRecord / ChatRecord: Listing endpoint payloads used for hydration
"""

from reportchat.models.schemas import (
    Artifact,
    ChatRecord,
    DocumentArtifact,
    DocumentResult,
    DocumentType,
    ErrorArtifact,
    ErrorKind,
    ErrorResult,
    HtmlArtifact,
    HtmlResult,
    MarkdownArtifact,
    MarkdownResult,
    Message,
    ReportResult,
    RequestFormat,
    Sender,
    Session,
    SessionRecord,
    TextArtifact,
    TextResult,
)

__all__ = [
    "Artifact",
    "ChatRecord",
    "DocumentArtifact",
    "DocumentResult",
    "DocumentType",
    "ErrorArtifact",
    "ErrorKind",
    "ErrorResult",
    "HtmlArtifact",
    "HtmlResult",
    "MarkdownArtifact",
    "MarkdownResult",
    "Message",
    "ReportResult",
    "RequestFormat",
    "Sender",
    "Session",
    "SessionRecord",
    "TextArtifact",
    "TextResult",
]
