import uuid
from datetime import UTC, datetime
from enum import Enum
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PDF_MEDIA_TYPE = "application/pdf"
DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RequestFormat(str, Enum):
    """Report formats the user can request from the backend."""

    PDF = "PDF"
    HTML = "HTML"
    MARKDOWN = "MARKDOWN"
    DOCX = "DOCX"
    TEXT = "TEXT"


class DocumentType(str, Enum):
    """Binary document kinds that need a resource handle to be displayed."""

    PDF = "pdf"
    DOCX = "docx"


class ErrorKind(str, Enum):
    """Failure categories surfaced to the conversation."""

    VALIDATION = "validation"
    TRANSPORT = "transport"
    UNCLASSIFIED = "unclassified"
    SESSION_NOT_FOUND = "session_not_found"


class Sender(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


# --- Results: what the backend answered ---


class TextResult(_Frozen):
    kind: Literal["text"] = "text"
    content: str


class HtmlResult(_Frozen):
    """Raw, unsanitized HTML as returned by the backend."""

    kind: Literal["html"] = "html"
    content: str


class MarkdownResult(_Frozen):
    kind: Literal["markdown"] = "markdown"
    content: str


class DocumentResult(_Frozen):
    """Binary report payload (PDF or DOCX).

    Attributes:
        kind: Document kind derived from the response content-type.
        payload: Raw response bytes, untouched by any text decoding.
        file_name: Name suggested by content-disposition or a default.
        media_type: Content-type declared by the backend.
    """

    kind: Literal["pdf", "docx"]
    payload: bytes
    file_name: str
    media_type: str

    @property
    def document_type(self) -> DocumentType:
        return DocumentType(self.kind)


class ErrorResult(_Frozen):
    kind: Literal["error"] = "error"
    error_kind: ErrorKind
    message: str


ReportResult = Annotated[
    TextResult | HtmlResult | MarkdownResult | DocumentResult | ErrorResult,
    Field(discriminator="kind"),
]


# --- Artifacts: what a message displays ---


class TextArtifact(_Frozen):
    kind: Literal["text"] = "text"
    content: str


class HtmlArtifact(_Frozen):
    """HTML that has already been sanitized and is safe to render directly."""

    kind: Literal["html"] = "html"
    content: str


class MarkdownArtifact(_Frozen):
    kind: Literal["markdown"] = "markdown"
    content: str


class DocumentArtifact(_Frozen):
    """Binary document displayed through a resource handle.

    The handle is owned by the message holding this artifact and must be
    released exactly once, when that message is destroyed.
    """

    kind: Literal["document"] = "document"
    document_type: DocumentType
    handle: str
    file_name: str
    media_type: str


class ErrorArtifact(_Frozen):
    kind: Literal["error"] = "error"
    message: str
    error_kind: ErrorKind = ErrorKind.TRANSPORT


Artifact = Annotated[
    TextArtifact | HtmlArtifact | MarkdownArtifact | DocumentArtifact | ErrorArtifact,
    Field(discriminator="kind"),
]


def artifact_handle(artifact: Any) -> str | None:
    """Return the resource handle owned by an artifact, if any."""
    if isinstance(artifact, DocumentArtifact):
        return artifact.handle
    return None


# --- Chat state ---


class Session(_Frozen):
    """A chat session shown in the sidebar.

    Attributes:
        id: Unique session identifier.
        display_name: Name shown to the user.
        created_at: Creation timestamp (UTC).
    """

    id: str = Field(default_factory=_new_id)
    display_name: str
    created_at: datetime = Field(default_factory=_utcnow)


class Message(_Frozen):
    """A single immutable entry in a session's message log."""

    id: str = Field(default_factory=_new_id)
    sender: Sender
    artifact: Artifact
    created_at: datetime = Field(default_factory=_utcnow)


# --- Listing endpoint payloads ---


class SessionRecord(BaseModel):
    """Session as returned by ``GET /sessions``."""

    id: str
    name: str | None = None

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        """Accept numeric ids (the backend uses timestamps)."""
        if isinstance(v, int):
            return str(v)
        return v


class ChatRecord(BaseModel):
    """Chat entry as returned by ``GET /session/{id}``."""

    id: str | None = None
    sender: Sender = Sender.ASSISTANT
    type: str = "text"
    content: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("sender", mode="before")
    @classmethod
    def normalize_sender(cls, v: Any) -> Any:
        """Map the backend's ``ai`` sender onto ``assistant``."""
        if v == "ai":
            return Sender.ASSISTANT
        return v

    @field_validator("content", mode="before")
    @classmethod
    def default_content(cls, v: Any) -> Any:
        if v is None:
            return ""
        return v
