"""Async client for the report-generation backend.

Sends one report request per query and classifies the raw response by its
declared content-type. The server may answer in a different format than the
one requested, so the requested format never drives classification.
"""

import json
import logging
import re
from types import TracebackType
from typing import Any, Self, TypeVar

import httpx
from pydantic import ValidationError

from reportchat.client.config import ClientConfig, get_client_config
from reportchat.models.schemas import (
    DOCX_MEDIA_TYPE,
    PDF_MEDIA_TYPE,
    ChatRecord,
    DocumentResult,
    ErrorKind,
    ErrorResult,
    HtmlResult,
    MarkdownResult,
    ReportResult,
    RequestFormat,
    SessionRecord,
    TextResult,
)

logger = logging.getLogger(__name__)

INVALID_QUERY_MESSAGE = "Please enter a valid message."
TRANSPORT_ERROR_MESSAGE = "Something went wrong, please try again."
UNKNOWN_TYPE_MESSAGE = "Received an unknown response type."

_FILENAME_PATTERN = re.compile(r'filename\s*=\s*(?:"([^"]+)"|([^;\s]+))', re.IGNORECASE)
_DEFAULT_FILE_NAMES = {"pdf": "report.pdf", "docx": "report.docx"}

RecordT = TypeVar("RecordT", SessionRecord, ChatRecord)


def _parse_records(payload: Any, model: type[RecordT], source: str) -> list[RecordT]:
    """Validate a listing payload entry by entry, skipping invalid entries."""
    if not isinstance(payload, list):
        logger.error(f"Expected a list from {source}, got {type(payload).__name__}")
        return []
    records: list[RecordT] = []
    for index, item in enumerate(payload):
        try:
            records.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning(f"Skipping invalid {e.title} at index {index} from {source}")
    return records


class MalformedResponseError(ValueError):
    """Raised when a response body cannot be decoded as its content-type says."""


def extract_file_name(content_disposition: str, kind: str) -> str:
    """Pick a file name for a binary report.

    Args:
        content_disposition: Raw content-disposition header (may be empty).
        kind: Document kind, ``pdf`` or ``docx``.

    Returns:
        The quoted or bare ``filename`` token, else a default per kind.
    """
    match = _FILENAME_PATTERN.search(content_disposition or "")
    if match:
        name = (match.group(1) or match.group(2)).strip()
        if name:
            return name
    return _DEFAULT_FILE_NAMES.get(kind, "report")


def _decode_text(body: bytes, content_type: str) -> str:
    charset_match = re.search(r"charset=([\w-]+)", content_type, re.IGNORECASE)
    encoding = charset_match.group(1) if charset_match else "utf-8"
    try:
        return body.decode(encoding)
    except (LookupError, UnicodeDecodeError) as e:
        raise MalformedResponseError(f"Cannot decode body as {encoding}: {e}") from e


def _extract_report(body: bytes) -> str:
    try:
        data = json.loads(body)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedResponseError(f"Invalid JSON body: {e}") from e
    if not isinstance(data, dict) or not isinstance(data.get("report"), str):
        raise MalformedResponseError("JSON body has no string 'report' field")
    return data["report"]


def classify_response(
    content_type: str,
    content_disposition: str,
    body: bytes,
) -> ReportResult:
    """Classify a backend response into a typed result.

    Pure function of the headers and body. Rules apply in priority order:
    pdf, docx, html, markdown, json, then unknown.

    Args:
        content_type: Declared content-type header.
        content_disposition: Content-disposition header, empty if absent.
        body: Raw response bytes.

    Returns:
        The classified result. Unknown content-types yield an
        ``unclassified`` error result.

    Raises:
        MalformedResponseError: If a text body cannot be decoded.
    """
    media = (content_type or "").lower()

    if PDF_MEDIA_TYPE in media:
        return DocumentResult(
            kind="pdf",
            payload=body,
            file_name=extract_file_name(content_disposition, "pdf"),
            media_type=PDF_MEDIA_TYPE,
        )
    if DOCX_MEDIA_TYPE in media:
        return DocumentResult(
            kind="docx",
            payload=body,
            file_name=extract_file_name(content_disposition, "docx"),
            media_type=DOCX_MEDIA_TYPE,
        )
    if "text/html" in media:
        return HtmlResult(content=_decode_text(body, content_type))
    if "text/markdown" in media:
        return MarkdownResult(content=_decode_text(body, content_type))
    if "application/json" in media:
        return TextResult(content=_extract_report(body))

    return ErrorResult(error_kind=ErrorKind.UNCLASSIFIED, message=UNKNOWN_TYPE_MESSAGE)


class ReportClient:
    """Client for the report-generation backend.

    Wraps an ``httpx.AsyncClient`` with:
    - Fail-fast validation of empty queries
    - Binary-safe response handling for PDF/DOCX payloads
    - Content-type classification into typed results
    - Error results instead of exceptions for every transport failure
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the report client.

        Args:
            config: Optional client configuration.
                    Loads from environment if not provided.
            http_client: Optional preconfigured HTTP client (tests inject one
                         backed by ``httpx.MockTransport``).
        """
        config = config or get_client_config()
        self._http = http_client or httpx.AsyncClient(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
        )

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def generate(
        self,
        query: str,
        user_id: str,
        project_id: str,
        fmt: RequestFormat = RequestFormat.PDF,
    ) -> ReportResult:
        """Request a report and classify the response.

        Args:
            query: The user's natural-language query.
            user_id: Requesting user.
            project_id: Project the report is generated for.
            fmt: Requested report format.

        Returns:
            A classified result. Failures are returned as ``ErrorResult``.
        """
        if not query or not query.strip():
            return ErrorResult(error_kind=ErrorKind.VALIDATION, message=INVALID_QUERY_MESSAGE)

        try:
            response = await self._http.post(
                "/reports/generate",
                json={
                    "project_id": project_id,
                    "user_id": user_id,
                    "query": query,
                    "format": RequestFormat(fmt).value,
                },
            )
            response.raise_for_status()
            result = classify_response(
                response.headers.get("content-type", ""),
                response.headers.get("content-disposition", ""),
                response.content,
            )
        except httpx.HTTPStatusError as e:
            logger.error(f"Report generation failed: HTTP {e.response.status_code}")
            return self._transport_error()
        except httpx.HTTPError as e:
            logger.error(f"Report generation failed: {e!r}")
            return self._transport_error()
        except MalformedResponseError as e:
            logger.error(f"Report generation returned a malformed body: {e}")
            return self._transport_error()

        if isinstance(result, ErrorResult):
            logger.warning(
                f"Unhandled report content-type: {response.headers.get('content-type')!r}"
            )
        else:
            logger.info(f"Received {result.kind} report for format {RequestFormat(fmt).value}")
        return result

    async def list_sessions(self, user_id: str) -> list[SessionRecord]:
        """Fetch the user's sessions from ``GET /sessions``.

        Entries that do not parse are skipped.

        Returns:
            Session records, or an empty list on any failure.
        """
        try:
            response = await self._http.get("/sessions", params={"user_id": user_id})
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch sessions: {e!r}")
            return []
        return _parse_records(payload, SessionRecord, "sessions")

    async def fetch_session_messages(self, session_id: str) -> list[ChatRecord]:
        """Fetch the chats of one session from ``GET /session/{id}``.

        Entries that do not parse are skipped, the rest of the history is kept.

        Returns:
            Chat records, or an empty list on any failure.
        """
        try:
            response = await self._http.get(f"/session/{session_id}")
            response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Failed to fetch chats for session {session_id}: {e!r}")
            return []
        return _parse_records(payload, ChatRecord, f"session {session_id}")

    @staticmethod
    def _transport_error() -> ErrorResult:
        return ErrorResult(error_kind=ErrorKind.TRANSPORT, message=TRANSPORT_ERROR_MESSAGE)
