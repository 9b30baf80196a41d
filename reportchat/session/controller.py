"""Conversation orchestration: user input to report to assistant message.

Each session moves through ``idle -> awaiting response -> idle``. Failures do
not get a state of their own; they come back as an assistant message with an
error artifact. Only one request per session may be in flight, while other
sessions stay fully usable.
"""

import asyncio
import logging
from collections.abc import Callable
from enum import Enum

from reportchat.client.report_client import ReportClient
from reportchat.models.schemas import (
    Artifact,
    ChatRecord,
    ErrorKind,
    ErrorResult,
    HtmlResult,
    MarkdownResult,
    Message,
    ReportResult,
    RequestFormat,
    Sender,
    Session,
    TextArtifact,
    TextResult,
    artifact_handle,
)
from reportchat.rendering.resolver import ArtifactResolver
from reportchat.rendering.resources import ResourceRegistry
from reportchat.session.store import SessionNotFoundError, SessionStore

logger = logging.getLogger(__name__)


class SendStatus(str, Enum):
    """Outcome of a send_message call."""

    DELIVERED = "delivered"
    IGNORED = "ignored"
    NO_ACTIVE_SESSION = "no_active_session"
    BUSY = "busy"
    SESSION_GONE = "session_gone"


def _result_from_record(record: ChatRecord) -> ReportResult:
    if record.type == "html":
        return HtmlResult(content=record.content)
    if record.type == "markdown":
        return MarkdownResult(content=record.content)
    if record.type == "error":
        return ErrorResult(error_kind=ErrorKind.TRANSPORT, message=record.content)
    return TextResult(content=record.content)


class ConversationController:
    """Orchestrates the report client, resolver and session store.

    Holds no copies of sessions or messages; its only state is the set of
    session ids with a request in flight.
    """

    def __init__(
        self,
        store: SessionStore,
        client: ReportClient,
        resolver: ArtifactResolver,
        resources: ResourceRegistry,
        user_id: str,
        project_id: str,
        default_format: RequestFormat = RequestFormat.PDF,
    ) -> None:
        self._store = store
        self._client = client
        self._resolver = resolver
        self._resources = resources
        self._user_id = user_id
        self._project_id = project_id
        self._default_format = default_format
        self._in_flight: set[str] = set()
        self._listeners: list[Callable[[], None]] = []

    @property
    def store(self) -> SessionStore:
        return self._store

    @property
    def default_format(self) -> RequestFormat:
        return self._default_format

    @property
    def awaiting_sessions(self) -> frozenset[str]:
        return frozenset(self._in_flight)

    def is_awaiting(self, session_id: str | None) -> bool:
        return session_id is not None and session_id in self._in_flight

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Listen to store changes and awaiting-flag changes."""
        unsubscribe_store = self._store.subscribe(listener)
        self._listeners.append(listener)

        def unsubscribe() -> None:
            unsubscribe_store()
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # --- Session operations ---

    def create_session(self) -> Session:
        return self._store.create_session()

    def select_session(self, session_id: str) -> bool:
        return self._store.select_session(session_id)

    def delete_session(self, session_id: str) -> bool:
        """Delete a session. A request still in flight for it is not cancelled;
        its response is discarded on arrival."""
        return self._store.delete_session(session_id)

    # --- Messaging ---

    async def send_message(self, text: str, fmt: RequestFormat | None = None) -> SendStatus:
        """Send a query from the active session and record the answer.

        Args:
            text: The user's query.
            fmt: Requested report format; the default format when omitted.

        Returns:
            What happened to the request. Failed reports are still
            ``DELIVERED``, as an error artifact.
        """
        if not text or not text.strip():
            return SendStatus.IGNORED
        session_id = self._store.active_session_id
        if session_id is None:
            return SendStatus.NO_ACTIVE_SESSION
        if session_id in self._in_flight:
            logger.warning(f"Rejected send for session {session_id}: request already in flight")
            return SendStatus.BUSY

        self._store.append_message(
            session_id, Message(sender=Sender.USER, artifact=TextArtifact(content=text))
        )
        self._in_flight.add(session_id)
        self._notify()

        try:
            result = await self._client.generate(
                text, self._user_id, self._project_id, fmt or self._default_format
            )
            artifact = self._resolver.resolve(result)
            return self._deliver(session_id, artifact)
        finally:
            self._in_flight.discard(session_id)
            self._notify()

    def _deliver(self, session_id: str, artifact: Artifact) -> SendStatus:
        try:
            self._store.append_message(
                session_id, Message(sender=Sender.ASSISTANT, artifact=artifact)
            )
        except SessionNotFoundError:
            handle = artifact_handle(artifact)
            if handle is not None:
                self._resources.release(handle)
            logger.info(f"Discarded response for deleted session {session_id}")
            return SendStatus.SESSION_GONE
        return SendStatus.DELIVERED

    # --- Lifecycle ---

    async def hydrate(self) -> int:
        """Load the user's sessions and their chats from the backend.

        Chat histories are fetched concurrently, one request per session.

        Returns:
            Number of sessions added to the store.
        """
        if not self._user_id:
            return 0
        records = [
            record
            for record in await self._client.list_sessions(self._user_id)
            if self._store.get_session(record.id) is None
        ]
        histories = await asyncio.gather(
            *(self._client.fetch_session_messages(record.id) for record in records)
        )
        added = 0
        for record, chats in zip(records, histories, strict=True):
            messages = [
                Message(
                    sender=chat.sender,
                    artifact=self._resolver.resolve(_result_from_record(chat)),
                )
                for chat in chats
            ]
            session = Session(id=record.id, display_name=record.name or f"Session {record.id}")
            if self._store.add_session(session, messages):
                added += 1
        logger.info(f"Hydrated {added} sessions for user {self._user_id}")
        return added

    def close(self) -> None:
        self._store.close()
        self._listeners.clear()
