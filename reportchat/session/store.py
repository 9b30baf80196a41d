"""In-memory chat session store.

Exclusive owner of sessions, their message logs and the artifacts inside
them. Document artifacts hold resource handles, so every path that destroys
a message (session deletion, teardown) releases its handle here and nowhere
else.
"""

import logging
from collections.abc import Callable, Iterable

from reportchat.models.schemas import Message, Session, artifact_handle
from reportchat.rendering.resources import ResourceRegistry

logger = logging.getLogger(__name__)

Listener = Callable[[], None]


class SessionNotFoundError(LookupError):
    """Raised when a message targets a session that no longer exists."""

    def __init__(self, session_id: str) -> None:
        self.session_id = session_id
        super().__init__(f"Session not found: {session_id}")


class SessionStore:
    """Ordered sessions, the active selection, and per-session message logs.

    Invariant: ``active_session_id`` is either None or the id of a stored
    session.
    """

    def __init__(self, resources: ResourceRegistry) -> None:
        self._resources = resources
        self._sessions: dict[str, Session] = {}
        self._messages: dict[str, list[Message]] = {}
        self._active_id: str | None = None
        self._listeners: list[Listener] = []

    # --- Reads ---

    @property
    def sessions(self) -> tuple[Session, ...]:
        return tuple(self._sessions.values())

    @property
    def active_session_id(self) -> str | None:
        return self._active_id

    @property
    def active_session(self) -> Session | None:
        if self._active_id is None:
            return None
        return self._sessions[self._active_id]

    def get_session(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def messages(self, session_id: str | None = None) -> tuple[Message, ...]:
        """Message log of a session, defaulting to the active one.

        Returns an empty tuple when there is no such session.
        """
        target = session_id if session_id is not None else self._active_id
        if target is None:
            return ()
        return tuple(self._messages.get(target, ()))

    # --- Observation ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener()

    # --- Mutations ---

    def create_session(self, display_name: str | None = None) -> Session:
        """Create a session, append it and make it active."""
        name = display_name or f"New Session {len(self._sessions) + 1}"
        session = Session(display_name=name)
        self._sessions[session.id] = session
        self._messages[session.id] = []
        self._active_id = session.id
        logger.info(f"Created session {session.id} ({name})")
        self._notify()
        return session

    def add_session(self, session: Session, messages: Iterable[Message] = ()) -> bool:
        """Insert an existing session, e.g. one loaded from the backend.

        Does not change the active selection. Returns False if the id is
        already stored.
        """
        if session.id in self._sessions:
            return False
        self._sessions[session.id] = session
        self._messages[session.id] = list(messages)
        self._notify()
        return True

    def select_session(self, session_id: str) -> bool:
        """Make a session active. Unknown ids are ignored and return False."""
        if session_id not in self._sessions:
            logger.debug(f"Ignoring selection of unknown session {session_id}")
            return False
        if self._active_id != session_id:
            self._active_id = session_id
            self._notify()
        return True

    def delete_session(self, session_id: str) -> bool:
        """Remove a session and its log, releasing every resource handle in it.

        Idempotent: unknown ids return False.
        """
        if session_id not in self._sessions:
            return False
        del self._sessions[session_id]
        released = self._release_log(self._messages.pop(session_id, []))
        if self._active_id == session_id:
            self._active_id = None
        logger.info(f"Deleted session {session_id} ({released} handles released)")
        self._notify()
        return True

    def append_message(self, session_id: str, message: Message) -> None:
        """Append a message to a session's log.

        Raises:
            SessionNotFoundError: If the session was deleted. The caller
                still owns the message's artifact and must release it.
        """
        log = self._messages.get(session_id)
        if log is None:
            raise SessionNotFoundError(session_id)
        log.append(message)
        self._notify()

    def close(self) -> None:
        """Tear down the store, releasing every handle it owns."""
        released = 0
        for log in self._messages.values():
            released += self._release_log(log)
        self._sessions.clear()
        self._messages.clear()
        self._active_id = None
        logger.info(f"Session store closed ({released} handles released)")
        self._notify()
        self._listeners.clear()

    def _release_log(self, log: list[Message]) -> int:
        released = 0
        for message in log:
            handle = artifact_handle(message.artifact)
            if handle is not None and self._resources.release(handle):
                released += 1
        return released
