"""Chat session state and conversation orchestration.

Responsibilities:
    - Ordered sessions with a single active selection
    - Append-only message logs per session
    - Release of document resource handles when messages are destroyed
    - Per-session in-flight tracking while a report is generated

The store is an explicit instance built per browser client; nothing here is
module-level state.
"""

from reportchat.session.controller import ConversationController, SendStatus
from reportchat.session.store import SessionNotFoundError, SessionStore

__all__ = ["ConversationController", "SendStatus", "SessionNotFoundError", "SessionStore"]
