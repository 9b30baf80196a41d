"""NiceGUI interface - thin visualization layer for report conversations.

Responsibilities:
    - Session sidebar with create, select and delete
    - Report format selection per request
    - Rendering of text, HTML, Markdown, PDF and DOCX artifacts
    - Per-session "generating" indicator

Contains minimal business logic. Delegates all operations to the
conversation controller.
"""

from reportchat.ui.chat_page import register_chat_page

__all__ = ["register_chat_page"]
