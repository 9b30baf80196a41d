"""NiceGUI chat interface with multi-session support and report rendering."""

import logging

from nicegui import ui

from reportchat.client.config import ClientConfig
from reportchat.client.report_client import ReportClient
from reportchat.models.schemas import (
    Artifact,
    DocumentArtifact,
    DocumentType,
    ErrorArtifact,
    HtmlArtifact,
    MarkdownArtifact,
    Message,
    RequestFormat,
    Sender,
    TextArtifact,
)
from reportchat.rendering.markup import markdown_to_html
from reportchat.rendering.resolver import ArtifactResolver
from reportchat.rendering.resources import ResourceRegistry
from reportchat.session.controller import ConversationController, SendStatus
from reportchat.session.store import SessionStore

logger = logging.getLogger(__name__)

CUSTOM_CSS = """
<link href="https://fonts.googleapis.com/css2?family=Inter:wght@400;500;600&display=swap"
      rel="stylesheet">
<style>
    * { font-family: 'Inter', sans-serif; }

    body { background: #f5f5f5; min-height: 100vh; }

    .sidebar { background: #1e1b4b; color: white; }
    .session-item { border-radius: 8px; cursor: pointer; }
    .session-item:hover { background: rgba(255, 255, 255, 0.1); }
    .session-active { background: rgba(99, 102, 241, 0.35); }

    .header { background: linear-gradient(135deg, #667eea 0%, #764ba2 100%); }

    .message-user {
        background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
        white-space: pre-wrap;
    }

    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }

    .message-error {
        background: #dc2626;
        color: white;
        border-radius: 18px 18px 18px 4px;
    }

    .typing-dot {
        width: 8px; height: 8px;
        background: #667eea;
        border-radius: 50%;
        animation: bounce 1.4s infinite ease-in-out;
    }
    .typing-dot:nth-child(2) { animation-delay: 0.2s; }
    .typing-dot:nth-child(3) { animation-delay: 0.4s; }

    @keyframes bounce {
        0%, 60%, 100% { transform: translateY(0); }
        30% { transform: translateY(-6px); }
    }

    .report-html table { border-collapse: collapse; }
    .report-html th, .report-html td { border: 1px solid #d1d5db; padding: 4px 8px; }
    .report-html h1, .report-html h2, .report-html h3 { font-weight: 600; margin: 0.5rem 0; }
    .report-html ul { list-style: disc; padding-left: 1.25rem; }
    .report-html ol { list-style: decimal; padding-left: 1.25rem; }
</style>
"""

FORMAT_OPTIONS = [f.value for f in RequestFormat]


def register_chat_page(
    resources: ResourceRegistry,
    client: ReportClient,
    config: ClientConfig,
) -> None:
    """Register the ``/`` chat page.

    Every browser client gets its own session store and controller; the
    resource registry and backend client are shared.
    """
    resolver = ArtifactResolver(resources)

    @ui.page("/")
    def chat_page(user_id: str | None = None, project_id: str | None = None) -> None:
        """Main chat page."""
        ui.add_head_html(CUSTOM_CSS)
        store = SessionStore(resources)
        controller = ConversationController(
            store=store,
            client=client,
            resolver=resolver,
            resources=resources,
            user_id=user_id or config.user_id,
            project_id=project_id or config.project_id,
            default_format=config.default_format,
        )

        sessions_list: ui.column
        header_label: ui.label
        messages_container: ui.column
        input_row: ui.row
        input_field: ui.textarea
        format_select: ui.select

        def render_document(artifact: DocumentArtifact) -> None:
            download_url = resources.url_for(artifact.handle, download=True)
            with ui.column().classes("message-assistant px-4 py-3 gap-2 w-[32rem] max-w-full"):
                if artifact.document_type == DocumentType.PDF:
                    preview_url = resources.url_for(artifact.handle)
                    iframe = ui.element("iframe").props(f'src="{preview_url}"')
                    iframe.classes("w-full h-64 rounded")
                else:
                    ui.icon("description").classes("text-4xl text-indigo-500")
                ui.link(f"Download {artifact.file_name}", download_url).classes(
                    "text-indigo-600 underline text-sm"
                )

        def render_artifact(artifact: Artifact, is_user: bool) -> None:
            if isinstance(artifact, DocumentArtifact):
                render_document(artifact)
                return

            bubble = "message-user" if is_user else "message-assistant"
            if isinstance(artifact, ErrorArtifact):
                bubble = "message-error"
            with ui.element("div").classes(f"px-4 py-3 max-w-[70%] {bubble}"):
                if isinstance(artifact, HtmlArtifact):
                    ui.html(artifact.content, sanitize=False).classes("report-html text-sm")
                elif isinstance(artifact, MarkdownArtifact):
                    ui.html(markdown_to_html(artifact.content), sanitize=False).classes(
                        "report-html text-sm"
                    )
                elif isinstance(artifact, ErrorArtifact):
                    ui.label(artifact.message).classes("text-sm leading-relaxed")
                elif isinstance(artifact, TextArtifact):
                    ui.label(artifact.content).classes("text-sm leading-relaxed")

        def render_message(message: Message) -> None:
            is_user = message.sender == Sender.USER
            align = "justify-end" if is_user else "justify-start"
            with ui.row().classes(f"w-full {align}"):
                render_artifact(message.artifact, is_user)

        def render_status_indicator() -> None:
            with ui.row().classes("w-full justify-start"):
                with ui.element("div").classes("message-assistant px-4 py-3"):
                    with ui.row().classes("items-center gap-2"):
                        with ui.row().classes("gap-1"):
                            for _ in range(3):
                                ui.element("div").classes("typing-dot")
                        ui.label("Generating report...").classes("text-sm text-gray-500 italic")

        def refresh_sessions() -> None:
            sessions_list.clear()
            with sessions_list:
                for session in store.sessions:
                    active = session.id == store.active_session_id
                    css = "session-item session-active" if active else "session-item"
                    row = ui.row().classes(f"w-full px-3 py-2 items-center justify-between {css}")
                    row.on("click", lambda _, sid=session.id: controller.select_session(sid))
                    with row:
                        with ui.row().classes("items-center gap-2 no-wrap"):
                            ui.icon("chat_bubble_outline").classes("text-indigo-300")
                            ui.label(session.display_name).classes("text-sm")
                        ui.button(
                            icon="delete",
                            on_click=lambda sid=session.id: controller.delete_session(sid),
                        ).props("flat round dense size=sm color=red-4")

        def refresh_messages() -> None:
            active = store.active_session
            header_label.set_text(active.display_name if active else "Select a Chat")
            input_row.set_visibility(active is not None)
            messages_container.clear()
            with messages_container:
                if active is None:
                    with ui.column().classes("w-full h-64 items-center justify-center gap-3"):
                        ui.icon("forum").classes("text-5xl text-gray-300")
                        ui.label("Select or create a chat session to begin").classes(
                            "text-lg text-gray-400"
                        )
                    return
                for message in store.messages():
                    render_message(message)
                if controller.is_awaiting(active.id):
                    render_status_indicator()

        def refresh_all() -> None:
            refresh_sessions()
            refresh_messages()

        async def send_message() -> None:
            text = input_field.value or ""
            if not text.strip():
                return
            input_field.value = ""
            status = await controller.send_message(text, RequestFormat(format_select.value))
            if status == SendStatus.BUSY:
                input_field.value = text
                ui.notify("A report is already being generated for this chat", type="warning")

        async def hydrate() -> None:
            await controller.hydrate()

        # === UI Layout ===
        with ui.row().classes("w-full h-screen no-wrap gap-0"):
            # Sidebar
            with ui.column().classes("sidebar w-72 h-full p-4 gap-4"):
                ui.button("New Chat", icon="add", on_click=controller.create_session).classes(
                    "w-full"
                ).props("unelevated color=indigo")
                ui.label("Chat Sessions").classes("text-lg font-semibold text-gray-300")
                sessions_list = ui.column().classes("w-full gap-1")

            # Chat area
            with ui.column().classes("flex-grow h-full gap-0"):
                with ui.row().classes("w-full header px-5 py-4 items-center"):
                    ui.icon("assessment").classes("text-white text-3xl")
                    header_label = ui.label().classes("text-lg font-semibold text-white")

                with (
                    ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
                    ui.column().classes("w-full p-5"),
                ):
                    messages_container = ui.column().classes("w-full gap-4")

                with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t") as input_row:
                    format_select = ui.select(
                        FORMAT_OPTIONS, value=controller.default_format.value
                    ).props("outlined dense").classes("w-40")
                    input_field = (
                        ui.textarea(placeholder="Type your message...")
                        .props("autogrow outlined dense rows=1")
                        .classes("flex-grow")
                        .on("keydown.enter.prevent", send_message)
                        .mark("message-input")
                    )
                    send_button = ui.button(icon="send", on_click=send_message)
                    send_button.props("round unelevated").mark("send-button")

        unsubscribe = controller.subscribe(refresh_all)
        refresh_all()
        ui.timer(0.1, hydrate, once=True)

        def teardown() -> None:
            unsubscribe()
            controller.close()
            logger.info("Chat client deleted, session store released")

        ui.context.client.on_delete(teardown)
