"""NiceGUI chat interface for the data assistant."""

import logging
import time
from datetime import date, datetime
from typing import Any

from nicegui import ui

from src.client.api_client import QueryAPIClient
from src.models.schemas import QueryResult, QuestionRequest
from src.streaming.errors import StreamingError
from src.ui.visualization import (
    chart_options,
    resolve_visualization,
    table_columns,
    table_rows,
    to_csv,
)

logger = logging.getLogger(__name__)

QUERY_EXAMPLES = [
    "How many records are in the database?",
    "Show me the top 10 items by sales",
    "What is the total revenue this month?",
    "Show me the average temperature for each month",
    "How many products were sold last week?",
]

CUSTOM_CSS = """
<style>
    body { background: #f5f5f5; min-height: 100vh; }
    .app-container {
        background: white;
        border-radius: 12px;
        box-shadow: 0 2px 8px rgba(0, 0, 0, 0.1);
        overflow: hidden;
    }
    .header { background: linear-gradient(135deg, #0ea5e9 0%, #6366f1 100%); }
    .message-user {
        background: linear-gradient(135deg, #0ea5e9 0%, #6366f1 100%);
        color: white;
        border-radius: 18px 18px 4px 18px;
    }
    .message-assistant {
        background: #f3f4f6;
        color: #1f2937;
        border-radius: 18px 18px 18px 4px;
    }
    .message-error { background: #fef2f2; color: #b91c1c; }
</style>
"""


def new_session_id() -> str:
    return f"session-{int(time.time() * 1000)}"


class ChatSession:
    """Manages chat state for a user session."""

    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []
        self.session_id: str = new_session_id()
        self.is_loading: bool = False

    def add_message(self, role: str, content: str, **extra: Any) -> dict[str, Any]:
        message = {
            "role": role,
            "content": content,
            "time": datetime.now().strftime("%I:%M %p"),
            **extra,
        }
        self.messages.append(message)
        return message

    def clear(self) -> None:
        self.messages.clear()
        self.session_id = new_session_id()


def render_results(result: dict[str, Any]) -> None:
    """Render tabular data with its chart and a CSV export button."""
    data = result.get("data")
    if data is None:
        return

    kind = resolve_visualization(data, result.get("visualization"))
    options = chart_options(data, kind)

    with ui.card().classes("w-full mt-2"):
        with ui.row().classes("w-full items-center justify-between"):
            ui.label("Results").classes("text-base font-semibold")
            ui.button(
                "CSV",
                icon="download",
                on_click=lambda: ui.download(
                    to_csv(data).encode(), f"data-export-{date.today().isoformat()}.csv"
                ),
            ).props("flat dense")
        if options is not None:
            ui.echart(options).classes("w-full h-64")
        ui.table(
            columns=table_columns(data),
            rows=table_rows(data),
            pagination=10,
        ).classes("w-full")


@ui.page("/")
def chat_page() -> None:
    """Main chat page."""
    ui.add_head_html(CUSTOM_CSS)
    session = ChatSession()
    client = QueryAPIClient()

    messages_container: ui.column
    input_field: ui.textarea
    send_btn: ui.button

    def render_message(msg: dict[str, Any]) -> None:
        is_user = msg["role"] == "user"
        align = "justify-end" if is_user else "justify-start"
        bubble = "message-user" if is_user else "message-assistant"
        if msg.get("error"):
            bubble += " message-error"

        with ui.row().classes(f"w-full {align}"):
            with ui.column().classes("max-w-[80%] gap-1"):
                with ui.element("div").classes(f"px-4 py-3 {bubble}"):
                    if msg.get("error"):
                        ui.label(msg["error"]).classes("text-sm")
                    elif is_user:
                        ui.label(msg["content"]).classes("text-sm whitespace-pre-wrap")
                    else:
                        ui.markdown(msg["content"]).classes("text-sm")
                if not is_user:
                    render_results(msg)
                ui.label(msg["time"]).classes("text-[10px] text-gray-400")

    def refresh_messages() -> None:
        messages_container.clear()
        with messages_container:
            if not session.messages:
                with ui.column().classes("w-full items-center gap-3 py-10"):
                    ui.icon("query_stats").classes("text-5xl text-gray-300")
                    ui.label("Ask questions about your data in plain language").classes(
                        "text-gray-400"
                    )
                    with ui.row().classes("justify-center gap-2"):
                        for example in QUERY_EXAMPLES:
                            ui.button(
                                example, on_click=lambda e=example: ask(e)
                            ).props("outline rounded dense no-caps")
            else:
                for msg in session.messages:
                    render_message(msg)

    async def ask(text: str) -> None:
        text = text.strip()
        if not text or session.is_loading:
            return

        input_field.value = ""
        session.is_loading = True
        send_btn.disable()

        session.add_message("user", text)
        refresh_messages()

        with messages_container, ui.row().classes("w-full justify-start"):
            with ui.element("div").classes("message-assistant px-4 py-3"):
                live_text = ui.markdown("_Thinking..._").classes("text-sm")

        streamed = ""

        def on_chunk(content: str) -> None:
            nonlocal streamed
            # Each chunk carries the full text so far
            streamed = content
            live_text.set_content(content)

        def on_complete(result: QueryResult) -> None:
            session.add_message(
                "assistant",
                result.response or streamed,
                sql=result.sql,
                data=result.data,
                visualization=result.visualization,
                error=result.error,
            )
            finish()

        def on_error(error: StreamingError) -> None:
            logger.warning(f"Question failed in {session.session_id}: {error.message}")
            session.add_message("assistant", "", error=error.message)
            finish()
            ui.notify(error.message, type="negative")

        def finish() -> None:
            session.is_loading = False
            send_btn.enable()
            refresh_messages()

        try:
            request = QuestionRequest(question=text, session_id=session.session_id)
        except ValueError as e:
            on_error(StreamingError(str(e)))
            return

        await client.answer_question(request, on_chunk, on_complete, on_error)

    async def send_message() -> None:
        await ask(input_field.value or "")

    def clear_chat() -> None:
        session.clear()
        refresh_messages()

    # === UI Layout ===
    with (
        ui.element("div").classes("w-full min-h-screen p-4 md:p-8"),
        ui.column().classes("w-full max-w-4xl mx-auto app-container").style(
            "height: calc(100vh - 4rem)"
        ),
    ):
        # Header
        with ui.row().classes("w-full header px-5 py-4 items-center justify-between"):
            with ui.column().classes("gap-0"):
                ui.label("Data Assistant").classes("text-lg font-semibold text-white")
                ui.label().bind_text_from(session, "session_id").classes(
                    "text-xs text-white/80 font-mono"
                )
            ui.button(icon="delete", on_click=clear_chat).props("flat round color=white")

        # Messages
        with (
            ui.scroll_area().classes("flex-grow w-full bg-gray-50"),
            ui.column().classes("w-full p-5"),
        ):
            messages_container = ui.column().classes("w-full gap-4")

        # Input
        with ui.row().classes("w-full p-4 gap-3 items-end bg-white border-t"):
            input_field = (
                ui.textarea(placeholder="Ask a question about your data...")
                .props("autogrow outlined dense rows=1")
                .classes("flex-grow")
                .on("keydown.enter.prevent", send_message)
            )
            send_btn = ui.button(icon="send", on_click=send_message).props("round unelevated")

    refresh_messages()
