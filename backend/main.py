"""
FastAPI Backend for the LeetMetric AI Assistant

Provides REST endpoints for the dashboard page:
- Chat widget toggles (open / close / minimize)
- Message submission with simulated think-time, polled by the client
- Quick-question shortcuts and variant selection
- LeetCode statistics lookup, user comparison and dashboard display data
"""

import logging
import os
import sys
import time
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

# Add the leetmetric_assistant package to Python path
backend_dir = os.path.dirname(os.path.abspath(__file__))
project_root = os.path.dirname(backend_dir)
package_src = os.path.join(project_root, 'leetmetric_assistant', 'src')
if os.path.exists(package_src) and package_src not in sys.path:
    sys.path.insert(0, package_src)

from lib.logger import setup_logging, get_logger
from lib.supabase_client import get_supabase_client

from leetmetric_assistant.assistant import QUICK_QUESTIONS, LeetMetricAssistant
from leetmetric_assistant.config import AssistantConfig
from leetmetric_assistant.dashboard import DashboardRenderer
from leetmetric_assistant.preference_store import create_store
from leetmetric_assistant.session_state import SessionState
from leetmetric_assistant.stats_client import StatsClient, StatsFetchError
from leetmetric_assistant.variants import Variant

setup_logging(level=logging.INFO, use_colors=True)
logger = get_logger("backend.main")

# Process-wide singletons, created on first use
_assistant_instance: Optional[LeetMetricAssistant] = None
_dashboard_instance: Optional[DashboardRenderer] = None
_stats_client: Optional[StatsClient] = None


def get_assistant_instance() -> LeetMetricAssistant:
    """Get or create the assistant, with the dashboard subscribed to its events."""
    global _assistant_instance, _dashboard_instance
    if _assistant_instance is None:
        config = AssistantConfig.from_env()
        store = create_store(get_supabase_client(config))
        _assistant_instance = LeetMetricAssistant(config=config, store=store)
        _dashboard_instance = DashboardRenderer(store, recent_limit=config.recent_limit)
        _assistant_instance.events.subscribe(_dashboard_instance.on_preference_changed)
        logger.success("Assistant initialized", data={
            "infer_variant": config.infer_variant,
            "delay_range": f"{config.min_delay}-{config.max_delay}s",
        })
    return _assistant_instance


def get_dashboard() -> DashboardRenderer:
    get_assistant_instance()
    return _dashboard_instance


def get_stats_client() -> StatsClient:
    global _stats_client
    if _stats_client is None:
        config = get_assistant_instance().config
        _stats_client = StatsClient(base_url=config.stats_api_url, timeout=config.stats_timeout)
    return _stats_client


app = FastAPI(
    title="LeetMetric AI Assistant API",
    description="Rule-based algorithm assistant and LeetCode stats dashboard",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://127.0.0.1:3000",
        "http://localhost:5500",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ==================== Pydantic Models ====================

class ChatMessage(BaseModel):
    content: str


class VariantSelection(BaseModel):
    variant: str


class MessageOut(BaseModel):
    sender: str
    content: str
    html: str
    time: str
    created_at: str


class SessionSummary(BaseModel):
    session_id: str
    surface: str
    variant: str
    variant_name: str
    composing: bool
    message_count: int


class HistoryResponse(SessionSummary):
    messages: List[MessageOut]


# ==================== Helper Functions ====================

def summarize(session: SessionState) -> Dict[str, Any]:
    return {
        "session_id": session.session_id,
        "surface": session.surface.value,
        "variant": session.current_variant.value,
        "variant_name": session.current_variant.display_name,
        "composing": session.composing,
        "message_count": len(session.history),
    }


def require_session(session_id: str) -> SessionState:
    session = get_assistant_instance().get_session(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return session


# ==================== API Endpoints ====================

@app.get("/")
async def root():
    """Health check endpoint."""
    assistant = get_assistant_instance()
    return {
        "status": "ok",
        "service": "LeetMetric AI Assistant API",
        "version": "1.0.0",
        "topics": len(assistant.knowledge_base),
        "sessions": len(assistant.sessions),
    }


@app.post("/api/sessions/{session_id}/open", response_model=SessionSummary)
async def open_chat(session_id: str):
    assistant = get_assistant_instance()
    session = assistant.get_or_create_session(session_id)
    assistant.open_chat(session)
    return summarize(session)


@app.post("/api/sessions/{session_id}/close", response_model=SessionSummary)
async def close_chat(session_id: str):
    session = require_session(session_id)
    get_assistant_instance().close_chat(session)
    return summarize(session)


@app.post("/api/sessions/{session_id}/minimize", response_model=SessionSummary)
async def minimize_chat(session_id: str):
    session = require_session(session_id)
    get_assistant_instance().minimize_chat(session)
    return summarize(session)


@app.post("/api/sessions/{session_id}/toggle", response_model=SessionSummary)
async def toggle_chat(session_id: str):
    """Chat launcher button: opens a closed chat, closes an open one."""
    assistant = get_assistant_instance()
    session = assistant.get_or_create_session(session_id)
    assistant.toggle_chat(session)
    return summarize(session)


@app.post("/api/sessions/{session_id}/messages", response_model=SessionSummary, status_code=202)
async def submit_message(session_id: str, message: ChatMessage):
    """
    Accept a user message. The reply is appended to history after the
    simulated think-time; clients poll GET .../messages for it.
    """
    start_time = time.time()
    logger.request("POST", "/api/sessions/{id}/messages", session_id=session_id, data={
        "message_length": len(message.content),
    })

    assistant = get_assistant_instance()
    session = assistant.get_or_create_session(session_id)
    if assistant.submit(session, message.content) is None:
        raise HTTPException(status_code=422, detail="Message must not be empty")

    logger.response(202, "/api/sessions/{id}/messages", duration=time.time() - start_time)
    return summarize(session)


@app.get("/api/sessions/{session_id}/messages", response_model=HistoryResponse)
async def get_messages(session_id: str):
    session = require_session(session_id)
    return {
        **summarize(session),
        "messages": [message.to_dict() for message in session.history],
    }


@app.get("/api/quick-questions")
async def list_quick_questions():
    return {"questions": [{"index": i, "question": q} for i, q in enumerate(QUICK_QUESTIONS)]}


@app.post("/api/sessions/{session_id}/quick/{index}", response_model=SessionSummary, status_code=202)
async def ask_quick_question(session_id: str, index: int):
    assistant = get_assistant_instance()
    session = assistant.get_or_create_session(session_id)
    try:
        assistant.ask_quick_question(session, index)
    except IndexError:
        raise HTTPException(status_code=404, detail=f"No quick question #{index}")
    return summarize(session)


@app.put("/api/sessions/{session_id}/variant", response_model=SessionSummary)
async def select_variant(session_id: str, selection: VariantSelection):
    assistant = get_assistant_instance()
    try:
        variant = Variant.parse(selection.variant)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    session = assistant.get_or_create_session(session_id)
    assistant.set_variant(session, variant)
    return summarize(session)


@app.get("/api/variants")
async def list_variants():
    return {"variants": [{"value": v.value, "name": v.display_name} for v in Variant]}


@app.get("/api/stats/{username}")
async def fetch_stats(username: str):
    """Fetch LeetCode stats for a user and show them on the dashboard."""
    try:
        record = await run_in_threadpool(get_stats_client().fetch, username)
    except StatsFetchError as e:
        logger.warning("Stats lookup failed", data={"username": username, "status": e.status, "error": e.message})
        raise HTTPException(status_code=502, detail={"message": e.message, "status": e.status})

    dashboard = get_dashboard()
    dashboard.show_record(record)
    return {**record.to_dict(), "recent_searches": dashboard.recent_searches}


@app.get("/api/compare/{username}")
async def compare_user(username: str):
    """Compare the user shown on the dashboard with another user."""
    dashboard = get_dashboard()
    if dashboard.current_record is None:
        raise HTTPException(status_code=400, detail="Look up a user before comparing.")

    try:
        other = await run_in_threadpool(get_stats_client().fetch, username)
    except StatsFetchError as e:
        logger.warning("Comparison lookup failed", data={"username": username, "status": e.status, "error": e.message})
        raise HTTPException(status_code=502, detail={"message": e.message, "status": e.status})

    return dashboard.compare(other)


@app.get("/api/dashboard")
async def get_dashboard_state():
    return get_dashboard().snapshot()


if __name__ == "__main__":
    import uvicorn

    try:
        uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
    except KeyboardInterrupt:
        logger.info("🛑 Server stopped.")
        sys.exit(0)
