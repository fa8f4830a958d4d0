from __future__ import annotations

import logging
from typing import List, Optional

import uvicorn
from fastapi import FastAPI

from .config import Settings, load_env, load_settings
from .logging_setup import configure_logging
from .models import ChatRequest, ChatResponse, Role, SessionTranscript
from .resolver import ResponseResolver
from .resource_loader import ResourceLoader
from .session_store import SessionStore

logger = logging.getLogger("crustbot.web")

QUICK_REPLIES = [
    "How do I search for people?",
    "Which region values exist?",
    "Email enrichment?",
]


def create_app(settings: Optional[Settings] = None, resolver: Optional[ResponseResolver] = None) -> FastAPI:
    """Purpose: Build the web chat API around a shared resolver.
    Inputs/Outputs: Optional Settings and resolver; returns a FastAPI application.
    Side Effects / State: Loads static data once when no resolver is given.
    Dependencies: Uses ResourceLoader, ResponseResolver, and SessionStore.
    Failure Modes: DataFileError from the loader propagates and aborts startup.
    If Removed: The browser chat widget has no backend.
    Testing Notes: Pass a resolver built from fixtures and use TestClient.
    """
    # Load config and static data once; handlers close over them.
    if settings is None:
        load_env()
        settings = load_settings()
    configure_logging(settings.log_level)
    if resolver is None:
        static_data = ResourceLoader.from_settings(settings).load()
        resolver = ResponseResolver.from_settings(static_data, settings)

    session_store = SessionStore(max_sessions=100)
    app = FastAPI(title="CrustData Support Chat")
    app.state.resolver = resolver
    app.state.session_store = session_store

    @app.post("/api/chat", response_model=ChatResponse)
    def chat(request: ChatRequest) -> ChatResponse:
        """Purpose: Answer one chat message and record both turns.
        Inputs/Outputs: Input is ChatRequest; output is ChatResponse.
        Side Effects / State: Appends user and bot messages to the session log.
        Dependencies: Uses ResponseResolver.resolve and SessionStore.
        Failure Modes: Blank messages are rejected with 422 by request validation.
        If Removed: The widget cannot obtain answers.
        Testing Notes: Post a message and verify answer and session transcript.
        """
        # Resolve against prior turns, then append both turns.
        session_id = session_store.ensure_session(request.session_id)
        history = session_store.get_messages(session_id)
        session_store.add_message(session_id, Role.USER, request.message)
        answer = resolver.resolve(request.message, history=history)
        session_store.add_message(session_id, Role.BOT, answer)
        logger.info("session=%s answered chars=%s", session_id, len(answer))
        return ChatResponse(
            answer_text=answer,
            session_id=session_id,
            typing_delay_ms=settings.typing_delay_ms,
        )

    @app.get("/api/sessions/{session_id}", response_model=SessionTranscript)
    def get_session(session_id: str) -> SessionTranscript:
        # Unknown sessions return an empty transcript.
        messages = session_store.get_messages(session_id)
        return SessionTranscript(session_id=session_id, messages=list(messages))

    @app.get("/api/quick-replies")
    def quick_replies() -> List[str]:
        return list(QUICK_REPLIES)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    return app


def main() -> None:
    """Serve the web chat API with uvicorn on the configured host and port."""
    load_env()
    settings = load_settings()
    uvicorn.run(create_app(settings=settings), host=settings.web_host, port=settings.web_port)
