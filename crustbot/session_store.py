from __future__ import annotations

import threading
import time
import uuid
from typing import Dict, List, Optional, Tuple

from .models import Message, Role


class SessionStore:
    """In-memory, append-only conversation logs for web chat sessions."""

    def __init__(self, max_sessions: Optional[int] = None) -> None:
        """Purpose: Initialize empty session caches.
        Inputs/Outputs: Input is an optional max_sessions cap; no return.
        Side Effects / State: Creates in-memory caches; nothing is written to disk.
        Dependencies: Relies on the Message model.
        Failure Modes: None.
        If Removed: The web adapter cannot return a session transcript.
        Testing Notes: Verify an unknown session reads as empty.
        """
        # Logs live only for the process lifetime.
        self._max_sessions = max_sessions
        self._sessions: Dict[str, List[Message]] = {}
        self._updated_at: Dict[str, float] = {}
        self._lock = threading.Lock()

    def ensure_session(self, session_id: Optional[str]) -> str:
        """Purpose: Return an existing session id or register a new one.
        Inputs/Outputs: Input is an optional session_id; output is the id in use.
        Side Effects / State: Creates an empty log when missing; may prune old sessions.
        Dependencies: Uses _prune_sessions.
        Failure Modes: None.
        If Removed: Callers must invent ids and logs may be appended to nowhere.
        Testing Notes: Passing None yields a fresh hex id.
        """
        # Mint an id when the caller has none yet.
        session_id = session_id or uuid.uuid4().hex
        with self._lock:
            if session_id not in self._sessions:
                self._sessions[session_id] = []
                self._updated_at[session_id] = time.time()
                self._prune_sessions()
        return session_id

    def add_message(self, session_id: str, role: Role, text: str) -> Message:
        """Purpose: Append one immutable turn to a session log.
        Inputs/Outputs: Inputs are session_id, role, text; output is the new Message.
        Side Effects / State: Mutates the in-memory log and its update time.
        Dependencies: Uses Message and _prune_sessions.
        Failure Modes: A missing session is created implicitly.
        If Removed: Chat history is not recorded.
        Testing Notes: Add two messages and verify order and distinct ids.
        """
        # Messages are never edited after append.
        message = Message(id=uuid.uuid4().hex, role=role, text=text)
        with self._lock:
            self._sessions.setdefault(session_id, []).append(message)
            self._updated_at[session_id] = time.time()
            self._prune_sessions()
        return message

    def get_messages(self, session_id: str) -> Tuple[Message, ...]:
        """Return a snapshot of the session log; unknown sessions are empty."""
        with self._lock:
            return tuple(self._sessions.get(session_id, ()))

    def _prune_sessions(self) -> bool:
        """Purpose: Enforce max_sessions by dropping least-recent sessions.
        Inputs/Outputs: No inputs; returns True if any sessions were removed.
        Side Effects / State: Mutates _sessions and _updated_at.
        Dependencies: Caller must hold the lock.
        Failure Modes: None; no-op when max_sessions is unset or not exceeded.
        If Removed: Session memory grows unbounded.
        Testing Notes: Set a low max_sessions and verify pruning order.
        """
        # Remove least-recent sessions when above the configured cap.
        if not self._max_sessions or self._max_sessions <= 0:
            return False
        if len(self._sessions) <= self._max_sessions:
            return False
        ordered = sorted(self._updated_at.items(), key=lambda item: item[1], reverse=True)
        keep_ids = {session_id for session_id, _ in ordered[: self._max_sessions]}
        removed = [session_id for session_id in list(self._sessions) if session_id not in keep_ids]
        for session_id in removed:
            self._sessions.pop(session_id, None)
            self._updated_at.pop(session_id, None)
        return bool(removed)
