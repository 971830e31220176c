# chat_history.py

import json
import os
from datetime import datetime
from typing import List

from assistant import ChatMessage, ChatSession, new_session
from logger import logger

CHAT_HISTORY_FILE = os.getenv("CHAT_HISTORY_FILE", "chat_history.json")
# Kept per owner
MAX_SESSIONS = 50


def _load_all() -> List[ChatSession]:
    if not os.path.exists(CHAT_HISTORY_FILE):
        return []
    with open(CHAT_HISTORY_FILE, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            logger.error(f"Failed to parse chat history: {e}")
            return []

    sessions = []
    for item in data if isinstance(data, list) else []:
        try:
            sessions.append(ChatSession.from_dict(item))
        except (KeyError, TypeError, ValueError) as e:
            logger.warning(f"Skipping unreadable chat session: {e}")
    return sessions


def _write(sessions: List[ChatSession]) -> None:
    # Rolling window pruning, per owner
    kept, counts = [], {}
    for s in sessions:
        counts[s.owner] = counts.get(s.owner, 0) + 1
        if counts[s.owner] <= MAX_SESSIONS:
            kept.append(s)
    with open(CHAT_HISTORY_FILE, "w", encoding="utf-8") as f:
        json.dump([s.to_dict() for s in kept], f, indent=2)


def load_history(owner: str) -> List[ChatSession]:
    """The owner's saved conversations, newest first. A corrupt file reads as no history."""
    return [s for s in _load_all() if s.owner == owner]


def save_session(owner: str, messages: List[ChatMessage], session_id=None) -> ChatSession:
    """Upsert the conversation. Existing sessions keep their id and title and move to the top."""
    sessions = _load_all()
    existing = None
    if session_id:
        existing = next((s for s in sessions if s.id == session_id and s.owner == owner), None)

    if existing is not None:
        sessions.remove(existing)
        existing.messages = list(messages)
        existing.date = datetime.now().timestamp()
        session = existing
    else:
        session = new_session(messages, owner)

    sessions.insert(0, session)
    _write(sessions)
    return session


def delete_session(owner: str, session_id: str) -> List[ChatSession]:
    """Remove one of the owner's conversations; other owners' sessions are untouched."""
    sessions = [s for s in _load_all() if not (s.id == session_id and s.owner == owner)]
    _write(sessions)
    return [s for s in sessions if s.owner == owner]
