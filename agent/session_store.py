"""
agent/session_store.py

Per-user session state: pagination cursor and bounded conversation
history. Sessions live in process memory and do not survive restarts.
"""

from __future__ import annotations

import copy
import threading
from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True)
class ConversationTurn:
    role: str
    content: str

    def as_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}


@dataclass
class PaginationState:
    """
    Pre-rendered result items of the last listing and the next index to
    emit.
    """

    items: list[str]
    cursor: int = 0
    page_size: int = 10


@dataclass
class UserSession:
    history: list[ConversationTurn] = field(default_factory=list)
    pagination: PaginationState | None = None


@dataclass(frozen=True)
class PageResult:
    items: list[str]
    next_cursor: int
    has_more: bool


def next_page(items: Sequence[str], cursor: int, page_size: int) -> PageResult:
    """
    Slice one page out of ``items`` starting at ``cursor``.
    """

    start = max(0, cursor)
    end = start + max(1, page_size)
    page = list(items[start:end])
    next_cursor = min(end, len(items))
    return PageResult(items=page, next_cursor=next_cursor, has_more=next_cursor < len(items))


def append_history(
    history: Sequence[ConversationTurn],
    turns: Sequence[ConversationTurn],
    cap: int,
) -> list[ConversationTurn]:
    """
    Append ``turns`` and keep only the newest ``cap`` entries.
    """

    combined = [*history, *turns]
    if cap > 0 and len(combined) > cap:
        combined = combined[len(combined) - cap :]
    return combined


class SessionStore(ABC):
    """
    Storage abstraction for per-user sessions, keyed by user id.
    """

    @abstractmethod
    def get(self, user_id: str) -> UserSession | None:
        """Return the stored session, or None."""

    @abstractmethod
    def set(self, user_id: str, session: UserSession) -> None:
        """Store or replace a user's session."""

    @abstractmethod
    def delete(self, user_id: str) -> None:
        """Drop a user's session. Unknown ids are ignored."""

    def load(self, user_id: str) -> UserSession:
        return self.get(user_id) or UserSession()


class InMemorySessionStore(SessionStore):
    """
    Thread-safe in-process session store.

    Sessions are copied on the way in and out so callers never share
    mutable state across requests.
    """

    def __init__(self) -> None:
        self._sessions: dict[str, UserSession] = {}
        self._lock = threading.Lock()

    def get(self, user_id: str) -> UserSession | None:
        with self._lock:
            session = self._sessions.get(user_id)
            return copy.deepcopy(session) if session is not None else None

    def set(self, user_id: str, session: UserSession) -> None:
        with self._lock:
            self._sessions[user_id] = copy.deepcopy(session)

    def delete(self, user_id: str) -> None:
        with self._lock:
            self._sessions.pop(user_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)
