"""
Session storage for InterviewDesk

``SessionStore`` is the contract the engine persists through.
``InMemorySessionStore`` is the process-local implementation used by the
API and tests; durable backends implement the same interface.
"""

import logging
from abc import ABC, abstractmethod
from typing import Literal

from interviewdesk.core.errors import SessionNotFound
from interviewdesk.models.interview import InterviewSession, SessionSummary

logger = logging.getLogger(__name__)

SortKey = Literal["name", "score", "date"]
SortOrder = Literal["asc", "desc"]


class SessionStore(ABC):
    """Persists session snapshots keyed by session id."""

    @abstractmethod
    async def save(self, session: InterviewSession) -> None:
        """Insert or replace the session with the same id."""

    @abstractmethod
    async def get(self, session_id: str) -> InterviewSession:
        """Fetch a session. Raises SessionNotFound."""

    @abstractmethod
    async def list(
        self,
        search: str | None = None,
        sort_by: SortKey = "date",
        order: SortOrder = "desc",
    ) -> list[SessionSummary]:
        """Summaries of stored sessions, filtered and sorted."""

    @abstractmethod
    async def delete(self, session_id: str) -> None:
        """Remove a session. Raises SessionNotFound."""


def filter_and_sort(
    summaries: list[SessionSummary],
    search: str | None = None,
    sort_by: SortKey = "date",
    order: SortOrder = "desc",
) -> list[SessionSummary]:
    """Case-insensitive name/email search, then sort by name, score or date."""
    if search:
        term = search.lower()
        summaries = [
            s for s in summaries
            if term in s.name.lower() or term in s.email.lower()
        ]

    sort_keys = {
        "name": lambda s: s.name.lower(),
        "score": lambda s: s.final_score if s.final_score is not None else 0.0,
        "date": lambda s: s.created_at,
    }
    if sort_by not in sort_keys:
        raise ValueError(f"Unknown sort key: {sort_by}")

    return sorted(summaries, key=sort_keys[sort_by], reverse=(order == "desc"))


class InMemorySessionStore(SessionStore):
    """
    Dictionary-backed session store.

    Sessions are deep-copied on the way in and out so callers never share
    a mutable session object with the store.
    """

    def __init__(self):
        self._sessions: dict[str, InterviewSession] = {}

    async def save(self, session: InterviewSession) -> None:
        self._sessions[session.session_id] = session.model_copy(deep=True)
        logger.debug(f"Saved session {session.session_id}")

    async def get(self, session_id: str) -> InterviewSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFound(f"Session not found: {session_id}")
        return session.model_copy(deep=True)

    async def list(
        self,
        search: str | None = None,
        sort_by: SortKey = "date",
        order: SortOrder = "desc",
    ) -> list[SessionSummary]:
        summaries = [session.to_summary() for session in self._sessions.values()]
        return filter_and_sort(summaries, search=search, sort_by=sort_by, order=order)

    async def delete(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is None:
            raise SessionNotFound(f"Session not found: {session_id}")
        logger.info(f"Deleted session {session_id}")
