from __future__ import annotations

from services.pos.app.services.session import PosSession


class InMemoryStore:
    """Live POS sessions. Drafts are never persisted; a restart starts every terminal fresh."""

    def __init__(self) -> None:
        self._sessions: dict[str, PosSession] = {}

    def save_session(self, session: PosSession) -> None:
        self._sessions[session.id] = session

    def get_session(self, session_id: str) -> PosSession | None:
        return self._sessions.get(session_id)

    def drop_session(self, session_id: str) -> None:
        self._sessions.pop(session_id, None)

    def clear(self) -> None:
        self._sessions.clear()


store = InMemoryStore()
