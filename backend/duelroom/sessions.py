"""
Сессии (комнаты на двоих) и их реестр (in-memory).
Именованные сессии создаются по id клиента, анонимные — по итогам подбора.
"""
import asyncio
import uuid
from dataclasses import dataclass, field

from .board import Grid, empty_board
from .constants import ANONYMOUS_PREFIX, MAX_PARTICIPANTS, MSG_SESSION_STATE, SessionSnapshot
from .errors import AlreadyExists, Full, NotFound


@dataclass
class Session:
    id: str
    participants: list[str] = field(default_factory=list)
    turn_holder: str | None = None
    board: Grid = field(default_factory=empty_board)
    named: bool = False
    lock: asyncio.Lock = field(default_factory=asyncio.Lock, repr=False, compare=False)

    @property
    def is_full(self) -> bool:
        return len(self.participants) >= MAX_PARTICIPANTS

    @property
    def is_empty(self) -> bool:
        return not self.participants

    def seat_of(self, connection_id: str) -> int | None:
        try:
            return self.participants.index(connection_id)
        except ValueError:
            return None

    def snapshot(self) -> SessionSnapshot:
        """Payload session_state: полное состояние, без поправок под получателя."""
        return {
            "type": MSG_SESSION_STATE,
            "session_id": self.id,
            "board": [list(row) for row in self.board],
            "turn_holder": self.turn_holder,
            "participant_count": len(self.participants),
        }


class SessionRegistry:
    def __init__(self):
        self._sessions: dict[str, Session] = {}

    def create_named(self, session_id: str) -> Session:
        if session_id in self._sessions:
            raise AlreadyExists(session_id)
        s = Session(id=session_id, named=True)
        self._sessions[session_id] = s
        return s

    def create_anonymous(self) -> Session:
        session_id = _new_id()
        while session_id in self._sessions:
            session_id = _new_id()
        s = Session(id=session_id)
        self._sessions[session_id] = s
        return s

    def get(self, session_id: str) -> Session | None:
        return self._sessions.get(session_id)

    def join(self, session_id: str, connection_id: str) -> Session:
        """
        Посадить подключение в сессию.
        Второй участник запускает очередь ходов: ход у participants[0].
        """
        s = self._sessions.get(session_id)
        if s is None:
            raise NotFound(session_id)
        if connection_id in s.participants:
            return s
        if s.is_full:
            raise Full(session_id)
        s.participants.append(connection_id)
        if s.is_full:
            s.turn_holder = s.participants[0]
        return s

    def destroy(self, session_id: str) -> bool:
        """Удалить сессию. Повторный вызов ничего не делает и возвращает False."""
        return self._sessions.pop(session_id, None) is not None

    def ids(self) -> list[str]:
        return list(self._sessions)

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)


def _new_id() -> str:
    return ANONYMOUS_PREFIX + uuid.uuid4().hex[:12]
