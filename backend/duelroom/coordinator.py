"""
Координатор комнат: единственный владелец очереди, реестра сессий и реестра подключений.

Блокировки: у каждой сессии свой asyncio.Lock на время изменения её состояния;
общий self._lock — только на короткие изменения реестров.
Порядок всегда: сначала lock сессии, потом self._lock.
Всё, что видят клиенты, уходит через Dispatcher после изменения состояния.
"""
import asyncio
import logging
from typing import Any

from . import turns
from .board import Grid
from .constants import (
    MSG_MATCH_FOUND,
    MSG_MATCHING_STATUS,
    MSG_OPPONENT_LEFT,
    MSG_SESSION_CREATED,
    MSG_SESSION_RESET,
    STATUS_CANCELLED,
    STATUS_WAITING,
)
from .dispatcher import Dispatcher, Sink
from .errors import NotFound
from .matchmaking import MatchQueue
from .registry import ConnectionRegistry
from .sessions import Session, SessionRegistry

logger = logging.getLogger(__name__)


class Coordinator:
    def __init__(self, sink: Sink):
        self.connections = ConnectionRegistry()
        self.queue = MatchQueue(self.connections)
        self.sessions = SessionRegistry()
        self.dispatcher = Dispatcher(sink, self.connections)
        self._lock = asyncio.Lock()

    # --- подключения ---

    async def connect(self, connection_id: str) -> None:
        async with self._lock:
            self.connections.bind(connection_id)
        logger.info("connect %s", connection_id)

    async def disconnect(self, connection_id: str) -> None:
        """Потеря подключения: сначала unbind, потом очередь и сессия."""
        async with self._lock:
            session_id = self.connections.locate(connection_id)
            self.connections.unbind(connection_id)
            self.queue.remove(connection_id)
        logger.info("disconnect %s session=%s", connection_id, session_id)
        if session_id is not None:
            await self._vacate(connection_id, session_id)

    def session_of(self, connection_id: str) -> str | None:
        return self.connections.locate(connection_id)

    # --- случайный подбор ---

    async def request_match(self, connection_id: str) -> Session | None:
        """Встать в очередь. Если пара собралась — создать анонимную сессию и вернуть её."""
        async with self._lock:
            pair = self.queue.enqueue(connection_id)
            if pair is None:
                if connection_id in self.queue:
                    self.dispatcher.notify(
                        connection_id,
                        {"type": MSG_MATCHING_STATUS, "status": STATUS_WAITING},
                    )
                return None
            session = self.sessions.create_anonymous()
            for cid in pair:
                self.sessions.join(session.id, cid)
                self.connections.assign(cid, session.id)
            logger.info("matched %s and %s into %s", pair[0], pair[1], session.id)
            self._announce_seats(session)
            self.dispatcher.publish(session)
        return session

    async def cancel_match(self, connection_id: str) -> bool:
        async with self._lock:
            removed = self.queue.remove(connection_id)
        if removed:
            self.dispatcher.notify(
                connection_id,
                {"type": MSG_MATCHING_STATUS, "status": STATUS_CANCELLED},
            )
        return removed

    # --- именованные сессии ---

    async def create_session(self, connection_id: str, session_id: str) -> Session:
        """
        Новое место занимается под self._lock, и только потом подключение
        уходит из прежней сессии: отказ ничего не меняет.
        """
        async with self._lock:
            session = self.sessions.create_named(session_id)
            previous = self.connections.locate(connection_id)
            self.queue.remove(connection_id)
            self.sessions.join(session_id, connection_id)
            self.connections.assign(connection_id, session_id)
        logger.info("session %s created by %s", session_id, connection_id)
        if previous is not None:
            await self._vacate(connection_id, previous)
        self.dispatcher.notify(
            connection_id,
            {"type": MSG_SESSION_CREATED, "session_id": session_id},
        )
        self.dispatcher.publish(session)
        return session

    async def join_session(self, connection_id: str, session_id: str) -> Session:
        session = self.sessions.get(session_id)
        if session is None:
            raise NotFound(session_id)
        async with session.lock:
            async with self._lock:
                if self.sessions.get(session_id) is not session:
                    raise NotFound(session_id)
                previous = self.connections.locate(connection_id)
                self.sessions.join(session_id, connection_id)
                self.queue.remove(connection_id)
                self.connections.assign(connection_id, session_id)
            logger.info("%s joined %s", connection_id, session_id)
            self._announce_seats(session)
            self.dispatcher.publish(session)
        # lock прежней сессии берётся только после освобождения lock новой
        if previous is not None and previous != session_id:
            await self._vacate(connection_id, previous)
        return session

    # --- ходы ---

    async def submit_turn(self, connection_id: str, session_id: str | None, board: Grid) -> bool:
        """False — ход проигнорирован (не очередь отправителя)."""
        session = self._require(session_id)
        async with session.lock:
            self._ensure_alive(session)
            if not turns.submit_turn(session, connection_id, board):
                logger.debug("ignored turn from %s in %s", connection_id, session.id)
                return False
            self.dispatcher.publish(session)
        return True

    async def place_cell(
        self,
        connection_id: str,
        session_id: str | None,
        row: int,
        col: int,
        value: Any,
    ) -> bool:
        session = self._require(session_id)
        async with session.lock:
            self._ensure_alive(session)
            if not turns.place_cell(session, connection_id, row, col, value):
                logger.debug("ignored cell (%s, %s) from %s in %s", row, col, connection_id, session.id)
                return False
            self.dispatcher.publish(session)
        return True

    async def reset_session(self, connection_id: str, session_id: str | None) -> bool:
        session = self._require(session_id)
        async with session.lock:
            self._ensure_alive(session)
            if connection_id not in session.participants:
                return False
            turns.reset(session)
            logger.info("session %s reset by %s", session.id, connection_id)
            self.dispatcher.publish(session)
            for cid in session.participants:
                self.dispatcher.notify(cid, {"type": MSG_SESSION_RESET, "session_id": session.id})
        return True

    async def leave_session(self, connection_id: str) -> None:
        """Как отключение, но сокет остаётся открытым."""
        await self._depart(connection_id)

    def stats(self) -> dict[str, int]:
        return {
            "sessions": len(self.sessions),
            "waiting": len(self.queue),
            "connections": len(self.connections),
        }

    # --- внутреннее ---

    def _require(self, session_id: str | None) -> Session:
        session = self.sessions.get(session_id) if session_id is not None else None
        if session is None:
            raise NotFound(session_id)
        return session

    def _ensure_alive(self, session: Session) -> None:
        # Сессию могли удалить, пока ждали её lock
        if self.sessions.get(session.id) is not session:
            raise NotFound(session.id)

    def _announce_seats(self, session: Session) -> None:
        for seat, cid in enumerate(session.participants):
            self.dispatcher.notify(
                cid,
                {"type": MSG_MATCH_FOUND, "session_id": session.id, "seat": seat},
            )

    async def _depart(self, connection_id: str) -> None:
        async with self._lock:
            self.queue.remove(connection_id)
            session_id = self.connections.locate(connection_id)
            self.connections.release(connection_id)
        if session_id is not None:
            await self._vacate(connection_id, session_id)

    async def _vacate(self, connection_id: str, session_id: str) -> None:
        """Убрать участника; пустую сессию удалить, оставшемуся — opponent_left и чистое поле."""
        session = self.sessions.get(session_id)
        if session is None:
            return
        async with session.lock:
            if not turns.remove_participant(session, connection_id):
                return
            if session.is_empty:
                async with self._lock:
                    if self.sessions.destroy(session_id):
                        logger.info("session %s destroyed", session_id)
                return
            survivor = session.participants[0]
            logger.info("%s left %s, %s waits for a new opponent", connection_id, session_id, survivor)
            self.dispatcher.notify(survivor, {"type": MSG_OPPONENT_LEFT, "session_id": session_id})
            self.dispatcher.publish(session)
