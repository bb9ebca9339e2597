"""
Менеджер WebSocket: подключения по connection_id и очередь исходящих сообщений.
У каждого подключения своя очередь и своя задача-писатель, поэтому
медленный клиент не задерживает обработку событий остальных.
"""
import asyncio
import logging
import uuid
from typing import Any

from fastapi import WebSocket

from .config import get_config

logger = logging.getLogger(__name__)

CLOSE_TOO_SLOW = 4008


class Connection:
    def __init__(self, ws: WebSocket, connection_id: str, outbox_limit: int):
        self.ws = ws
        self.connection_id = connection_id
        self.outbox: asyncio.Queue[dict[str, Any]] = asyncio.Queue(maxsize=outbox_limit)
        self.writer: asyncio.Task | None = None


class WSManager:
    def __init__(self, outbox_limit: int | None = None):
        self._by_id: dict[str, Connection] = {}
        self._outbox_limit = outbox_limit
        self._closing: set[asyncio.Task] = set()

    async def connect(self, ws: WebSocket) -> str:
        """Зарегистрировать принятый сокет и запустить писателя. Возвращает connection_id."""
        connection_id = uuid.uuid4().hex
        limit = self._outbox_limit if self._outbox_limit is not None else get_config().outbox_limit
        conn = Connection(ws, connection_id, limit)
        conn.writer = asyncio.create_task(self._write_loop(conn))
        self._by_id[connection_id] = conn
        return connection_id

    async def disconnect(self, connection_id: str) -> None:
        conn = self._by_id.pop(connection_id, None)
        if conn is None or conn.writer is None:
            return
        conn.writer.cancel()
        try:
            await conn.writer
        except asyncio.CancelledError:
            pass

    def send(self, connection_id: str, payload: dict[str, Any]) -> bool:
        conn = self._by_id.get(connection_id)
        if not conn:
            return False
        try:
            conn.outbox.put_nowait(payload)
            return True
        except asyncio.QueueFull:
            logger.warning("send %s: outbox full, closing slow connection", connection_id)
            self._drop(conn)
            return False

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def _drop(self, conn: Connection) -> None:
        # Закрытие сокета завершит цикл приёма, дальше обычная обработка отключения
        self._by_id.pop(conn.connection_id, None)
        if conn.writer is not None:
            conn.writer.cancel()
        task = asyncio.create_task(self._close(conn))
        self._closing.add(task)
        task.add_done_callback(self._closing.discard)

    async def _close(self, conn: Connection) -> None:
        try:
            await conn.ws.close(code=CLOSE_TOO_SLOW)
        except Exception as e:
            logger.debug("close %s: %s", conn.connection_id, e)

    async def _write_loop(self, conn: Connection) -> None:
        while True:
            payload = await conn.outbox.get()
            try:
                await conn.ws.send_json(payload)
            except Exception as e:
                logger.warning("send_json %s: %s", conn.connection_id, e)
                return

