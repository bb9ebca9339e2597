"""
Рассылка состояния сессии её участникам.
Любое изменение состояния становится видно клиентам только через publish().
"""
import logging
from typing import Any, Protocol

from .registry import ConnectionRegistry
from .sessions import Session

logger = logging.getLogger(__name__)


class Sink(Protocol):
    """Очередь исходящих сообщений. send() только ставит в очередь и не ждёт доставки."""

    def send(self, connection_id: str, payload: dict[str, Any]) -> bool: ...


class Dispatcher:
    def __init__(self, sink: Sink, connections: ConnectionRegistry):
        self._sink = sink
        self._connections = connections

    def publish(self, session: Session) -> int:
        """Отправить полный snapshot всем участникам, сидящим в сессии. Возвращает число адресатов."""
        payload = session.snapshot()
        sent = 0
        for cid in session.participants:
            if self._connections.locate(cid) != session.id:
                continue
            self._sink.send(cid, payload)
            sent += 1
        logger.debug(
            "publish session=%s turn_holder=%s recipients=%d",
            session.id, session.turn_holder, sent,
        )
        return sent

    def notify(self, connection_id: str, payload: dict[str, Any]) -> bool:
        return self._sink.send(connection_id, payload)
