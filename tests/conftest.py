"""Общие фикстуры: координатор с записывающим получателем сообщений."""
from typing import Any

import pytest
import pytest_asyncio

from duelroom.coordinator import Coordinator


class RecordingSink:
    """Вместо очереди сокетов просто запоминает, кому что отправлено."""

    def __init__(self):
        self.sent: list[tuple[str, dict[str, Any]]] = []

    def send(self, connection_id: str, payload: dict[str, Any]) -> bool:
        self.sent.append((connection_id, payload))
        return True

    def to(self, connection_id: str) -> list[dict[str, Any]]:
        return [p for cid, p in self.sent if cid == connection_id]

    def types(self, connection_id: str) -> list[str]:
        return [p["type"] for p in self.to(connection_id)]

    def last(self, connection_id: str, msg_type: str) -> dict[str, Any] | None:
        for p in reversed(self.to(connection_id)):
            if p["type"] == msg_type:
                return p
        return None

    def clear(self) -> None:
        self.sent.clear()


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def coordinator(sink):
    return Coordinator(sink)


@pytest_asyncio.fixture
async def connected(coordinator):
    """Подключить q1..q4."""
    for cid in ("q1", "q2", "q3", "q4"):
        await coordinator.connect(cid)
    return coordinator
