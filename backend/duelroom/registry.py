"""
Реестр подключений: connection_id -> session_id (или None).
Единственный источник правды о том, кто где сидит.
"""


class ConnectionRegistry:
    def __init__(self):
        self._where: dict[str, str | None] = {}

    def bind(self, connection_id: str) -> None:
        self._where.setdefault(connection_id, None)

    def unbind(self, connection_id: str) -> None:
        self._where.pop(connection_id, None)

    def locate(self, connection_id: str) -> str | None:
        return self._where.get(connection_id)

    def assign(self, connection_id: str, session_id: str) -> None:
        """Посадить подключение в сессию. Неизвестные подключения игнорируются."""
        if connection_id in self._where:
            self._where[connection_id] = session_id

    def release(self, connection_id: str) -> None:
        if connection_id in self._where:
            self._where[connection_id] = None

    def is_bound(self, connection_id: str) -> bool:
        return connection_id in self._where

    def is_seated(self, connection_id: str) -> bool:
        return self._where.get(connection_id) is not None

    def __len__(self) -> int:
        return len(self._where)
