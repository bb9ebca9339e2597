"""
Очередь случайного подбора соперника (in-memory, FIFO).
Пара всегда собирается из двух самых давних ожидающих.
"""
from .registry import ConnectionRegistry


class MatchQueue:
    def __init__(self, connections: ConnectionRegistry):
        self._connections = connections
        self._waiting: list[str] = []

    def enqueue(self, connection_id: str) -> tuple[str, str] | None:
        """
        Встать в очередь и сразу попробовать собрать пару.
        Повторный запрос, запрос из сессии и от неизвестного подключения ничего не меняют.
        Возвращает (first, second) если пара собрана, иначе None.
        """
        if (
            connection_id not in self._waiting
            and self._connections.is_bound(connection_id)
            and not self._connections.is_seated(connection_id)
        ):
            self._waiting.append(connection_id)
        return self.try_pair()

    def try_pair(self) -> tuple[str, str] | None:
        if len(self._waiting) < 2:
            return None
        first, second = self._waiting[0], self._waiting[1]
        del self._waiting[:2]
        return first, second

    def remove(self, connection_id: str) -> bool:
        """Убрать из очереди. Возвращает True если был в очереди."""
        try:
            self._waiting.remove(connection_id)
        except ValueError:
            return False
        return True

    def waiting(self) -> list[str]:
        return list(self._waiting)

    def __contains__(self, connection_id: str) -> bool:
        return connection_id in self._waiting

    def __len__(self) -> int:
        return len(self._waiting)
