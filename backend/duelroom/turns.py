"""
Очередь ходов внутри сессии.

WAITING    — один участник, ход ещё ни разу не передавался (turn_holder is None)
ACTIVE     — ход у turn_holder; успешный ход передаёт его следующему
TERMINATED — сессия удалена из реестра

Функции только меняют состояние Session; блокировки и рассылку
делает Coordinator.
"""
import enum
from typing import Any

from .board import Grid, empty_board, in_range
from .sessions import Session


class SessionState(str, enum.Enum):
    WAITING = "waiting"
    ACTIVE = "active"
    TERMINATED = "terminated"


def state_of(session: Session | None) -> SessionState:
    if session is None or session.is_empty:
        return SessionState.TERMINATED
    if session.is_full:
        return SessionState.ACTIVE
    return SessionState.WAITING


def next_holder(session: Session) -> str | None:
    """Следующий по кругу после текущего держателя хода."""
    if not session.participants:
        return None
    if session.turn_holder not in session.participants:
        return session.participants[0]
    i = session.participants.index(session.turn_holder)
    return session.participants[(i + 1) % len(session.participants)]


def may_move(session: Session, connection_id: str) -> bool:
    """Ходить можно только в ACTIVE и только держателю хода."""
    return state_of(session) is SessionState.ACTIVE and connection_id == session.turn_holder


def submit_turn(session: Session, connection_id: str, board: Grid) -> bool:
    """
    Принять поле целиком и передать ход.
    Ход не от держателя хода или без соперника — не ошибка, а устаревший запрос:
    False, состояние не меняется.
    """
    if not may_move(session, connection_id):
        return False
    session.board = board
    session.turn_holder = next_holder(session)
    return True


def place_cell(session: Session, connection_id: str, row: int, col: int, value: Any) -> bool:
    """Поставить (или убрать, value=None) одну клетку, не передавая ход."""
    if not may_move(session, connection_id):
        return False
    if not in_range(row, col):
        return False
    session.board[row][col] = value
    return True


def reset(session: Session) -> None:
    session.board = empty_board()
    if session.is_full:
        session.turn_holder = session.participants[0]


def remove_participant(session: Session, connection_id: str) -> bool:
    """
    Убрать участника. Оставшийся получает чистое поле и ход.
    Возвращает False если участника в сессии не было.
    """
    if connection_id not in session.participants:
        return False
    session.participants.remove(connection_id)
    session.board = empty_board()
    session.turn_holder = session.participants[0] if session.participants else None
    return True
