"""
Поле GRID_SIZE x GRID_SIZE, построчно (row-major).
Значения клеток непрозрачны: сервер проверяет только форму и координаты.
"""
import copy
from typing import Any

from .constants import GRID_SIZE
from .errors import InvalidPayload

Grid = list[list[Any]]


def empty_board() -> Grid:
    return [[None] * GRID_SIZE for _ in range(GRID_SIZE)]


def is_empty(board: Grid) -> bool:
    return all(cell is None for row in board for cell in row)


def in_range(row: Any, col: Any) -> bool:
    # bool — подкласс int, координатой он не считается
    for v in (row, col):
        if not isinstance(v, int) or isinstance(v, bool):
            return False
    return 0 <= row < GRID_SIZE and 0 <= col < GRID_SIZE


def parse_board(raw: Any) -> Grid:
    """Проверяет форму присланного поля и возвращает его копию."""
    if not isinstance(raw, list) or len(raw) != GRID_SIZE:
        raise InvalidPayload(f"board must be a list of {GRID_SIZE} rows")
    for i, row in enumerate(raw):
        if not isinstance(row, list) or len(row) != GRID_SIZE:
            raise InvalidPayload(f"board row {i} must have {GRID_SIZE} cells")
    return copy.deepcopy(raw)
