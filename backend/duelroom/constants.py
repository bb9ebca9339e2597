"""Константы поля и типы сообщений протокола."""
from typing import Any, TypedDict

GRID_SIZE = 5
MAX_PARTICIPANTS = 2

ANONYMOUS_PREFIX = "match-"


class SessionSnapshot(TypedDict):
    type: str
    session_id: str
    board: list[list[Any]]
    turn_holder: str | None
    participant_count: int


# Входящие сообщения
MSG_REQUEST_MATCH = "request_match"
MSG_CANCEL_MATCH = "cancel_match"
MSG_CREATE_SESSION = "create_session"
MSG_JOIN_SESSION = "join_session"
MSG_SUBMIT_TURN = "submit_turn"
MSG_PLACE_CELL = "place_cell"
MSG_RESET_SESSION = "reset_session"
MSG_LEAVE_SESSION = "leave_session"

# Исходящие сообщения
MSG_CONNECTED = "connected"
MSG_MATCHING_STATUS = "matching_status"
MSG_MATCH_FOUND = "match_found"
MSG_SESSION_CREATED = "session_created"
MSG_SESSION_STATE = "session_state"
MSG_OPPONENT_LEFT = "opponent_left"
MSG_SESSION_RESET = "session_reset"
MSG_ERROR = "error"

STATUS_WAITING = "waiting"
STATUS_CANCELLED = "cancelled"
