"""
Ошибки комнат.
RoomError и наследники уходят только запросившему клиенту в виде
{"type": "error", "code": ..., "message": ...} и никогда не рассылаются.
"""


class RoomError(Exception):
    code = "RoomError"

    def __init__(self, session_id: str | None, message: str | None = None):
        self.session_id = session_id
        super().__init__(message or f"{self.code}: {session_id}")

    def payload(self) -> dict:
        return {"type": "error", "code": self.code, "message": str(self)}


class AlreadyExists(RoomError):
    code = "AlreadyExists"

    def __init__(self, session_id: str):
        super().__init__(session_id, f"session {session_id!r} already exists")


class NotFound(RoomError):
    code = "NotFound"

    def __init__(self, session_id: str | None):
        if session_id is None:
            super().__init__(None, "not in a session")
        else:
            super().__init__(session_id, f"session {session_id!r} not found")


class Full(RoomError):
    code = "Full"

    def __init__(self, session_id: str):
        super().__init__(session_id, f"session {session_id!r} is full")


class InvalidPayload(ValueError):
    """Некорректное входящее сообщение; отбрасывается на границе."""
