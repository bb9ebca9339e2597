"""
Обработка сообщений WebSocket: подбор, комнаты, ходы, сброс, выход.
Ошибки комнат уходят только отправителю; некорректные сообщения отбрасываются.
"""
import json
import logging

from fastapi import WebSocket
from starlette.websockets import WebSocketDisconnect

from .board import parse_board
from .constants import (
    MSG_CANCEL_MATCH,
    MSG_CONNECTED,
    MSG_CREATE_SESSION,
    MSG_JOIN_SESSION,
    MSG_LEAVE_SESSION,
    MSG_PLACE_CELL,
    MSG_REQUEST_MATCH,
    MSG_RESET_SESSION,
    MSG_SUBMIT_TURN,
)
from .coordinator import Coordinator
from .errors import InvalidPayload, RoomError
from .ws_manager import WSManager

logger = logging.getLogger(__name__)


def _session_id_arg(data: dict) -> str:
    session_id = data.get("session_id")
    if not isinstance(session_id, str) or not session_id.strip():
        raise InvalidPayload("session_id must be a non-empty string")
    return session_id.strip()


async def handle_ws_message(coordinator: Coordinator, raw: str, connection_id: str) -> bool:
    """
    Обрабатывает одно сообщение клиента.
    Возвращает False если соединение нужно закрыть.
    """
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        logger.warning("WS: invalid JSON from %s: %s", connection_id, e)
        return True
    if not isinstance(data, dict):
        logger.warning("WS: non-object message from %s", connection_id)
        return True
    t = data.get("type")
    logger.info("WS: msg from %s type=%s", connection_id, t)
    try:
        if t == MSG_REQUEST_MATCH:
            await coordinator.request_match(connection_id)
        elif t == MSG_CANCEL_MATCH:
            await coordinator.cancel_match(connection_id)
        elif t == MSG_CREATE_SESSION:
            await coordinator.create_session(connection_id, _session_id_arg(data))
        elif t == MSG_JOIN_SESSION:
            await coordinator.join_session(connection_id, _session_id_arg(data))
        elif t == MSG_SUBMIT_TURN:
            board = parse_board(data.get("board"))
            await coordinator.submit_turn(connection_id, coordinator.session_of(connection_id), board)
        elif t == MSG_PLACE_CELL:
            await coordinator.place_cell(
                connection_id,
                coordinator.session_of(connection_id),
                data.get("row"),
                data.get("col"),
                data.get("value"),
            )
        elif t == MSG_RESET_SESSION:
            await coordinator.reset_session(connection_id, coordinator.session_of(connection_id))
        elif t == MSG_LEAVE_SESSION:
            await coordinator.leave_session(connection_id)
        else:
            logger.warning("WS: unknown message type %r from %s", t, connection_id)
    except InvalidPayload as e:
        logger.warning("WS: bad %s payload from %s: %s", t, connection_id, e)
    except RoomError as e:
        logger.info("WS: %s for %s: %s", e.code, connection_id, e)
        coordinator.dispatcher.notify(connection_id, e.payload())
    return True


async def ws_session_loop(ws: WebSocket, manager: WSManager, coordinator: Coordinator) -> None:
    """
    Принять сокет, выдать connection_id и читать сообщения до отключения.
    При любом выходе подключение проходит обычную обработку отключения.
    """
    connection_id = None
    try:
        await ws.accept()
        connection_id = await manager.connect(ws)
        await coordinator.connect(connection_id)
        manager.send(connection_id, {"type": MSG_CONNECTED, "connection_id": connection_id})
        logger.info("WS: accepted connection_id=%s", connection_id)
        while True:
            message = await ws.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000), message.get("reason"))
            msg = message.get("text")
            if msg is None:
                logger.warning("WS: non-text frame from %s ignored", connection_id)
                continue
            if not await handle_ws_message(coordinator, msg, connection_id):
                break
    except WebSocketDisconnect as e:
        logger.info("WS: client disconnected code=%s reason=%s connection_id=%s", e.code, e.reason or "", connection_id)
    except Exception as e:
        logger.exception("WS: error connection_id=%s: %s", connection_id, e)
    finally:
        if connection_id:
            await coordinator.disconnect(connection_id)
            await manager.disconnect(connection_id)
            logger.info("WS: disconnected connection_id=%s", connection_id)
