"""
duelroom API и WebSocket.
"""
import logging

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .config import get_config
from .coordinator import Coordinator
from .ws_handlers import ws_session_loop
from .ws_manager import WSManager

config = get_config()

logging.basicConfig(
    level=config.log_level,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Приложение со своим менеджером сокетов и координатором (состояние только в памяти)."""
    app = FastAPI(title="duelroom API", debug=config.debug)
    app.state.manager = WSManager()
    app.state.coordinator = Coordinator(app.state.manager)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"status": "ok", **app.state.coordinator.stats()}

    @app.websocket("/ws")
    async def websocket_endpoint(ws: WebSocket):
        logger.info("WS: connection attempt from %s", ws.client)
        await ws_session_loop(ws, app.state.manager, app.state.coordinator)

    return app


app = create_app()
