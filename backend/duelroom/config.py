"""Конфигурация приложения."""
import os
from functools import lru_cache


@lru_cache
def get_config():
    return type("Config", (), {
        "debug": os.environ.get("DEBUG", "0").lower() in ("1", "true", "yes"),
        "allowed_origins": os.environ.get("ALLOWED_ORIGINS", "*").split(","),
        "log_level": os.environ.get("LOG_LEVEL", "INFO").upper(),
        "host": os.environ.get("HOST", "0.0.0.0"),
        "port": int(os.environ.get("PORT", "3000")),
        # сколько сообщений может ждать отправки одному клиенту
        "outbox_limit": int(os.environ.get("OUTBOX_LIMIT", "256")),
    })()
