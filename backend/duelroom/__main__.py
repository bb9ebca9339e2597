"""Запуск: python -m duelroom"""
import uvicorn

from .config import get_config


def main() -> None:
    config = get_config()
    uvicorn.run(
        "duelroom.main:app",
        host=config.host,
        port=config.port,
        log_level=config.log_level.lower(),
        reload=config.debug,
    )


if __name__ == "__main__":
    main()
