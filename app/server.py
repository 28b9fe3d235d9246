"""
Server entry point.
Command: hojas-de-vida-api  (or: uvicorn app.server:app --host 0.0.0.0 --port 3999)
"""
import uvicorn

from app.config import get_settings
from app.main import app

__all__ = ["app", "run"]


def run() -> None:
    config = get_settings()
    uvicorn.run(
        "app.main:app",
        host=config.HOST,
        port=config.PORT,
        log_config=None,
    )


if __name__ == "__main__":
    run()
