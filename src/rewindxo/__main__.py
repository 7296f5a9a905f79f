"""Entry point for running RewindXO via ``python -m rewindxo``."""

from __future__ import annotations

import uvicorn

from .settings import get_logger, load_settings


def main() -> None:
    """Start the FastAPI-powered RewindXO web server."""

    settings = load_settings()
    get_logger().info("Serving RewindXO on %s:%d", settings.host, settings.port)
    uvicorn.run(
        "rewindxo.ui:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        reload=False,
    )


if __name__ == "__main__":
    main()
