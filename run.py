"""Entry point for serving the Inventory API.

Starts the FastAPI application under Uvicorn.  It is intended to be
executed from the project root, e.g. in a container where you only
specify a single Python file to run.

Host and port are read from the environment variables ``HOST`` and
``PORT`` (defaults ``0.0.0.0`` and ``8000``); everything else is
configured through the variables documented in
``inventory_api.app.core.config``.

Usage:
    python run.py
"""
import asyncio
import logging
import os

from uvicorn import Config, Server

from inventory_api.app.core.config import settings
from inventory_api.app.main import app


async def run_api() -> None:
    """Serve the API until the process is interrupted."""
    host = os.getenv("HOST", "0.0.0.0")
    port = int(os.getenv("PORT", "8000"))
    config = Config(app=app, host=host, port=port, reload=False, log_level=settings.log_level.lower())
    server = Server(config)
    logging.getLogger(__name__).info("Serving %s on %s:%s", settings.project_name, host, port)
    await server.serve()


if __name__ == "__main__":
    try:
        asyncio.run(run_api())
    except (KeyboardInterrupt, SystemExit):
        pass
