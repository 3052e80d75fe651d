"""
Process entrypoint.

Loads the configuration, builds the app, and serves it with uvicorn.
SIGINT and SIGTERM end the process immediately with status 0; in-flight
requests are not drained.
"""

import contextlib
import logging
import os
import signal
import socket
import sys
from collections.abc import Iterator

import uvicorn

from microservice.config import ConfigurationError, load_settings
from microservice.logging_config import configure_logging, uvicorn_level
from microservice.main import create_app

logger = logging.getLogger(__name__)

SHUTDOWN_SIGNALS = (signal.SIGINT, signal.SIGTERM)


def handle_shutdown_signal(signum: int, frame) -> None:
    """Log the signal and exit at once."""
    logger.info("Received %s. Shutting down …", signal.Signals(signum).name)
    logging.shutdown()
    os._exit(0)


def install_signal_handlers() -> None:
    for sig in SHUTDOWN_SIGNALS:
        signal.signal(sig, handle_shutdown_signal)


class Server(uvicorn.Server):
    """uvicorn server that exits on signal instead of draining connections."""

    @contextlib.contextmanager
    def capture_signals(self) -> Iterator[None]:
        install_signal_handlers()
        yield

    async def startup(self, sockets: list[socket.socket] | None = None) -> None:
        await super().startup(sockets=sockets)
        if self.started:
            logger.info("Server running on http://%s:%d", self.config.host, self.config.port)


def main() -> None:
    """Start the service; exits with status 1 if it cannot start."""
    try:
        settings = load_settings()
    except ConfigurationError as exc:
        configure_logging("info")
        logger.error("Error starting server: %s", exc)
        sys.exit(1)

    try:
        app = create_app(settings)
        server = Server(
            uvicorn.Config(
                app,
                host=settings.host,
                port=settings.port,
                log_level=uvicorn_level(settings.log_level),
            )
        )
        server.run()
    except SystemExit as exc:
        # uvicorn exits with its own status when it cannot bind
        if exc.code not in (None, 0):
            logger.error("Error starting server: uvicorn exited with status %s", exc.code)
            sys.exit(1)
        raise
    except Exception:
        logger.exception("Error starting server")
        sys.exit(1)

    if not server.started:
        logger.error("Server failed to start.")
        sys.exit(1)


if __name__ == "__main__":
    main()
