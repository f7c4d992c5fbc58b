"""Process entry point.

Loads settings, configures logging, binds the listening socket and runs
uvicorn until the ShutdownCoordinator reports a termination signal, then
drains in-flight requests before exiting.

Exit status is 0 after a graceful shutdown and 1 when settings are invalid,
the socket cannot be bound or signal handlers cannot be installed.
"""

import asyncio
import contextlib
import logging
import socket
import sys

import uvicorn
from pydantic import ValidationError
from starlette.types import ASGIApp

from devserver.config import Settings
from devserver.core.exceptions import StartupError
from devserver.core.log_config import configure_logging
from devserver.core.shutdown import ShutdownCoordinator
from devserver.main import create_app

logger = logging.getLogger(__name__)


class _Server(uvicorn.Server):
    """uvicorn server that leaves signal handling to the ShutdownCoordinator."""

    def install_signal_handlers(self) -> None:  # uvicorn < 0.29
        pass

    @contextlib.contextmanager
    def capture_signals(self):
        yield


def bind_socket(host: str, port: int) -> socket.socket:
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    try:
        return socket.create_server((host, port), family=family)
    except OSError as exc:
        raise StartupError(f"Failed to bind to address {host}:{port}: {exc}") from exc


async def serve(
    app: ASGIApp,
    sock: socket.socket,
    coordinator: ShutdownCoordinator,
    shutdown_timeout: float | None = None,
) -> None:
    """Serve *app* on *sock* until the coordinator fires, then drain."""
    config = uvicorn.Config(
        app,
        log_config=None,
        timeout_graceful_shutdown=shutdown_timeout,
    )
    server = _Server(config)

    serve_task = asyncio.create_task(server.serve(sockets=[sock]))
    stop_task = asyncio.create_task(coordinator.wait())
    done, _ = await asyncio.wait({serve_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

    if stop_task in done:
        logger.info("Draining in-flight requests")
        server.should_exit = True
        await serve_task
    else:
        stop_task.cancel()
        serve_task.result()
        if not server.started:
            raise StartupError("Server failed to start")

    coordinator.mark_stopped()


async def run(settings: Settings) -> None:
    app = create_app(settings)
    sock = bind_socket(settings.host, settings.port)
    coordinator = ShutdownCoordinator()
    try:
        coordinator.install()

        host, port = sock.getsockname()[:2]
        logger.info("Server listening on http://%s:%d", host, port)
        logger.info("Serving static files from: %s", settings.static_dir)
        logger.info("Environment: %s", settings.environment)

        await serve(app, sock, coordinator, shutdown_timeout=settings.shutdown_timeout)
    finally:
        coordinator.uninstall()
        sock.close()

    logger.info("Server shutdown complete")


def main() -> None:
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.critical("Invalid configuration: %s", exc)
        sys.exit(1)

    configure_logging(settings)
    logger.info("Starting server with config: %r", settings)

    try:
        asyncio.run(run(settings))
    except StartupError as exc:
        logger.critical("%s", exc)
        sys.exit(1)
