"""Graceful shutdown coordination.

Three states:
  RUNNING   serving requests
  DRAINING  a termination signal arrived; no new connections, in-flight
            requests run to completion
  STOPPED   every in-flight request finished

SIGINT and SIGTERM race into one trigger; whichever fires first starts the
drain and any later signal is ignored. A signal the platform does not define
never fires, which leaves the other source to win the race.
"""

import asyncio
import functools
import logging
import signal
from collections.abc import Iterable
from enum import Enum
from typing import Any

from devserver.core.exceptions import StartupError

logger = logging.getLogger(__name__)

DEFAULT_SIGNALS = ("SIGINT", "SIGTERM")


class ShutdownState(str, Enum):
    RUNNING = "running"
    DRAINING = "draining"
    STOPPED = "stopped"


class ShutdownCoordinator:
    """Fan-in of termination signals with a single, one-shot transition."""

    def __init__(self, signal_names: Iterable[str] = DEFAULT_SIGNALS) -> None:
        self.signal_names = tuple(signal_names)
        self.state = ShutdownState.RUNNING
        self.reason: str | None = None
        self.unavailable: tuple[str, ...] = ()

        self._draining = asyncio.Event()
        self._loop: asyncio.AbstractEventLoop | None = None
        self._loop_handlers: list[signal.Signals] = []
        self._previous_handlers: dict[signal.Signals, Any] = {}

    # -------------------------------------------------------------------
    # Signal sources
    # -------------------------------------------------------------------

    def install(self) -> None:
        """Register a handler for every available signal.

        Must be called from the running event loop. Raises StartupError if a
        handler cannot be installed.
        """
        self._loop = asyncio.get_running_loop()
        unavailable = []
        for name in self.signal_names:
            sig = getattr(signal, name, None)
            if sig is None:
                unavailable.append(name)
                logger.debug("%s is not available on this platform", name)
                continue
            self._install_handler(sig)
        self.unavailable = tuple(unavailable)

    def _install_handler(self, sig: signal.Signals) -> None:
        fire = functools.partial(self.trigger, sig.name)
        previous = signal.getsignal(sig)
        try:
            self._loop.add_signal_handler(sig, fire)
        except NotImplementedError:
            # Event loop without signal support (Windows)
            loop = self._loop
            try:
                signal.signal(sig, lambda _signum, _frame: loop.call_soon_threadsafe(fire))
            except (OSError, RuntimeError, ValueError) as exc:
                raise StartupError(f"Failed to install {sig.name} handler: {exc}") from exc
        except (OSError, RuntimeError, ValueError) as exc:
            raise StartupError(f"Failed to install {sig.name} handler: {exc}") from exc
        else:
            self._loop_handlers.append(sig)
        self._previous_handlers[sig] = previous

    def uninstall(self) -> None:
        """Restore the handlers that were in place before ``install``."""
        for sig in self._loop_handlers:
            self._loop.remove_signal_handler(sig)
        for sig, previous in self._previous_handlers.items():
            # None means the previous handler was not installed from Python
            if previous is not None:
                signal.signal(sig, previous)
        self._loop_handlers.clear()
        self._previous_handlers.clear()

    # -------------------------------------------------------------------
    # State transitions
    # -------------------------------------------------------------------

    def trigger(self, reason: str) -> bool:
        """Move RUNNING -> DRAINING. Returns False if already past RUNNING."""
        if self.state is not ShutdownState.RUNNING:
            logger.debug("Ignoring %s, shutdown already in progress", reason)
            return False

        self.state = ShutdownState.DRAINING
        self.reason = reason
        logger.warning("Received %s, shutting down gracefully...", reason)
        self._draining.set()
        return True

    async def wait(self) -> str:
        """Block until the first source fires; return its name."""
        await self._draining.wait()
        return self.reason

    def mark_stopped(self) -> None:
        self.state = ShutdownState.STOPPED
        logger.info("All in-flight requests finished")
