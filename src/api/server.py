"""
REST API server lifecycle.

ApiServer owns the listening socket and a background thread running uvicorn.
The owning process coordinates shutdown with two signals:

  stop    — threading.Event set by the owner to request shutdown
  stopped — concurrent.futures.Future completed with True once the socket
            is closed (or with the fatal ApiServerError)

States: IDLE -> STARTING -> SERVING -> STOPPING -> STOPPED.
"""
from __future__ import annotations

import enum
import logging
import socket
import threading
import time
from concurrent.futures import Future

import uvicorn
from fastapi import FastAPI

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class ApiServerError(Exception):
    """Fatal REST API failure; the owning process is expected to exit."""


class AddressError(ApiServerError, ValueError):
    """Malformed listen address."""


class ServerStartupError(ApiServerError):
    """The socket could not be bound or the serve loop did not come up."""


class ServeError(ApiServerError):
    """The serve loop stopped without a stop request."""


class LifecycleError(ApiServerError):
    """Operation not allowed in the current server state."""


class ServerState(str, enum.Enum):
    IDLE = "idle"
    STARTING = "starting"
    SERVING = "serving"
    STOPPING = "stopping"
    STOPPED = "stopped"


def parse_address(address: str) -> tuple[str, int]:
    """
    Split a ``host:port`` listen address.

    An empty host (":8080") means all interfaces; IPv6 hosts may be written
    in brackets ("[::1]:8080").
    """
    host, sep, port_str = address.rpartition(":")
    if not sep:
        raise AddressError(f"listen address {address!r} must be host:port")
    if host.startswith("[") and host.endswith("]"):
        host = host[1:-1]
    try:
        port = int(port_str)
    except ValueError as exc:
        raise AddressError(f"invalid port in listen address {address!r}") from exc
    if not 0 <= port <= 65535:
        raise AddressError(f"port out of range in listen address {address!r}")
    return host or "0.0.0.0", port


# ─────────────────────────────────────────────────────────────────────────────
# Server
# ─────────────────────────────────────────────────────────────────────────────

class ApiServer:
    """Serves an ASGI app on a background thread until asked to stop."""

    backlog = 2048
    poll_interval = 0.5
    join_margin = 1.0

    def __init__(
        self,
        app: FastAPI,
        address: str,
        *,
        access_log: bool = False,
        startup_timeout: float = 5.0,
        shutdown_timeout: float = 5.0,
    ) -> None:
        self.app = app
        self.address = address
        self.host, self.port = parse_address(address)
        self.access_log = access_log
        self.startup_timeout = startup_timeout
        self.shutdown_timeout = shutdown_timeout

        self.state = ServerState.IDLE
        self._state_lock = threading.Lock()
        self._socket: socket.socket | None = None
        self._server: uvicorn.Server | None = None
        self._thread: threading.Thread | None = None
        self._failure: BaseException | None = None

    @property
    def bound_address(self) -> tuple[str, int]:
        """Actual (host, port) of the listening socket, e.g. after binding port 0."""
        if self._socket is None:
            raise LifecycleError("REST API socket is not bound")
        host, port = self._socket.getsockname()[:2]
        return host, port

    # ── public lifecycle ─────────────────────────────────────────────────────

    def start(self) -> None:
        """Bind the socket and start serving on a background thread."""
        self._transition(ServerState.IDLE, ServerState.STARTING)
        try:
            self._socket = self._bind()
            config = uvicorn.Config(
                self.app,
                host=self.host,
                port=self.port,
                log_config=None,
                access_log=self.access_log,
                lifespan="on",
                timeout_graceful_shutdown=self.shutdown_timeout,
            )
            self._server = uvicorn.Server(config)
            self._thread = threading.Thread(
                target=self._serve_forever, name="railfeed-api", daemon=True
            )
            self._thread.start()
            self._wait_started()
        except ServerStartupError:
            self._abort()
            raise
        except Exception as exc:
            self._abort()
            raise ServerStartupError(f"REST API on {self.address} failed to start: {exc}") from exc

        self._transition(ServerState.STARTING, ServerState.SERVING)
        host, port = self.bound_address
        logger.info("REST API started (address=%s:%d)", host, port)

    def shutdown(self) -> None:
        """Close the listening socket and wait for the serve loop to end."""
        self._transition(ServerState.SERVING, ServerState.STOPPING)
        logger.info("Shutting down REST API")
        self._close()
        self.state = ServerState.STOPPED
        logger.info("REST API shut down")
        if self._failure is not None:
            raise ServeError("REST API serve loop failed during shutdown") from self._failure

    def run(self, stop: threading.Event, stopped: Future) -> None:
        """
        Serve until ``stop`` is set, shut down, then complete ``stopped``.

        ``stopped`` receives True only after the socket is closed. Fatal
        errors are set on ``stopped`` and re-raised for the caller to act on.
        """
        if self.state not in (ServerState.IDLE, ServerState.SERVING):
            raise LifecycleError(f"cannot run REST API while {self.state.value}")
        try:
            if self.state is ServerState.IDLE:
                self.start()
            self._wait_for_stop(stop)
            if not stop.is_set():
                self._abort()
                raise ServeError("REST API serve loop exited unexpectedly") from self._failure
            self.shutdown()
        except ApiServerError as exc:
            logger.critical("REST API fatal error: %s", exc)
            stopped.set_exception(exc)
            raise
        stopped.set_result(True)

    # ── internals ────────────────────────────────────────────────────────────

    def _transition(self, expected: ServerState, new: ServerState) -> None:
        with self._state_lock:
            if self.state is not expected:
                raise LifecycleError(
                    f"cannot move REST API to {new.value} while {self.state.value}"
                )
            self.state = new

    def _bind(self) -> socket.socket:
        try:
            family, sock_type, proto, _, sockaddr = socket.getaddrinfo(
                self.host, self.port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE
            )[0]
            sock = socket.socket(family, sock_type, proto)
        except OSError as exc:
            raise ServerStartupError(f"cannot resolve {self.address}: {exc}") from exc
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind(sockaddr)
            sock.listen(self.backlog)
        except OSError as exc:
            sock.close()
            raise ServerStartupError(f"cannot listen on {self.address}: {exc}") from exc
        return sock

    def _serve_forever(self) -> None:
        try:
            self._server.run(sockets=[self._socket])
        except SystemExit as exc:
            # uvicorn exits when the app lifespan fails to start
            self._failure = exc
        except Exception as exc:
            self._failure = exc

    def _wait_started(self) -> None:
        deadline = time.monotonic() + self.startup_timeout
        while not self._server.started:
            if not self._thread.is_alive():
                raise ServerStartupError(
                    f"REST API on {self.address} exited during startup"
                ) from self._failure
            if time.monotonic() >= deadline:
                raise ServerStartupError(
                    f"REST API on {self.address} not started after {self.startup_timeout:.1f}s"
                )
            self._thread.join(0.01)

    def _wait_for_stop(self, stop: threading.Event) -> None:
        while not stop.wait(self.poll_interval):
            if not self._thread.is_alive():
                return

    def _close(self) -> None:
        if self._server is not None:
            self._server.should_exit = True
        if self._thread is not None:
            self._thread.join(self.shutdown_timeout + self.join_margin)
            if self._thread.is_alive():
                logger.warning(
                    "REST API thread still running %.1fs after shutdown request",
                    self.shutdown_timeout,
                )
        if self._socket is not None:
            self._socket.close()

    def _abort(self) -> None:
        self._close()
        self.state = ServerState.STOPPED
