"""The HTTP server that hosts the process API."""

from __future__ import annotations

import logging
import ssl
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from socketserver import ThreadingMixIn
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from flask import Flask, request

logger = logging.getLogger(__name__)

GRACEFUL_SHUTDOWN_TIMEOUT = 5.0


@dataclass(frozen=True)
class ServerTLSConfig:
    """Certificate and key the server presents."""

    cert_file: str
    key_file: str


def install_request_logging(app: Flask) -> Flask:
    """Log method, URI, status and time of every request handled by ``app``."""

    @app.after_request
    def _log_request(response):
        uri = request.path
        if request.query_string:
            uri += "?" + request.query_string.decode("latin-1")
        logger.info(
            "request",
            extra={
                "method": request.method,
                "uri": uri,
                "status": response.status_code,
                "timestamp": datetime.now(timezone.utc)
                .astimezone()
                .isoformat(timespec="seconds"),
            },
        )
        return response

    return app


def create_app() -> Flask:
    """Return a Flask application with request logging installed."""
    return install_request_logging(Flask(__name__))


class _ThreadingServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


class _QuietHandler(WSGIRequestHandler):
    """Sends the server's access lines to the debug log instead of stderr."""

    def log_message(self, format, *args):  # noqa: A002
        logger.debug("%s - %s", self.address_string(), format % args)


class WebServer:
    """Serves a WSGI application on a port, optionally over TLS."""

    def __init__(
        self,
        app: Flask,
        port: int | str,
        tls_config: ServerTLSConfig | None = None,
    ) -> None:
        self.app = app
        self.tls_config = tls_config
        self._serving = threading.Event()
        try:
            self._server = make_server(
                "",
                int(port),
                app,
                server_class=_ThreadingServer,
                handler_class=_QuietHandler,
            )
            if tls_config is not None:
                context = ssl.SSLContext(ssl.PROTOCOL_TLS_SERVER)
                context.load_cert_chain(tls_config.cert_file, tls_config.key_file)
                self._server.socket = context.wrap_socket(
                    self._server.socket, server_side=True
                )
        except (OSError, ssl.SSLError, ValueError) as err:
            server = getattr(self, "_server", None)
            if server is not None:
                server.server_close()
            raise RuntimeError(f"failed to start the webAPI server: {err}") from err
        self.port = self._server.server_port

    def start(self) -> None:
        """Serve requests until ``shutdown`` is called."""
        logger.info("starting the WebAPI server on port %s", self.port)
        self._serving.set()
        self._server.serve_forever(poll_interval=0.1)

    def shutdown(self, timeout: float = GRACEFUL_SHUTDOWN_TIMEOUT) -> None:
        """Stop serving, waiting at most ``timeout`` seconds, and release the port."""
        logger.info("stopping the WebAPI server due to app exit")
        if self._serving.is_set():
            stopper = threading.Thread(target=self._server.shutdown, daemon=True)
            stopper.start()
            stopper.join(timeout)
            if stopper.is_alive():
                raise TimeoutError("failed to shutdown the webAPI server: timed out")
        self._server.server_close()