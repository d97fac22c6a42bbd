"""Threaded HTTP listener serving the cached status page."""

from __future__ import annotations

import http.server
import threading
from typing import Callable

from loguru import logger

from vdslmon.cache import ResponseCache
from vdslmon.exceptions import DiscoveryError
from vdslmon.page import StatusPage

Handler = Callable[[], tuple[str, str]]


class StatusRequestHandler(http.server.BaseHTTPRequestHandler):
    """Dispatch GET requests to the handlers registered on the server."""

    server: StatusServer

    def do_GET(self) -> None:
        handler = self.server.handlers.get(self.path.split("?", 1)[0])
        if handler is None:
            self.send_response(404)
            self.end_headers()
            return

        try:
            content, content_type = handler()
        except DiscoveryError as e:
            logger.critical(f"Line discovery failed, shutting down: {e}")
            self.send_response(503)
            self.end_headers()
            self.server.fail(e)
            return

        data = content.encode("utf-8")
        self.send_response(200)
        self.send_header("Content-Type", content_type)
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format: str, *args: object) -> None:
        logger.debug(f"{self.address_string()} - {format % args}")


class StatusServer(http.server.ThreadingHTTPServer):
    """One thread per request; the cache lock serialises the SNMP work."""

    daemon_threads = True

    def __init__(self, address: tuple[str, int]) -> None:
        super().__init__(address, StatusRequestHandler)
        self.handlers: dict[str, Handler] = {}
        self.fatal_error: DiscoveryError | None = None

    def register_handler(self, path: str, handler: Handler) -> None:
        self.handlers[path] = handler

    def fail(self, error: DiscoveryError) -> None:
        """Record a fatal error and stop ``serve_forever`` from another thread."""
        self.fatal_error = error
        threading.Thread(target=self.shutdown, daemon=True).start()


def cached_handler(cache: ResponseCache, status_page: StatusPage) -> Handler:
    def _handle() -> tuple[str, str]:
        page = cache.get_or_compute(status_page.render)
        return page.content, page.content_type

    return _handle


def create_server(host: str, port: int, cache: ResponseCache, status_page: StatusPage) -> StatusServer:
    server = StatusServer((host, port))
    server.register_handler("/", cached_handler(cache, status_page))
    return server
