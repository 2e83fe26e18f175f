"""Development server for a built site.

Serves files from the destination directory. Not meant for production.
"""

import logging
from functools import partial
from http import HTTPStatus
from http.server import SimpleHTTPRequestHandler, ThreadingHTTPServer
from pathlib import Path

logger = logging.getLogger(__name__)


class SiteRequestHandler(SimpleHTTPRequestHandler):
    """Serves a directory, optionally below a URL prefix."""

    mount = "/"

    def _strip_mount(self) -> bool:
        if self.mount == "/":
            return True
        if self.path == self.mount or self.path.startswith(self.mount + "/"):
            self.path = self.path[len(self.mount):] or "/"
            return True
        self.send_error(HTTPStatus.NOT_FOUND)
        return False

    def do_GET(self):
        if self._strip_mount():
            super().do_GET()

    def do_HEAD(self):
        if self._strip_mount():
            super().do_HEAD()

    def log_message(self, format, *args):
        logger.info("%s - %s", self.address_string(), format % args)


def normalize_mount(mount: str) -> str:
    """Normalize a URL prefix to ``/`` or ``/prefix`` (no trailing slash)."""
    stripped = (mount or "").strip("/")
    return f"/{stripped}" if stripped else "/"


def create_server(directory: Path, port: int = 3001, mount: str = "/", host: str = "localhost") -> ThreadingHTTPServer:
    """Create (but do not start) a server for ``directory``.

    Args:
        directory: Directory to serve
        port: TCP port; 0 picks a free one
        mount: URL prefix the site is served under
        host: Interface to bind

    Returns:
        A bound ThreadingHTTPServer
    """
    handler = type("MountedSiteRequestHandler", (SiteRequestHandler,), {"mount": normalize_mount(mount)})
    return ThreadingHTTPServer((host, port), partial(handler, directory=str(directory)))


def serve(directory: Path, port: int = 3001, mount: str = "/", host: str = "localhost") -> None:
    """Serve ``directory`` until interrupted."""
    server = create_server(directory, port=port, mount=mount, host=host)
    url_host, url_port = server.server_address[:2]
    logger.info("Listening on http://%s:%s%s", url_host, url_port, normalize_mount(mount))
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Server stopped")
    finally:
        server.server_close()
