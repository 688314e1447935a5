"""A small forking-style HTTP server: request parsing, routing and the accept loop."""

from __future__ import annotations

import re
import socket
import sys
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

RECV_SIZE = 65535
MAX_HEADERS = 16

NOT_HANDLED_RESPONSE = (
    b"HTTP/1.1 500 Not Handled\r\n\r\n"
    b"The server has no handler to the request.\r\n"
)

_HEADER_RE = re.compile(r"([^:\s]+)[: \t](.*)")
_ATOL_RE = re.compile(r"\s*([+-]?\d+)")

Handler = Callable[["Request"], bytes]


@dataclass
class Request:
    """A parsed client request."""

    method: str
    uri: str
    query: str = ""
    protocol: str = ""
    headers: list[tuple[str, str]] = field(default_factory=list)
    payload: bytes = b""

    def header(self, name: str) -> str | None:
        """Return the value of the first header named exactly ``name``."""
        for key, value in self.headers:
            if key == name:
                return value
        return None


def _atol(text: str) -> int:
    match = _ATOL_RE.match(text)
    return int(match.group(1)) if match else 0


def parse_request(data: bytes) -> Request:
    """Parse raw request bytes; raises ValueError when there is no request line."""
    head, separator, body = data.partition(b"\r\n\r\n")
    lines = head.decode("latin-1").split("\r\n")
    parts = lines[0].split() if lines else []
    if len(parts) < 2:
        raise ValueError("malformed request line")

    method, target = parts[0], parts[1]
    protocol = parts[2] if len(parts) > 2 else ""
    uri, _, query = target.partition("?")

    headers: list[tuple[str, str]] = []
    for line in lines[1:]:
        if len(headers) >= MAX_HEADERS:
            break
        match = _HEADER_RE.match(line)
        if match:
            headers.append((match.group(1), match.group(2).lstrip(" ")))

    request = Request(method, uri, query, protocol, headers)

    content_length = request.header("Content-Length")
    if content_length is not None:
        size = min(max(_atol(content_length), 0), len(data))
        request.payload = data[len(data) - size:] if size else b""
    else:
        request.payload = body if separator else b""
    return request


@dataclass
class _Route:
    method: str
    pattern: str
    prefix: bool
    handler: Handler

    def matches(self, request: Request) -> bool:
        if request.method != self.method:
            return False
        if self.prefix:
            return request.uri.startswith(self.pattern)
        return request.uri == self.pattern


class Router:
    """Routes requests to handlers, trying routes in the order they were added."""

    def __init__(self) -> None:
        self._routes: list[_Route] = []

    def _register(self, method: str, pattern: str, prefix: bool):
        def decorator(handler: Handler) -> Handler:
            self._routes.append(_Route(method, pattern, prefix, handler))
            return handler

        return decorator

    def route(self, method: str, uri: str):
        """Decorator registering a handler for an exact method and path."""
        return self._register(method, uri, False)

    def get(self, uri: str):
        """Decorator registering a GET handler for an exact path."""
        return self._register("GET", uri, False)

    def post(self, uri: str):
        """Decorator registering a POST handler for an exact path."""
        return self._register("POST", uri, False)

    def get_prefix(self, prefix: str):
        """Decorator registering a GET handler for every path starting with ``prefix``."""
        return self._register("GET", prefix, True)

    def dispatch(self, request: Request) -> bytes:
        """Run the first matching handler, or answer that nothing handles the request."""
        for entry in self._routes:
            if entry.matches(request):
                return entry.handler(request)
        return NOT_HANDLED_RESPONSE


def _log_request(request: Request) -> None:
    sys.stderr.write(f"\x1b[32m + [{request.method}] {request.uri}\x1b[0m\n")
    for key, value in request.headers:
        sys.stderr.write(f"[H] {key}: {value}\n")
    if len(request.payload) < 100:
        text = request.payload.decode("latin-1")
        sys.stderr.write(f"[H] {len(request.payload)} {text}:\n")


def handle_connection(conn: socket.socket, router: Router) -> None:
    """Read one request from ``conn``, send the routed response and close it."""
    with conn:
        try:
            data = conn.recv(RECV_SIZE)
        except OSError:
            sys.stderr.write("recv() error\n")
            return
        if not data:
            sys.stderr.write("Client disconnected upexpectedly.\n")
            return
        try:
            request = parse_request(data)
        except ValueError as exc:
            sys.stderr.write(f"bad request: {exc}\n")
            return

        _log_request(request)
        conn.sendall(router.dispatch(request))
        try:
            conn.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass


def _start_server(port: int) -> socket.socket:
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind(("", port))
        listener.listen(socket.SOMAXCONN)
    except OSError:
        listener.close()
        raise
    return listener


def serve_forever(port: int | str, router: Router) -> None:
    """Listen on ``port`` and handle each connection on its own thread, forever."""
    print(f"Server started \033[92mhttp://127.0.0.1:{port}\033[0m", flush=True)
    with _start_server(int(port)) as listener:
        while True:
            try:
                conn, _ = listener.accept()
            except OSError as exc:
                sys.stderr.write(f"accept() error: {exc}\n")
                continue
            threading.Thread(
                target=handle_connection, args=(conn, router), daemon=True
            ).start()