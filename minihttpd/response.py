"""Builders for complete HTTP responses: files, templates, redirects and errors."""

from __future__ import annotations

from collections.abc import Mapping

BUFFER_SIZE = 256

MIME_HTML = "text/html"
MIME_CSS = "text/css"
MIME_PLAIN = "text/plain"
MIME_JS = "application/javascript"
MIME_ICO = "image/x-icon"
MIME_PNG = "image/png"
MIME_JPEG = "image/jpeg"
MIME_BIN = "application/octet-stream"

STATUS_200_OK = "HTTP/1.1 200 OK"
STATUS_302_FOUND = "HTTP/1.1 302 Found"
STATUS_400_BAD_REQUEST = "HTTP/1.1 400 Bad Request"
STATUS_401_UNAUTHORIZED = "HTTP/1.1 401 Unauthorized"
STATUS_403_FORBIDDEN = "HTTP/1.1 403 Forbidden"
STATUS_404_NOT_FOUND = "HTTP/1.1 404 Not Found"
STATUS_500_INTERNAL_ERROR = "HTTP/1.1 500 Internal Server Error"

NOT_FOUND_PAGE = "public/templates/404.html"
HOME_PAGE = "public/templates/index.html"
ERROR_PAGE = "public/templates/500.html"
LOGIN_PAGE = "public/templates/login.html"

_MIME_BY_EXTENSION = {
    ".html": MIME_HTML,
    ".css": MIME_CSS,
    ".js": MIME_JS,
    ".ico": MIME_ICO,
    ".png": MIME_PNG,
    ".jpg": MIME_JPEG,
    ".jpeg": MIME_JPEG,
}

_FORBIDDEN_RESPONSE = (
    b"HTTP/1.1 403 Forbidden\r\n"
    b"Content-Type: text/plain\r\n"
    b"Content-Length: 13\r\n"
    b"Connection: close\r\n"
    b"\r\n"
    b"403 Forbidden"
)

_FALLBACK_500_MESSAGE = "An unexpected error occurred. Please try again later.\r\n"


def get_mime_type(path: str) -> str:
    """Return the MIME type for the extension after the last dot in ``path``."""
    dot = path.rfind(".")
    if dot < 0:
        return MIME_BIN
    return _MIME_BY_EXTENSION.get(path[dot:], MIME_BIN)


def get_file(path: str) -> bytes:
    """Read a whole file as bytes; raises OSError when it cannot be read."""
    with open(path, "rb") as handle:
        return handle.read()


def _head(status: str, mime_type: str, length: int) -> bytes:
    return (
        f"{status}\r\n"
        f"Content-Type: {mime_type}\r\n"
        f"Content-Length: {length}\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode("latin-1")


def render_template(filepath: str, replacements: Mapping[str, str]) -> str:
    """Load a template and replace every occurrence of each placeholder.

    Raises OSError when the template cannot be read.
    """
    page = get_file(filepath).decode("utf-8", errors="replace")
    for placeholder, value in replacements.items():
        if placeholder:
            page = page.replace(placeholder, value)
    return page


def render_html_response(html: str | bytes, status: str = STATUS_200_OK) -> bytes:
    """Wrap an HTML body in a full response with the given status line."""
    body = html.encode("utf-8") if isinstance(html, str) else html
    return _head(status, MIME_HTML, len(body)) + body


def render_file_response(filepath: str) -> bytes:
    """Serve a file as a full response, with 403 for assets and 404 when missing."""
    if filepath.startswith("assets"):
        return _FORBIDDEN_RESPONSE

    mime_type = get_mime_type(filepath)
    status = STATUS_200_OK
    content: bytes | None
    try:
        content = get_file(filepath)
    except OSError:
        content = None
        status = STATUS_404_NOT_FOUND
        if mime_type == MIME_HTML:
            try:
                content = get_file(NOT_FOUND_PAGE)
            except OSError:
                content = None
        if content is None:
            mime_type = MIME_PLAIN
            content = b"404 Not Found"

    return _head(status, mime_type, len(content)) + content


def fallback_500_response() -> bytes:
    """A minimal plain-text 500 response used when the error page is unavailable."""
    body = _FALLBACK_500_MESSAGE.encode("latin-1")
    return _head(STATUS_500_INTERNAL_ERROR, MIME_PLAIN, len(body)) + body


def render_error_page(message: str) -> bytes:
    """Render the 500 error template with ``message``, or the fallback response."""
    try:
        html = render_template(ERROR_PAGE, {"{{message}}": message})
    except OSError:
        return fallback_500_response()
    return render_html_response(html, STATUS_500_INTERNAL_ERROR)


def redirect(
    location: str,
    status: str = STATUS_302_FOUND,
    clear_cookie: bool = False,
    session_token: str | None = None,
) -> bytes:
    """Build a header-only redirect, optionally setting or clearing the session cookie."""
    cookie_header = ""
    if clear_cookie:
        cookie_header = (
            "Set-Cookie: session=deleted; Max-Age=0; Path=/; HttpOnly; SameSite=Strict\r\n"
        )
    elif session_token:
        cookie_header = (
            f"Set-Cookie: session={session_token}; Max-Age=3600; Path=/; "
            "HttpOnly; SameSite=Strict\r\n"
        )[: BUFFER_SIZE - 1]

    return (
        f"{status}\r\n"
        f"Location: {location}\r\n"
        f"{cookie_header}"
        "Content-Length: 0\r\n"
        "Connection: close\r\n"
        "\r\n"
    ).encode("latin-1")