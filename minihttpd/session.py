"""Session tokens: generation, cookie extraction and a flat-file session store."""

from __future__ import annotations

import os
import re
import secrets
from collections.abc import Iterator

TOKEN_SIZE = 32
NAME_SIZE = 128
SESSION_LINE_LEN = 256
TOKEN_BYTE_LENGTH = TOKEN_SIZE * 2 + 1

SESSIONS_FILE = "assets/db/sessions.txt"

_SESSION_PREFIX = "session="
_LINE_RE = re.compile(r"([^:]{1,%d}):\s*(\S+)" % (TOKEN_BYTE_LENGTH - 1))


def generate_token() -> str:
    """Return a new random session token as a lower-case hex string."""
    return secrets.token_hex(TOKEN_SIZE)


def extract_session_token(cookie_header: str | None) -> str | None:
    """Pull the ``session`` value out of a Cookie header.

    Returns None when the header is missing, has no session entry, or the
    value is empty or longer than a token can be.
    """
    if cookie_header is None:
        return None
    start = cookie_header.find(_SESSION_PREFIX)
    if start < 0:
        return None
    value = cookie_header[start + len(_SESSION_PREFIX):].split(";", 1)[0]
    if not value or len(value) > TOKEN_BYTE_LENGTH:
        return None
    return value


class SessionStore:
    """Sessions kept as ``token:username`` lines in a text file."""

    def __init__(self, path: str | os.PathLike[str] = SESSIONS_FILE) -> None:
        self.path = path

    def _entries(self) -> Iterator[tuple[str, str]]:
        with open(self.path, encoding="utf-8", newline="") as handle:
            for line in handle:
                match = _LINE_RE.match(line)
                if match:
                    yield match.group(1), match.group(2)[: NAME_SIZE - 1]

    def username_for(self, token: str) -> str | None:
        """Return the username stored for ``token``, or None if it is unknown.

        Raises OSError when the session file cannot be read.
        """
        for saved_token, username in self._entries():
            if saved_token == token:
                return username
        return None

    def store(self, token: str, username: str) -> None:
        """Append a session; raises OSError when the file cannot be written."""
        with open(self.path, "a", encoding="utf-8", newline="") as handle:
            handle.write(f"{token}:{username}\n")

    def check(self, token: str) -> bool:
        """Tell whether ``token`` is a known session.

        Raises OSError when the session file cannot be read.
        """
        return any(saved_token == token for saved_token, _ in self._entries())