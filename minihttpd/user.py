"""Users kept as ``username:password:description`` lines in a text file."""

from __future__ import annotations

import os
from collections.abc import Iterator
from pathlib import Path

USERS_FILE = "assets/db/users.txt"
DEFAULT_DESCRIPTION = "no description"


class UserExistsError(Exception):
    """Raised when adding a user whose name is already taken."""


class InvalidUserInputError(ValueError):
    """Raised when a username or password is empty."""


def parse_user_line(line: str) -> tuple[str, str, str] | None:
    """Split a ``username:password:description`` line.

    Leading colons before a field are skipped; the description runs to the
    end of the line and may contain colons. Returns None if a part is missing.
    """
    username, sep, rest = line.lstrip(":").partition(":")
    if not username or not sep:
        return None
    password, sep, rest = rest.lstrip(":").partition(":")
    if not password or not sep:
        return None
    description = rest.lstrip("\n").partition("\n")[0]
    if not description:
        return None
    return username, password, description


class UserStore:
    """Reads and updates the user file."""

    def __init__(
        self,
        path: str | os.PathLike[str] = USERS_FILE,
        temp_path: str | os.PathLike[str] | None = None,
    ) -> None:
        self.path = Path(path)
        if temp_path is None:
            temp_path = self.path.with_name(f"{self.path.stem}_tmp{self.path.suffix}")
        self.temp_path = Path(temp_path)

    def _records(self) -> Iterator[tuple[str, str, str]]:
        with open(self.path, encoding="utf-8", newline="") as handle:
            for line in handle:
                record = parse_user_line(line)
                if record is not None:
                    yield record

    def _find(self, username: str) -> tuple[str, str, str] | None:
        for record in self._records():
            if record[0] == username:
                return record
        return None

    def add_user(self, username: str, password: str) -> None:
        """Add a user with the default description.

        Raises InvalidUserInputError for empty input, UserExistsError for a
        taken name and OSError when the file cannot be written.
        """
        if not username or not password:
            raise InvalidUserInputError("username and password must not be empty")
        try:
            taken = self.exists(username)
        except OSError:
            taken = False
        if taken:
            raise UserExistsError(username)
        with open(self.path, "a", encoding="utf-8", newline="") as handle:
            handle.write(f"{username}:{password}:{DEFAULT_DESCRIPTION}\n")

    def exists(self, username: str) -> bool:
        """Tell whether a user exists; raises OSError if the file is unreadable."""
        return self._find(username) is not None

    def check_password(self, username: str, password: str) -> bool:
        """Tell whether ``password`` is the stored one for ``username``.

        Raises OSError if the file is unreadable.
        """
        record = self._find(username)
        return record is not None and record[1] == password

    def get_description(self, username: str) -> str | None:
        """Return a user's description, or None if unknown or unreadable."""
        try:
            record = self._find(username)
        except OSError:
            return None
        return record[2] if record is not None else None

    def set_description(self, username: str, new_desc: str) -> bool:
        """Replace a user's description, rewriting the file.

        Returns False when the user is not found. Raises OSError when the
        file or its temporary copy cannot be opened.
        """
        updated = False
        with open(self.path, encoding="utf-8", newline="") as source, open(
            self.temp_path, "w", encoding="utf-8", newline=""
        ) as target:
            for line in source:
                record = parse_user_line(line)
                if record is not None and record[0] == username:
                    target.write(f"{record[0]}:{record[1]}:{new_desc}\n")
                    updated = True
                else:
                    target.write(line)
        os.replace(self.temp_path, self.path)
        return updated