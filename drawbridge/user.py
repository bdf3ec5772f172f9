"""User names, user contexts and user records."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

_USER_NAME = re.compile(r"[0-9A-Za-z]+")


class UserName(str):
    """A user name: a non-empty string of ASCII letters and digits."""

    def __new__(cls, value: str) -> UserName:
        if not isinstance(value, str):
            raise TypeError("user name must be a string")
        if not value:
            raise ValueError("empty user name")
        if not _USER_NAME.fullmatch(value):
            raise ValueError("invalid characters in user name")
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, s: str) -> UserName:
        """Validate and return a user name."""
        return cls(s)

    def __repr__(self) -> str:
        return f"UserName({str.__repr__(self)})"


@dataclass(frozen=True)
class UserContext:
    """Identifies a user."""

    name: UserName

    def __post_init__(self) -> None:
        if not isinstance(self.name, UserName):
            object.__setattr__(self, "name", UserName(self.name))

    @classmethod
    def parse(cls, s: str) -> UserContext:
        """Parse a user context from its string form."""
        try:
            name = UserName(s)
        except ValueError as error:
            raise ValueError(f"failed to parse user name: {error}") from error
        return cls(name)

    def __str__(self) -> str:
        return str(self.name)


@dataclass(frozen=True)
class UserRecord:
    """A user record."""

    subject: str
    """OpenID Connect identity subject uniquely identifying the user."""

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping."""
        return {"subject": self.subject}

    @classmethod
    def from_json(cls, data: Any) -> UserRecord:
        """Build a record from a JSON mapping, rejecting unknown fields."""
        if not isinstance(data, dict):
            raise ValueError("expected a user record object")
        unknown = set(data) - {"subject"}
        if unknown:
            raise ValueError(f"unknown field `{sorted(unknown)[0]}`")
        if "subject" not in data:
            raise ValueError("missing field `subject`")
        subject = data["subject"]
        if not isinstance(subject, str):
            raise ValueError("field `subject` must be a string")
        return cls(subject)