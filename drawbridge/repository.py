"""Repository names, contexts and configuration."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from drawbridge.user import UserContext

_REPOSITORY_NAME = re.compile(r"[0-9A-Za-z-]+")


class RepositoryName(str):
    """A repository name: a non-empty string of ASCII letters, digits and dashes."""

    def __new__(cls, value: str) -> RepositoryName:
        if not isinstance(value, str):
            raise TypeError("repository name must be a string")
        if not value:
            raise ValueError("empty repository name")
        if not _REPOSITORY_NAME.fullmatch(value):
            raise ValueError("invalid characters in repository name")
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, s: str) -> RepositoryName:
        """Validate and return a repository name."""
        return cls(s)

    def __repr__(self) -> str:
        return f"RepositoryName({str.__repr__(self)})"


def _rsplit_once(s: str) -> tuple[str, str] | None:
    index = max(s.rfind("/"), s.rfind(":"))
    if index < 0:
        return None
    return s[:index], s[index + 1 :]


@dataclass(frozen=True)
class RepositoryContext:
    """Identifies a repository by its owner and name."""

    owner: UserContext
    name: RepositoryName

    @classmethod
    def from_parts(cls, user: str, repo: str) -> RepositoryContext:
        """Build a context from a user name and a repository name."""
        try:
            owner = UserContext.parse(user)
        except ValueError as error:
            raise ValueError(f"failed to parse user context: {error}") from error
        try:
            name = RepositoryName(repo)
        except ValueError as error:
            raise ValueError(f"failed to parse repository name: {error}") from error
        return cls(owner, name)

    @classmethod
    def parse(cls, s: str) -> RepositoryContext:
        """Parse `owner/name` or `owner:name`, splitting at the last separator."""
        parts = _rsplit_once(s)
        if parts is None:
            raise ValueError("`/` or ':' separator not found")
        return cls.from_parts(*parts)

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass
class RepositoryConfig:
    """A repository configuration."""

    public: bool = False

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping."""
        return {"public": self.public}

    @classmethod
    def from_json(cls, data: Any) -> RepositoryConfig:
        """Build a config from a JSON mapping, rejecting unknown fields."""
        if not isinstance(data, dict):
            raise ValueError("expected a repository config object")
        unknown = set(data) - {"public"}
        if unknown:
            raise ValueError(f"unknown field `{sorted(unknown)[0]}`")
        if "public" not in data:
            raise ValueError("missing field `public`")
        public = data["public"]
        if not isinstance(public, bool):
            raise ValueError("field `public` must be a boolean")
        return cls(public)