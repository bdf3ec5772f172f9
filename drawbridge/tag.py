"""Tag names (semantic versions) and tag contexts."""

from __future__ import annotations

from dataclasses import dataclass

import semver

from drawbridge.repository import RepositoryContext, _rsplit_once


class TagName:
    """A tag name: a semantic version."""

    __slots__ = ("_version",)

    def __init__(self, version: semver.Version) -> None:
        if not isinstance(version, semver.Version):
            raise TypeError("tag name must be a semantic version")
        self._version = version

    @classmethod
    def parse(cls, s: str) -> TagName:
        """Parse a semantic version string."""
        if not isinstance(s, str):
            raise TypeError("tag name must be a string")
        try:
            return cls(semver.Version.parse(s))
        except ValueError as error:
            raise ValueError(str(error)) from error

    @property
    def version(self) -> semver.Version:
        return self._version

    @property
    def major(self) -> int:
        return self._version.major

    @property
    def minor(self) -> int:
        return self._version.minor

    @property
    def patch(self) -> int:
        return self._version.patch

    @property
    def prerelease(self) -> str | None:
        return self._version.prerelease

    @property
    def build(self) -> str | None:
        return self._version.build

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TagName):
            return NotImplemented
        return str(self) == str(other)

    def __hash__(self) -> int:
        return hash(str(self))

    def __str__(self) -> str:
        return str(self._version)

    def __repr__(self) -> str:
        return f"TagName({str(self)!r})"


@dataclass(frozen=True)
class TagContext:
    """Identifies a tag within a repository."""

    repository: RepositoryContext
    name: TagName

    @classmethod
    def from_parts(cls, user: str, repo: str, tag: str) -> TagContext:
        """Build a context from user, repository and tag strings."""
        try:
            repository = RepositoryContext.from_parts(user, repo)
        except ValueError as error:
            raise ValueError(f"failed to parse repository context: {error}") from error
        return cls(repository, _parse_tag(tag))

    @classmethod
    def parse(cls, s: str) -> TagContext:
        """Parse `owner/repo:version`, splitting at the last `/` or `:`."""
        parts = _rsplit_once(s)
        if parts is None:
            raise ValueError("'/' or `:` separator not found")
        repository_part, tag_part = parts
        try:
            repository = RepositoryContext.parse(repository_part)
        except ValueError as error:
            raise ValueError(f"failed to parse repository context: {error}") from error
        return cls(repository, _parse_tag(tag_part))

    def __str__(self) -> str:
        return f"{self.repository}:{self.name}"


def _parse_tag(tag: str) -> TagName:
    try:
        return TagName.parse(tag)
    except ValueError as error:
        raise ValueError(f"failed to parse tag semantic version: {error}") from error