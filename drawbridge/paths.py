"""Tree entry names, tree paths and tree contexts."""

from __future__ import annotations

import pathlib
import re
from collections.abc import Iterable
from dataclasses import dataclass

from drawbridge.tag import TagContext

_TREE_NAME = re.compile(r"[0-9A-Za-z\-_.:]+")


class TreeName(str):
    """A tree entry name: ASCII letters, digits and `-`, `_`, `.`, `:`."""

    def __new__(cls, value: str) -> TreeName:
        if not isinstance(value, str):
            raise TypeError("entry name must be a string")
        if not value:
            raise ValueError("empty entry name")
        if not _TREE_NAME.fullmatch(value):
            raise ValueError("invalid characters in entry name")
        return super().__new__(cls, value)

    @classmethod
    def parse(cls, s: str) -> TreeName:
        """Validate and return an entry name."""
        return cls(s)

    def join(self, name: TreeName | str) -> TreePath:
        """Return the two-element path of this name followed by `name`."""
        return TreePath((self, name))

    def __repr__(self) -> str:
        return f"TreeName({str.__repr__(self)})"


class TreePath(tuple):
    """A path within a tree: a sequence of entry names; empty for the root."""

    ROOT: TreePath

    def __new__(cls, names: Iterable[TreeName | str] = ()) -> TreePath:
        return super().__new__(cls, (n if isinstance(n, TreeName) else TreeName(n) for n in names))

    @classmethod
    def parse(cls, s: str) -> TreePath:
        """Parse a `/`-separated path; leading slashes and one trailing slash are ignored."""
        parts = s.lstrip("/").split("/")
        if parts[-1] == "":
            parts.pop()
        return cls(parts)

    def intersperse(self, sep: str) -> str:
        """Join the names with `sep`."""
        return sep.join(self)

    def split_last(self) -> tuple[TreeName, TreePath] | None:
        """Return the last name and the parent path, or None for the root."""
        if not self:
            return None
        return self[-1], TreePath(self[:-1])

    def to_path(self) -> pathlib.Path:
        """Return the path as a filesystem path relative to the tree root."""
        return pathlib.Path(*self)

    def __str__(self) -> str:
        return self.intersperse("/")

    def __repr__(self) -> str:
        return f"TreePath({str(self)!r})"


TreePath.ROOT = TreePath()


@dataclass(frozen=True)
class TreeContext:
    """Identifies a path within a tagged tree."""

    tag: TagContext
    path: TreePath

    def __str__(self) -> str:
        return f"{self.tag}/{self.path}"