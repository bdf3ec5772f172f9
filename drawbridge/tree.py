"""Tree entries, directories and trees of content."""

from __future__ import annotations

import io
import json
import pathlib
from collections.abc import Iterable, Iterator, Mapping, MutableMapping
from dataclasses import dataclass, field
from typing import Any, BinaryIO

from drawbridge.digest import Algorithms
from drawbridge.meta import Meta
from drawbridge.paths import TreeName, TreePath

_META_FIELDS = ("digest", "length", "type")
_OCTET_STREAM = "application/octet-stream"
_MIME_BY_EXTENSION = {".wasm": "application/wasm", ".toml": "application/toml"}


@dataclass
class FileContent:
    """The content of a file entry: an open binary file."""

    file: BinaryIO


@dataclass
class DirectoryContent:
    """The content of a directory entry: its JSON encoding."""

    data: bytes


@dataclass
class Entry:
    """A directory entry: metadata, extra custom fields and optional content."""

    TYPE = "application/vnd.drawbridge.entry.v1+json"

    meta: Meta
    custom: dict[str, Any] = field(default_factory=dict)
    content: Any = None

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping with metadata and custom fields flattened."""
        data = self.meta.to_json()
        data.update(self.custom)
        return data

    @classmethod
    def from_json(cls, data: Any) -> Entry:
        """Build an entry from a JSON mapping; extra fields become custom fields."""
        meta = Meta.from_json(data)
        custom = {k: v for k, v in data.items() if k not in _META_FIELDS}
        return cls(meta, custom)


class Directory(MutableMapping):
    """A directory: entries keyed and sorted by name."""

    TYPE = "application/vnd.drawbridge.directory.v1+json"

    def __init__(
        self, entries: Mapping[str, Any] | Iterable[tuple[str, Any]] | None = None
    ) -> None:
        self._entries: dict[TreeName, Any] = {}
        if entries is not None:
            self.update(entries)

    def __getitem__(self, key: str) -> Any:
        return self._entries[TreeName(key)]

    def __setitem__(self, key: str, value: Any) -> None:
        self._entries[TreeName(key)] = value

    def __delitem__(self, key: str) -> None:
        name = TreeName(key)
        if name not in self._entries:
            raise KeyError(key)
        self._entries.pop(name)

    def __iter__(self) -> Iterator[TreeName]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Directory):
            return NotImplemented
        return self._entries == other._entries

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Directory({dict(self.items())!r})"

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping of names to entries."""
        return {
            str(name): entry.to_json() if hasattr(entry, "to_json") else entry
            for name, entry in self.items()
        }

    @classmethod
    def from_json(cls, data: Any) -> Directory:
        """Build a directory of entries from a JSON mapping."""
        if not isinstance(data, Mapping):
            raise ValueError("expected a directory object")
        return cls((name, Entry.from_json(value)) for name, value in data.items())

    def encode(self) -> bytes:
        """Encode the directory as compact JSON bytes."""
        return json.dumps(
            self.to_json(), separators=(",", ":"), ensure_ascii=False
        ).encode("utf-8")


class Tree(Mapping):
    """A tree of entries keyed and sorted by path; always holds a root entry."""

    def __init__(self, entries: Mapping[TreePath, Entry]) -> None:
        self._entries = {TreePath(path): entry for path, entry in entries.items()}
        if TreePath.ROOT not in self._entries:
            raise ValueError("tree has no root entry")

    def __getitem__(self, key: Iterable[str]) -> Entry:
        return self._entries[TreePath(key)]

    def __iter__(self) -> Iterator[TreePath]:
        return iter(sorted(self._entries))

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"Tree({[str(p) for p in self]!r})"

    def root(self) -> Entry:
        """Return the entry of the tree's root."""
        return self._entries[TreePath.ROOT]

    @staticmethod
    def file_entry(content: BinaryIO, mime: str) -> Entry:
        """Hash a readable binary stream and return a file entry holding it."""
        size, digest = Algorithms().read(content)
        return Entry(Meta(digest, size, mime), {}, FileContent(content))

    @staticmethod
    def dir_entry(directory: Directory | Mapping[str, Any]) -> Entry:
        """Encode a directory and return a directory entry holding the encoding."""
        if not isinstance(directory, Directory):
            directory = Directory(directory)
        data = directory.encode()
        size, digest = Algorithms().read(io.BytesIO(data))
        return Entry(Meta(digest, size, Directory.TYPE), {}, DirectoryContent(data))

    @classmethod
    def from_directory(cls, directory: Directory | Mapping[str, Entry]) -> Tree:
        """Build a one-level tree from a directory of entries."""
        if not isinstance(directory, Directory):
            directory = Directory(directory)
        entries: dict[TreePath, Entry] = {TreePath.ROOT: cls.dir_entry(directory)}
        for name, entry in directory.items():
            entries[TreePath((name,))] = entry
        return cls(entries)

    @classmethod
    def from_path(cls, path: str | pathlib.Path) -> Tree:
        """Build a tree from a filesystem directory, following symbolic links."""
        root = pathlib.Path(path)
        entries: dict[TreePath, Entry] = {}
        try:
            for fs_path in _walk_contents_first(root, frozenset()):
                relative = fs_path.relative_to(root)
                try:
                    tree_path = TreePath(relative.parts)
                except (ValueError, TypeError) as error:
                    raise ValueError(
                        f"failed to parse tree path `{relative.as_posix()}`: {error}"
                    ) from error

                if fs_path.is_file():
                    mime = _MIME_BY_EXTENSION.get(fs_path.suffix, _OCTET_STREAM)
                    entry = cls.file_entry(open(fs_path, "rb"), mime)
                elif fs_path.is_dir():
                    entry = cls.dir_entry(_children(entries, tree_path))
                else:
                    raise ValueError(f"unsupported file type encountered at `{tree_path}`")

                if tree_path in entries:
                    raise ValueError(f"duplicate file name {tree_path}")
                entries[tree_path] = entry
        except BaseException:
            for entry in entries.values():
                if isinstance(entry.content, FileContent):
                    entry.content.file.close()
            raise
        return cls(entries)


def _children(entries: Mapping[TreePath, Entry], parent: TreePath) -> Directory:
    """Collect the consecutive entries directly under `parent`, in path order."""
    directory = Directory()
    for path in sorted(p for p in entries if p > parent):
        split = path.split_last()
        if split is None or split[1] != parent:
            break
        directory[split[0]] = entries[path]
    return directory


def _walk_contents_first(
    path: pathlib.Path, ancestors: frozenset[pathlib.Path]
) -> Iterator[pathlib.Path]:
    if path.is_dir():
        real = path.resolve()
        if real in ancestors:
            raise ValueError(f"filesystem loop found at `{path}`")
        for child in sorted(path.iterdir()):
            yield from _walk_contents_first(child, ancestors | {real})
    yield path