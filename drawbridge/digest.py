"""Content digests: hashing algorithms, digest sets and hashing streams."""

from __future__ import annotations

import base64
import binascii
import hashlib
from collections.abc import Iterable, Iterator, Mapping, MutableMapping, MutableSet
from enum import Enum
from typing import Any

_CHUNK_SIZE = 64 * 1024


class DigestError(ValueError):
    """Raised when a digest or algorithm name cannot be parsed."""


class HashMismatchError(ValueError):
    """Raised at end of stream when the data does not match the expected digests."""


class Algorithm(Enum):
    """A hashing algorithm."""

    SHA224 = "sha-224"
    SHA256 = "sha-256"
    SHA384 = "sha-384"
    SHA512 = "sha-512"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Algorithm):
            return NotImplemented
        return _ORDER[self] < _ORDER[other]

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Algorithm):
            return NotImplemented
        return _ORDER[self] <= _ORDER[other]

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Algorithm):
            return NotImplemented
        return _ORDER[self] > _ORDER[other]

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Algorithm):
            return NotImplemented
        return _ORDER[self] >= _ORDER[other]

    @classmethod
    def parse(cls, s: str | Algorithm) -> Algorithm:
        """Parse an algorithm name, ignoring ASCII case."""
        if isinstance(s, Algorithm):
            return s
        if not isinstance(s, str):
            raise DigestError("unknown algorithm")
        try:
            return cls(s.lower())
        except ValueError:
            raise DigestError("unknown algorithm") from None

    def hasher(self):
        """Return a fresh hashlib object for this algorithm."""
        return hashlib.new(_HASHLIB_NAMES[self])

    def reader(self, reader: Any) -> Reader:
        """Wrap a reader so that it hashes with this algorithm."""
        return Reader(reader, [self])

    def writer(self, writer: Any) -> Writer:
        """Wrap a writer so that it hashes with this algorithm."""
        return Writer(writer, [self])


_ORDER = {algorithm: index for index, algorithm in enumerate(Algorithm)}

_HASHLIB_NAMES = {
    Algorithm.SHA224: "sha224",
    Algorithm.SHA256: "sha256",
    Algorithm.SHA384: "sha384",
    Algorithm.SHA512: "sha512",
}


class Algorithms(MutableSet):
    """An ordered set of hashing algorithms; all known algorithms by default."""

    def __init__(self, algorithms: Iterable[Algorithm | str] | None = None) -> None:
        if algorithms is None:
            algorithms = Algorithm
        self._set = {Algorithm.parse(a) for a in algorithms}

    def __contains__(self, item: object) -> bool:
        return item in self._set

    def __iter__(self) -> Iterator[Algorithm]:
        return iter(sorted(self._set))

    def __len__(self) -> int:
        return len(self._set)

    def add(self, value: Algorithm | str) -> None:
        self._set.add(Algorithm.parse(value))

    def discard(self, value: Algorithm | str) -> None:
        self._set.discard(value)

    def __repr__(self) -> str:
        return f"Algorithms({[str(a) for a in self]!r})"

    def reader(self, reader: Any) -> Reader:
        """Wrap a reader so that it hashes with these algorithms."""
        return Reader(reader, self)

    def writer(self, writer: Any) -> Writer:
        """Wrap a writer so that it hashes with these algorithms."""
        return Writer(writer, self)

    def read(self, reader: Any) -> tuple[int, ContentDigest]:
        """Read a file-like object to its end; return its length and digests."""
        hashing = self.reader(reader)
        total = sum(len(chunk) for chunk in iter(lambda: hashing.read(_CHUNK_SIZE), b""))
        return total, hashing.digests()

    async def read_async(self, reader: Any) -> tuple[int, ContentDigest]:
        """Read an async reader to its end; return its length and digests."""
        hashing = self.reader(reader)
        total = 0
        while chunk := await hashing.read_async(_CHUNK_SIZE):
            total += len(chunk)
        return total, hashing.digests()


class ContentDigest(MutableMapping):
    """A set of hashes of the same content, keyed and ordered by algorithm."""

    def __init__(
        self,
        hashes: Mapping[Algorithm | str, bytes] | Iterable[tuple[Algorithm | str, bytes]] | None = None,
    ) -> None:
        self._hashes: dict[Algorithm, bytes] = {}
        if hashes is not None:
            self.update(hashes)

    def __getitem__(self, key: Algorithm | str) -> bytes:
        return self._hashes[Algorithm.parse(key)]

    def __setitem__(self, key: Algorithm | str, value: bytes) -> None:
        self._hashes[Algorithm.parse(key)] = bytes(value)

    def __delitem__(self, key: Algorithm | str) -> None:
        algorithm = Algorithm.parse(key)
        if algorithm not in self._hashes:
            raise KeyError(key)
        self._hashes.pop(algorithm)

    def __iter__(self) -> Iterator[Algorithm]:
        return iter(sorted(self._hashes))

    def __len__(self) -> int:
        return len(self._hashes)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ContentDigest):
            return NotImplemented
        return self._hashes == other._hashes

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return ",".join(
            f"{algorithm}=:{base64.b64encode(value).decode('ascii')}:"
            for algorithm, value in self.items()
        )

    def __repr__(self) -> str:
        return f"ContentDigest({str(self)!r})"

    @classmethod
    def parse(cls, s: str) -> ContentDigest:
        """Parse a Content-Digest header value."""
        digest = cls()
        for part in s.split(","):
            key, eq, value = part.partition("=")
            if not eq:
                raise DigestError("missing equals")
            algorithm = Algorithm.parse(key)
            if not value.startswith(":"):
                raise DigestError("missing colons")
            value = value[1:]
            if not value.endswith(":"):
                raise DigestError("missing colons")
            digest[algorithm] = _b64decode(value[:-1])
        return digest

    def reader(self, reader: Any) -> Reader:
        """Wrap a reader so that it hashes with this digest's algorithms."""
        return Reader(reader, self.keys())

    def writer(self, writer: Any) -> Writer:
        """Wrap a writer so that it hashes with this digest's algorithms."""
        return Writer(writer, self.keys())

    def verifier(self, reader: Any) -> Verifier:
        """Wrap a reader so that it checks the content against this digest."""
        return Verifier(self.reader(reader), self)

    def to_json(self) -> dict[str, str]:
        """Return a JSON-ready mapping of algorithm names to base64 hashes."""
        return {str(a): base64.b64encode(v).decode("ascii") for a, v in self.items()}

    @classmethod
    def from_json(cls, data: Any) -> ContentDigest:
        """Build a digest from a mapping of algorithm names to base64 hashes."""
        if not isinstance(data, Mapping):
            raise DigestError("expected a mapping of algorithms to hashes")
        digest = cls()
        for key, value in data.items():
            if not isinstance(value, str):
                raise DigestError("expected a base64 string")
            digest[Algorithm.parse(key)] = _b64decode(value)
        return digest


def _b64decode(value: str) -> bytes:
    try:
        return base64.b64decode(value, validate=True)
    except (binascii.Error, ValueError) as error:
        raise DigestError(str(error)) from error


class _Hashing:
    def __init__(self, algorithms: Iterable[Algorithm]) -> None:
        self._hashers = [(a, a.hasher()) for a in algorithms]

    def _update(self, data: bytes) -> None:
        for _, hasher in self._hashers:
            hasher.update(data)

    def digests(self) -> ContentDigest:
        """Return the digests of all the bytes seen so far."""
        return ContentDigest((a, h.copy().digest()) for a, h in self._hashers)


class Reader(_Hashing):
    """A reader that hashes the bytes as they are read from the wrapped reader."""

    def __init__(self, reader: Any, algorithms: Iterable[Algorithm]) -> None:
        super().__init__(algorithms)
        self._reader = reader

    def read(self, size: int = -1) -> bytes:
        data = self._reader.read(size)
        self._update(data)
        return data

    async def read_async(self, size: int = -1) -> bytes:
        data = await self._reader.read(size)
        self._update(data)
        return data

    def digests(self) -> ContentDigest:
        return super().digests()


class Writer(_Hashing):
    """A writer that hashes the bytes as they are written to the wrapped writer."""

    def __init__(self, writer: Any, algorithms: Iterable[Algorithm]) -> None:
        super().__init__(algorithms)
        self._writer = writer

    def write(self, data: bytes) -> int:
        written = self._writer.write(data)
        if written is None:
            written = len(data)
        self._update(bytes(data[:written]))
        return written

    def flush(self) -> None:
        self._writer.flush()

    def digests(self) -> ContentDigest:
        return super().digests()


class Verifier:
    """A hashing reader that raises at end of stream if the digests differ."""

    def __init__(self, reader: Reader, hashes: ContentDigest) -> None:
        self._reader = reader
        self._hashes = hashes

    def _check(self, data: bytes) -> bytes:
        if not data and self._reader.digests() != self._hashes:
            raise HashMismatchError("hash mismatch")
        return data

    def read(self, size: int = -1) -> bytes:
        return self._check(self._reader.read(size))

    async def read_async(self, size: int = -1) -> bytes:
        return self._check(await self._reader.read_async(size))

    def digests(self) -> ContentDigest:
        return self._reader.digests()