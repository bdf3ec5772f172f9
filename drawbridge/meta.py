"""Content metadata: digest, length and media type."""

from __future__ import annotations

import json
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from drawbridge.digest import ContentDigest, DigestError

_WORD = r"[!#$%&'*+\-.^_`|~0-9A-Za-z]+"
_QUOTED = r'"(?:[^"\\]|\\.)*"'
_MIME = re.compile(
    rf"(?P<essence>{_WORD}/{_WORD})"
    rf"(?P<params>(?:\s*;\s*{_WORD}=(?:{_WORD}|{_QUOTED}))*)\s*"
)


def _parse_mime(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError("invalid mime type")
    match = _MIME.fullmatch(value.strip())
    if match is None:
        raise ValueError("invalid mime type")
    return match.group("essence").lower() + match.group("params")


@dataclass
class Meta:
    """The digest, length and media type of a piece of content."""

    hash: ContentDigest
    size: int
    mime: str

    def __post_init__(self) -> None:
        self.mime = _parse_mime(self.mime)
        if isinstance(self.size, bool) or not isinstance(self.size, int) or self.size < 0:
            raise ValueError("length must be a non-negative integer")

    def to_json(self) -> dict[str, Any]:
        """Return a JSON-ready mapping."""
        return {"digest": self.hash.to_json(), "length": self.size, "type": self.mime}

    @classmethod
    def from_json(cls, data: Any) -> Meta:
        """Build metadata from a JSON mapping; unknown fields are ignored."""
        if not isinstance(data, Mapping):
            raise ValueError("expected a metadata object")
        for field in ("digest", "length", "type"):
            if field not in data:
                raise ValueError(f"missing field `{field}`")
        try:
            digest = ContentDigest.from_json(data["digest"])
        except DigestError as error:
            raise ValueError(f"invalid digest: {error}") from error
        return cls(digest, data["length"], data["type"])

    def dumps(self) -> str:
        """Serialize to compact JSON."""
        return json.dumps(self.to_json(), separators=(",", ":"), ensure_ascii=False)