# drawbridge

Core data types for a registry that hosts versioned trees of content,
where each piece of content is addressed by its digest.

## Installation

```
pip install drawbridge
```

To run the tests:

```
pip install "drawbridge[test]"
pytest
```

## Modules

### `drawbridge.digest`

- `Algorithm` is an enum of `SHA224`, `SHA256`, `SHA384` and `SHA512`.
  Each member's string form is its `sha-NNN` name. `Algorithm.parse`
  accepts those names and ignores ASCII case.
- `Algorithms` is a sorted, mutable set of algorithms. It holds all four
  when called with no arguments. `read(file)` reads a binary file-like
  object to its end and returns `(length, ContentDigest)`.
  `await read_async(reader)` does the same for an object whose `read(size)`
  is a coroutine.
- `ContentDigest` is a mapping from `Algorithm` to raw hash bytes, kept in
  algorithm order. Its string form is the `Content-Digest` header value,
  for example `sha-256=:<base64>:,sha-512=:<base64>:`. `ContentDigest.parse`
  reads that form back. `to_json` and `from_json` use
  `{"sha-256": "<base64>"}`. Two digests are equal when they hold the same
  algorithms with the same hashes.
- `Reader` and `Writer` wrap a stream and hash every byte that passes
  through it. Call `digests()` at any point to get the digests so far. You
  get them from `Algorithm.reader`/`writer`, `Algorithms.reader`/`writer`
  or `ContentDigest.reader`/`writer`.
- `Verifier` is made by `ContentDigest.verifier(stream)`. It reads like a
  `Reader`. When the stream is exhausted, it raises `HashMismatchError` if
  the data seen does not match the expected digest.
- `DigestError` is raised for a malformed digest or an unknown algorithm
  name. Both `DigestError` and `HashMismatchError` are `ValueError`
  subclasses.

### Names and contexts

Invalid names raise `ValueError`. Every name class is a `str` subclass,
except `TagName`.

- `drawbridge.user`:
  - `UserName` allows ASCII letters and digits.
  - `UserContext` wraps a `UserName`.
  - `UserRecord` has one field, `subject`. Its `from_json` rejects unknown
    fields.
- `drawbridge.repository`:
  - `RepositoryName` allows letters, digits and `-`.
  - `RepositoryContext` holds an owner and a name. It parses from
    `owner/name` or `owner:name`.
  - `RepositoryConfig` has one field, `public`. Its `from_json` rejects
    unknown fields.
- `drawbridge.tag`:
  - `TagName` is a semantic version, backed by `semver`.
  - `TagContext` parses from `owner/repo:1.2.3`, splitting at the last `/`
    or `:`.
- `drawbridge.paths`:
  - `TreeName` allows letters, digits and `-`, `_`, `.`, `:`.
  - `TreePath` is a tuple of names. `TreePath.ROOT` is the empty path.
    `TreePath.parse` ignores leading slashes and one trailing slash.
  - `TreeContext` pairs a `TagContext` with a path.

### `drawbridge.meta`

`Meta` holds the `hash` (a `ContentDigest`), the `size` and the `mime`
type of a piece of content. In JSON these are the fields `digest`, `length`
and `type`. `dumps()` gives compact JSON.

### `drawbridge.tree`

- `Entry` holds a `Meta`, a dict of extra `custom` JSON fields and an
  optional `content`. The content is a `FileContent` (an open binary file)
  or a `DirectoryContent` (the directory's JSON bytes).
- `Directory` is a mapping from `TreeName` to entry, sorted by name.
  `encode()` gives its compact JSON bytes. Its media type is
  `Directory.TYPE`.
- `Tree` is a mapping from `TreePath` to `Entry` that always holds a root
  entry.
  - `Tree.file_entry(stream, mime)` hashes a stream and returns a file
    entry.
  - `Tree.dir_entry(directory)` returns a directory entry.
  - `Tree.from_directory(directory)` builds a one-level tree.
  - `Tree.from_path(path)` walks a directory on disk and follows symbolic
    links. Files ending in `.wasm` and `.toml` get `application/wasm` and
    `application/toml`; all other files get `application/octet-stream`.
    The files stay open in the `FileContent` entries, and closing them is
    up to the caller.

## Examples

Hashing content and checking it against a digest:

```python
import io
from drawbridge.digest import Algorithms, ContentDigest, HashMismatchError

size, digest = Algorithms().read(io.BytesIO(b"foo"))
print(size, digest)

expected = ContentDigest.parse("sha-256=:LCa0a2j/xo/5m0U8HTBBNBNCLXBkg7+g+YpeiGJm564=:")
verifier = expected.verifier(io.BytesIO(b"bar"))
try:
    while verifier.read(4096):
        pass
except HashMismatchError:
    print("content does not match")
```

Parsing names and contexts:

```python
from drawbridge.tag import TagContext
from drawbridge.paths import TreePath

tag = TagContext.parse("alice/hello-world:1.2.3")
print(tag.repository.owner, tag.repository.name, tag.name)

path = TreePath.parse("/dir/main.wasm")
print(path.intersperse("/"))
```

Building a tree from a directory on disk:

```python
from drawbridge.tree import Tree

tree = Tree.from_path("./my-module")
print(tree.root().meta.dumps())
```

## What this package does not do

This package provides data types only. It has no server, no client and no
command-line program. It also has no storage for users, repositories, tags
or trees, and no handling of signed tag entries.