import io
import json

import pytest

from drawbridge.digest import Algorithms, ContentDigest
from drawbridge.meta import Meta
from drawbridge.paths import TreePath
from drawbridge.tree import (
    Directory,
    DirectoryContent,
    Entry,
    FileContent,
    Tree,
)

OCTET = "application/octet-stream"


def _meta(data, mime):
    size, digest = Algorithms().read(io.BytesIO(data))
    return Meta(digest, size, mime)


def test_try_from_btree_map():
    bin_entry = Tree.file_entry(io.BytesIO(bytes([0xDE, 0xAD, 0xBE, 0xEF])), OCTET)
    conf = Tree.file_entry(
        io.BytesIO(b'steward = "example.com"\nargs = ["foo", "bar"]'),
        "application/toml",
    )
    tree = Tree.from_directory({"main.wasm": bin_entry, "Enarx.toml": conf})
    root = tree.root()

    items = list(tree.items())
    assert len(items) == 3

    path, entry = items[0]
    assert path == TreePath.ROOT
    assert entry.meta == root.meta

    path, entry = items[1]
    assert path == TreePath.parse("/Enarx.toml")
    assert entry.meta == conf.meta

    path, entry = items[2]
    assert path == TreePath.parse("/main.wasm")
    assert entry.meta == bin_entry.meta


def test_file_entry_meta():
    entry = Tree.file_entry(io.BytesIO(b"foo"), OCTET)
    assert entry.meta.size == 3
    assert entry.meta.mime == OCTET
    assert entry.meta.hash == ContentDigest.parse(
        "sha-224=:CAj2TmDViXn8tnbJbsk4Jw3qQkRa7vzTpOb42w==:,"
        "sha-256=:LCa0a2j/xo/5m0U8HTBBNBNCLXBkg7+g+YpeiGJm564=:,"
        "sha-384=:mMEf/f3VQGdrGhN8saIrKnA1DJpEFx1rEYDGvly7LuP3nVMsih3Z7y6OCOdSo7q7:,"
        "sha-512=:9/u6bgY2+JDlb7vzKD5STG+jIErimDgtYkdB0NxmODJuKCxBvl5CVNiCB3LFUYosWowMf37aGVlKfrU5RT4e1w==:"
    )
    assert entry.custom == {}
    assert isinstance(entry.content, FileContent)


def test_dir_entry_mime_and_content():
    entry = Tree.dir_entry(Directory())
    assert entry.meta.mime == Directory.TYPE
    assert entry.content == DirectoryContent(b"{}")
    assert entry.meta.size == 2


def test_from_path(tmp_path):
    (tmp_path / "test-file-foo").write_bytes(b"foo")
    (tmp_path / "test-dir").mkdir()
    (tmp_path / "test-dir" / "test-file-bar").write_bytes(b"bar")

    foo_meta = _meta(b"foo", OCTET)
    bar_meta = _meta(b"bar", OCTET)

    test_dir_json = Directory({"test-file-bar": Entry(bar_meta, {}, None)}).encode()
    test_dir_meta = _meta(test_dir_json, Directory.TYPE)
    root_json = Directory({"test-dir": Entry(test_dir_meta, {}, None)}).encode()
    root_meta = _meta(root_json, Directory.TYPE)

    assert test_dir_json.startswith(b'{"test-file-bar":{"digest":{"sha-224":')

    tree = Tree.from_path(tmp_path)
    try:
        assert tree.root().meta == root_meta
        assert tree.root().custom == {}
        assert tree.root().content == DirectoryContent(root_json)

        items = list(tree.items())
        assert [path for path, _ in items] == [
            TreePath.ROOT,
            TreePath.parse("test-dir"),
            TreePath.parse("test-dir/test-file-bar"),
            TreePath.parse("test-file-foo"),
        ]

        _, entry = items[1]
        assert entry.meta == test_dir_meta
        assert entry.custom == {}
        assert entry.content == DirectoryContent(test_dir_json)

        _, entry = items[2]
        assert entry.meta == bar_meta
        assert entry.custom == {}
        entry.content.file.seek(0)
        assert entry.content.file.read() == b"bar"

        _, entry = items[3]
        assert entry.meta == foo_meta
        assert entry.custom == {}
        entry.content.file.seek(0)
        assert entry.content.file.read() == b"foo"
    finally:
        for entry in tree.values():
            if isinstance(entry.content, FileContent):
                entry.content.file.close()


def test_from_path_mime_by_extension(tmp_path):
    (tmp_path / "main.wasm").write_bytes(b"\x00asm")
    (tmp_path / "Enarx.toml").write_bytes(b"x = 1")
    (tmp_path / "data.bin").write_bytes(b"x")
    tree = Tree.from_path(tmp_path)
    try:
        assert tree[TreePath.parse("main.wasm")].meta.mime == "application/wasm"
        assert tree[TreePath.parse("Enarx.toml")].meta.mime == "application/toml"
        assert tree[TreePath.parse("data.bin")].meta.mime == OCTET
    finally:
        for entry in tree.values():
            if isinstance(entry.content, FileContent):
                entry.content.file.close()


def test_from_path_invalid_name(tmp_path):
    (tmp_path / "bad name").write_bytes(b"x")
    with pytest.raises(ValueError, match="failed to parse tree path"):
        Tree.from_path(tmp_path)


def test_entry_json_flattens_custom_fields():
    meta = _meta(b"foo", "text/plain")
    entry = Entry(meta, {"extra": [1, 2]})
    data = entry.to_json()
    assert list(data) == ["digest", "length", "type", "extra"]
    assert data["extra"] == [1, 2]
    restored = Entry.from_json(data)
    assert restored.meta == meta
    assert restored.custom == {"extra": [1, 2]}


def test_directory_sorted_and_round_trip():
    meta = _meta(b"foo", OCTET)
    directory = Directory({"b": Entry(meta), "a": Entry(meta)})
    assert list(directory) == ["a", "b"]
    decoded = Directory.from_json(json.loads(directory.encode()))
    assert decoded == directory


def test_directory_rejects_invalid_name():
    with pytest.raises(ValueError):
        Directory({"bad/name": None})


def test_dir_entry_uses_directory_type():
    entry = Tree.dir_entry(Directory())
    assert entry.meta.mime == "application/vnd.drawbridge.directory.v1+json"
    assert Entry.TYPE == "application/vnd.drawbridge.entry.v1+json"


def test_tree_requires_root():
    with pytest.raises(ValueError, match="root"):
        Tree({})