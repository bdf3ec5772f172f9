import pytest
import semver

from drawbridge.repository import RepositoryContext
from drawbridge.tag import TagContext, TagName


@pytest.mark.parametrize("value", ["", "=", "/", "v1.2/3", "v1.2.3"])
def test_name_rejects_invalid(value):
    with pytest.raises(ValueError):
        TagName.parse(value)


def test_name_plain_version():
    name = TagName.parse("1.2.3")
    assert name == TagName(semver.Version(1, 2, 3))
    assert (name.major, name.minor, name.patch) == (1, 2, 3)
    assert name.prerelease is None
    assert name.build is None


def test_name_prerelease():
    name = TagName.parse("1.2.3-test")
    assert name == TagName(semver.Version(1, 2, 3, prerelease="test"))
    assert name.prerelease == "test"
    assert str(name) == "1.2.3-test"


def test_name_hash_matches_equality():
    assert hash(TagName.parse("0.1.0")) == hash(TagName.parse("0.1.0"))
    assert len({TagName.parse("0.1.0"), TagName.parse("0.1.0")}) == 1


def test_context_parse_and_display():
    context = TagContext.parse("alice/repo:1.0.0")
    assert context.repository == RepositoryContext.parse("alice/repo")
    assert context.name == TagName.parse("1.0.0")
    assert str(context) == "alice/repo:1.0.0"
    assert TagContext.parse(str(context)) == context


def test_context_from_parts():
    assert TagContext.from_parts("alice", "repo", "2.0.0") == TagContext.parse("alice/repo/2.0.0")


def test_context_missing_separator():
    with pytest.raises(ValueError, match="separator not found"):
        TagContext.parse("1.0.0")


def test_context_bad_repository():
    with pytest.raises(ValueError, match="failed to parse repository context"):
        TagContext.parse("alice:1.0.0")


def test_context_bad_version():
    with pytest.raises(ValueError, match="failed to parse tag semantic version"):
        TagContext.from_parts("alice", "repo", "v1")