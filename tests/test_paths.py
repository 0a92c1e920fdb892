import pytest

from firebase_rest.core.errors import InvalidPathError
from firebase_rest.core.paths import (
    is_collection_path,
    is_document_path,
    last_segment,
    parent_path,
    validate_collection_path,
    validate_document_path,
)


@pytest.mark.parametrize("path", ["a/b", "users/alice/posts/p1", "a/b/c/d/e/f"])
def test_document_paths(path):
    assert is_document_path(path)
    assert not is_collection_path(path)


@pytest.mark.parametrize("path", ["a", "a/b/c", "users/alice/posts"])
def test_collection_paths(path):
    assert is_collection_path(path)
    assert not is_document_path(path)


@pytest.mark.parametrize("path", ["", "/a", "a/", "a//b", None])
def test_malformed_paths(path):
    assert not is_document_path(path)
    assert not is_collection_path(path)


def test_four_segments_fail_collection_validation():
    with pytest.raises(InvalidPathError) as exc:
        validate_collection_path("a/b/c/d")
    assert exc.value.expected == "collection"


def test_single_segment_fails_document_validation():
    with pytest.raises(InvalidPathError):
        validate_document_path("a")


def test_validate_returns_path():
    assert validate_document_path("a/b") == "a/b"
    assert validate_collection_path("a") == "a"


def test_parent_and_last_segment():
    assert parent_path("a/b/c") == "a/b"
    assert parent_path("a") is None
    assert last_segment("a/b/c") == "c"
    assert last_segment("a") == "a"
