# core/paths.py
import re

from firebase_rest.core.errors import InvalidPathError

# collection/doc pairs: "users/alice", "users/alice/posts/p1"
DOCUMENT_PATH_RE = re.compile(r"^[^/]+([/][^/]+)(([/][^/]+){2})*$")
# odd segment count: "users", "users/alice/posts"
COLLECTION_PATH_RE = re.compile(r"^[^/]+(([/][^/]+){2})*$")


def is_document_path(path) -> bool:
    return isinstance(path, str) and DOCUMENT_PATH_RE.fullmatch(path) is not None


def is_collection_path(path) -> bool:
    return isinstance(path, str) and COLLECTION_PATH_RE.fullmatch(path) is not None


def validate_document_path(path) -> str:
    if not is_document_path(path):
        raise InvalidPathError(path, "document")
    return path


def validate_collection_path(path) -> str:
    if not is_collection_path(path):
        raise InvalidPathError(path, "collection")
    return path


def join_path(base, child) -> str:
    if not base:
        return child
    return f"{base}/{child}"


def parent_path(path):
    """Everything before the last slash, or None for a single segment."""
    if "/" not in path:
        return None
    return path[:path.rindex("/")]


def last_segment(path) -> str:
    return path[path.rfind("/") + 1:]
