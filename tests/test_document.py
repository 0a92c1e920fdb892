from datetime import datetime, timezone

import pytest

from firebase_rest.core.document import (
    CollectionIds,
    Document,
    DocumentBuilder,
    DocumentList,
    DocumentMask,
    Precondition,
)
from firebase_rest.core.errors import DecodeError
from firebase_rest.core.values import Value

NAME = "projects/demo/databases/(default)/documents/users/alice"


@pytest.fixture
def alice_json():
    return {
        "name": NAME,
        "fields": {
            "age": {"integerValue": "31"},
            "tags": {"arrayValue": {"values": [{"stringValue": "admin"}]}},
        },
        "createTime": "2024-01-01T00:00:00.000000Z",
        "updateTime": "2024-01-02T00:00:00.000000Z",
    }


def test_from_json(alice_json):
    doc = Document.from_json(alice_json)

    assert doc.exists
    assert doc.id == "alice"
    assert doc.fields["age"] == Value.integer(31)
    assert doc.get("tags") == ["admin"]
    assert doc.get("missing", "x") == "x"
    assert doc.create_time == "2024-01-01T00:00:00.000000Z"
    assert doc.to_dict() == {"age": 31, "tags": ["admin"]}


def test_to_json_round_trips(alice_json):
    doc = Document.from_json(alice_json)
    body = doc.to_json()
    assert body == {"name": NAME, "fields": alice_json["fields"]}


def test_exists_needs_name_and_fields():
    assert not Document().exists
    assert not Document(name=NAME).exists
    assert not Document(fields={}).exists
    assert Document(name=NAME, fields={}).exists


def test_named_document_without_fields_exists():
    doc = Document.from_json({"name": NAME, "createTime": "t", "updateTime": "t"})
    assert doc.exists
    assert doc.fields == {}


def test_from_json_rejects_non_objects():
    with pytest.raises(DecodeError):
        Document.from_json(["nope"])


def test_builder():
    builder = DocumentBuilder({"a": 1})
    builder.add_field("b", "two").add_fields([("c", 3.0)], d=None)

    doc = builder.build()
    assert builder.fields is doc.fields
    assert doc.to_dict() == {"a": 1, "b": "two", "c": 3.0, "d": None}
    assert doc.fields["b"] == Value.string("two")

    builder.clear()
    assert doc.fields == {}


def test_builder_accepts_values():
    doc = DocumentBuilder().add_field("n", Value.integer("9")).build()
    assert doc.fields["n"] == Value.integer(9)


def test_from_dict():
    doc = Document.from_dict({"x": [1]}, name=NAME)
    assert doc.exists
    assert doc.fields["x"] == Value.array([Value.integer(1)])


def test_mask():
    mask = DocumentMask(["a", "b.c"])
    assert mask.to_json() == {"fieldPaths": ["a", "b.c"]}
    assert mask.query_params() == [("updateMask.fieldPaths", "a"), ("updateMask.fieldPaths", "b.c")]


def test_precondition_exists():
    pre = Precondition(exists=False)
    assert pre.to_json() == {"exists": False}
    assert pre.query_params() == [("currentDocument.exists", "false")]


def test_precondition_update_time_from_datetime():
    pre = Precondition(update_time=datetime(2024, 1, 1, tzinfo=timezone.utc))
    assert pre.to_json() == {"updateTime": "2024-01-01T00:00:00.000000Z"}
    assert pre.query_params() == [("currentDocument.updateTime", "2024-01-01T00:00:00.000000Z")]


@pytest.mark.parametrize("kwargs", [{}, {"exists": True, "update_time": "t"}, {"exists": "yes"}])
def test_precondition_needs_exactly_one_condition(kwargs):
    with pytest.raises(ValueError):
        Precondition(**kwargs)


def test_document_list(alice_json):
    page = DocumentList.from_json({"documents": [alice_json], "nextPageToken": "tok"})
    assert len(page) == 1
    assert [d.id for d in page] == ["alice"]
    assert page.next_page_token == "tok"

    empty = DocumentList.from_json({})
    assert len(empty) == 0
    assert empty.next_page_token is None


def test_collection_ids():
    ids = CollectionIds.from_json({"collectionIds": ["posts", "likes"]})
    assert list(ids) == ["posts", "likes"]
    assert ids.next_page_token is None
