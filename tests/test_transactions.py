from datetime import datetime, timezone

import pytest

from firebase_rest.core.document import Document, DocumentMask, Precondition
from firebase_rest.core.errors import InvalidPathError, TransactionError
from firebase_rest.core.values import Value
from firebase_rest.services.firestore import Firestore
from firebase_rest.services.transactions import TransactionMode, WriteAction, transaction_options
from tests.conftest import make_response

BASE = "https://firestore.googleapis.com/v1/projects/demo/databases/(default)/documents"
ROOT = "projects/demo/databases/(default)/documents"


@pytest.fixture
def firestore(session, signed_in_auth):
    return Firestore("demo", auth=signed_in_auth, session=session)


def test_options():
    when = datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert transaction_options(TransactionMode.READ_ONLY) == {"readOnly": {}}
    assert transaction_options(TransactionMode.READ_ONLY, when) == {
        "readOnly": {"readTime": "2024-01-01T00:00:00.000000Z"}
    }
    assert transaction_options(TransactionMode.READ_WRITE) == {"readWrite": {}}
    assert transaction_options(TransactionMode.READ_WRITE, "tx-old") == {"readWrite": {"retryTransaction": "tx-old"}}


@pytest.mark.parametrize(
    "mode, param",
    [(TransactionMode.READ_ONLY, "tx"), (TransactionMode.READ_WRITE, 5), (None, None)],
)
def test_bad_options(mode, param):
    with pytest.raises(ValueError):
        transaction_options(mode, param)


def test_start(firestore, session):
    session.request.return_value = make_response(200, {"transaction": "tx-1"})

    tx = firestore.document("users/alice").transaction(TransactionMode.READ_WRITE).start()

    assert tx.transaction_id == "tx-1"
    assert tx.base_path == "users/alice"
    args, kwargs = session.request.call_args
    assert args == ("POST", f"{BASE}:beginTransaction")
    assert kwargs["json"] == {"options": {"readWrite": {}}}


def test_start_failure(firestore, session):
    session.request.return_value = make_response(400, {"error": {"message": "bad"}})
    with pytest.raises(TransactionError):
        firestore.transaction(TransactionMode.READ_WRITE).start()


def test_start_without_id(firestore, session):
    session.request.return_value = make_response(200, {})
    with pytest.raises(TransactionError):
        firestore.transaction(TransactionMode.READ_WRITE).start()


def test_writes_and_commit(firestore, session):
    session.request.return_value = make_response(200, {"transaction": "tx-1"})
    tx = firestore.transaction(TransactionMode.READ_WRITE).start()

    doc = Document(fields={"n": Value.integer(1)})
    tx.add_write(WriteAction.UPDATE, doc, name="users/alice", mask=DocumentMask(["n"]),
                 current=Precondition(exists=True))
    tx.add_write(WriteAction.DELETE, "users/bob")

    session.request.return_value = make_response(200, {"writeResults": [{}, {}]})
    assert tx.commit() is True

    args, kwargs = session.request.call_args
    assert args == ("POST", f"{BASE}:commit")
    assert kwargs["json"] == {
        "transaction": "tx-1",
        "writes": [
            {
                "update": {"name": f"{ROOT}/users/alice", "fields": {"n": {"integerValue": "1"}}},
                "updateMask": {"fieldPaths": ["n"]},
                "currentDocument": {"exists": True},
            },
            {"delete": f"{ROOT}/users/bob"},
        ],
    }


def test_update_names_are_relative_to_base_path(firestore, session):
    session.request.return_value = make_response(200, {"transaction": "tx-1"})
    tx = firestore.document("users/alice").transaction(TransactionMode.READ_WRITE).start()

    tx.add_write(WriteAction.UPDATE, Document(fields={}), name="posts/p1")

    assert tx.writes[0]["update"]["name"] == f"{ROOT}/users/alice/posts/p1"

    tx.add_write(WriteAction.DELETE, "users/bob")
    assert tx.writes[1]["delete"] == f"{ROOT}/users/bob"
    with pytest.raises(InvalidPathError):
        tx.add_write(WriteAction.DELETE, "posts")


def test_bad_writes(firestore, session):
    session.request.return_value = make_response(200, {"transaction": "tx-1"})
    tx = firestore.transaction(TransactionMode.READ_WRITE).start()

    with pytest.raises(ValueError):
        tx.add_write(WriteAction.UPDATE, "users/alice")
    with pytest.raises(ValueError):
        tx.add_write(WriteAction.UPDATE, Document(fields={}))
    with pytest.raises(ValueError):
        tx.add_write(WriteAction.DELETE, Document(fields={}))
    with pytest.raises(ValueError):
        tx.add_write("update", Document(fields={}), name="a/b")


def test_failed_commit_returns_false(firestore, session):
    session.request.return_value = make_response(200, {"transaction": "tx-1"})
    tx = firestore.transaction(TransactionMode.READ_WRITE).start()
    tx.add_write(WriteAction.DELETE, "users/bob")

    session.request.return_value = make_response(409, {"error": {"message": "contention"}})
    assert tx.commit() is False


def test_rollback(firestore, session):
    session.request.return_value = make_response(200, {"transaction": "tx-1"})
    tx = firestore.transaction(TransactionMode.READ_ONLY).start()

    session.request.return_value = make_response(200, {})
    assert tx.rollback() is True
    assert session.request.call_args[1]["json"] == {"transaction": "tx-1"}
