# services/transactions.py
from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum

from firebase_rest.core.codec import format_timestamp
from firebase_rest.core.document import Document, DocumentMask, Precondition
from firebase_rest.core.errors import FirestoreError, TransactionError
from firebase_rest.core.paths import join_path, validate_document_path

logger = logging.getLogger(__name__)


class TransactionMode(Enum):
    READ_ONLY = "readOnly"
    READ_WRITE = "readWrite"


class WriteAction(Enum):
    UPDATE = "update"
    DELETE = "delete"


def transaction_options(mode: TransactionMode, param=None) -> dict:
    """``TransactionOptions`` JSON for beginTransaction.

    READ_ONLY takes an optional ``datetime`` to read at; READ_WRITE takes an
    optional id of a transaction to retry.
    """
    if mode is TransactionMode.READ_ONLY:
        if param is None:
            return {"readOnly": {}}
        if not isinstance(param, datetime):
            raise ValueError(f"Read-only transactions take a datetime, got {param!r}")
        return {"readOnly": {"readTime": format_timestamp(param)}}

    if mode is TransactionMode.READ_WRITE:
        if param is None:
            return {"readWrite": {}}
        if not isinstance(param, str):
            raise ValueError(f"Read-write transactions take a transaction id to retry, got {param!r}")
        return {"readWrite": {"retryTransaction": param}}

    raise ValueError(f"Unknown transaction mode: {mode!r}")


class TransactionBuilder:

    def __init__(self, firestore, base_path: str, mode: TransactionMode, param=None):
        self._fs = firestore
        self.base_path = base_path
        self.options = transaction_options(mode, param)

    def start(self) -> "Transaction":
        try:
            data = self._fs._call("POST", f"{self._fs.base_url}:beginTransaction", json={"options": self.options})
        except FirestoreError as e:
            raise TransactionError(f"Error starting transaction: {e}", e.status_code) from e

        transaction_id = data.get("transaction")
        if not transaction_id:
            raise TransactionError("Error starting transaction: no transaction id returned")
        return Transaction(self._fs, self.base_path, transaction_id)


class Transaction:
    """Collects writes and commits them atomically under one transaction id."""

    def __init__(self, firestore, base_path: str, transaction_id: str):
        self._fs = firestore
        self.base_path = base_path
        self.transaction_id = transaction_id
        self.writes = []

    def _name(self, path, base: str = "") -> str:
        if path.startswith("projects/"):
            return path
        return self._fs.resource_name(validate_document_path(join_path(base, path)))

    def add_write(self, action: WriteAction, param, name=None, mask: DocumentMask | None = None,
                  current: Precondition | None = None) -> "Transaction":
        """Queue a write.

        Update names are relative to the path the transaction was opened on;
        delete paths are relative to the database root.
        """
        if action is WriteAction.UPDATE:
            if not isinstance(param, Document):
                raise ValueError("Update writes take a Document")
            target = name or param.name
            if not target:
                raise ValueError("Update writes need a document name")
            write = {"update": param.with_name(self._name(target, self.base_path)).to_json()}
            if mask is not None:
                write["updateMask"] = mask.to_json()
        elif action is WriteAction.DELETE:
            if not isinstance(param, str) or not param:
                raise ValueError("Delete writes take a document path")
            write = {"delete": self._name(param)}
        else:
            raise ValueError(f"Unknown write action: {action!r}")

        if current is not None:
            write["currentDocument"] = current.to_json()
        self.writes.append(write)
        return self

    def to_json(self) -> dict:
        return {"transaction": self.transaction_id, "writes": list(self.writes)}

    def commit(self) -> bool:
        res = self._fs._send("POST", f"{self._fs.base_url}:commit", json=self.to_json())
        if not res.ok:
            logger.warning("Commit of %d writes failed with %s", len(self.writes), res.status_code)
        return res.ok

    def rollback(self) -> bool:
        res = self._fs._send("POST", f"{self._fs.base_url}:rollback", json={"transaction": self.transaction_id})
        return res.ok
