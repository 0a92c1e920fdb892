# services/firestore.py
"""Firestore REST v1: collection and document references."""
from __future__ import annotations

import logging

import requests

from firebase_rest.core.document import CollectionIds, Document, DocumentList
from firebase_rest.core.errors import FirestoreError, error_message
from firebase_rest.core.paths import (
    join_path,
    last_segment,
    parent_path,
    validate_collection_path,
    validate_document_path,
)
from firebase_rest.services.transactions import TransactionBuilder

logger = logging.getLogger(__name__)

FIRESTORE_URL = "https://firestore.googleapis.com/v1"


class Firestore:

    def __init__(self, project_id: str, auth=None, session: requests.Session | None = None, timeout: float = 10):
        self.project_id = project_id
        self.database_root = f"projects/{project_id}/databases/(default)/documents"
        self.base_url = f"{FIRESTORE_URL}/{self.database_root}"
        self._auth = auth
        self._timeout = timeout
        self._http = session or requests.Session()
        self._http.headers.update({"Accept": "application/json"})

    def collection(self, path: str) -> "CollectionReference":
        return CollectionReference(self, validate_collection_path(path))

    def document(self, path: str) -> "DocumentReference":
        return DocumentReference(self, validate_document_path(path))

    def transaction(self, mode, param=None) -> TransactionBuilder:
        """Transaction whose write names are relative to the database root."""
        return TransactionBuilder(self, "", mode, param)

    def resource_name(self, path: str) -> str:
        if path.startswith("projects/"):
            return path
        return f"{self.database_root}/{path}"

    # ============================================
    # HTTP
    # ============================================

    def _headers(self) -> dict:
        token = self._auth.id_token if self._auth is not None else None
        return {"Authorization": f"Bearer {token}"} if token else {}

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        return self._http.request(method, url, headers=self._headers(), timeout=self._timeout, **kwargs)

    def _call(self, method: str, url: str, **kwargs) -> dict:
        """Send and return the JSON body; non-2xx raises FirestoreError."""
        res = self._send(method, url, **kwargs)
        if not res.ok:
            message = error_message(res)
            logger.warning("%s %s failed with %s: %s", method, url, res.status_code, message)
            raise FirestoreError(message, res.status_code)
        return res.json() if res.content else {}


# ============================================
# COLLECTIONS
# ============================================

class CollectionReference:

    def __init__(self, firestore: Firestore, path: str):
        self._fs = firestore
        self.path = path

    @property
    def id(self) -> str:
        return last_segment(self.path)

    @property
    def parent(self) -> "DocumentReference | None":
        parent = parent_path(self.path)
        return DocumentReference(self._fs, parent) if parent else None

    @property
    def url(self) -> str:
        return f"{self._fs.base_url}/{self.path}"

    def document(self, path: str) -> "DocumentReference":
        return DocumentReference(self._fs, validate_document_path(join_path(self.path, path)))

    def create_document(self, document: Document, document_id: str | None = None) -> Document:
        """Create a document here; Firestore picks the id when none is given."""
        params = {"documentId": document_id} if document_id else None
        body = {"fields": document.to_json()["fields"]}
        created = Document.from_json(self._fs._call("POST", self.url, params=params, json=body))
        logger.info("Created document %s", created.name)
        return created

    def list_documents(self, page_size=None, page_token=None, order_by=None) -> DocumentList:
        params = {"pageSize": page_size, "pageToken": page_token, "orderBy": order_by}
        params = {k: v for k, v in params.items() if v is not None}
        return DocumentList.from_json(self._fs._call("GET", self.url, params=params or None))

    def stream(self, page_size=None, order_by=None):
        """Yield every document, following page tokens."""
        token = None
        while True:
            page = self.list_documents(page_size=page_size, page_token=token, order_by=order_by)
            yield from page.documents
            token = page.next_page_token
            if not token:
                return

    def __eq__(self, other):
        if not isinstance(other, CollectionReference):
            return NotImplemented
        return self._fs is other._fs and self.path == other.path

    def __repr__(self):
        return f"CollectionReference({self.path!r})"


# ============================================
# DOCUMENTS
# ============================================

class DocumentReference:

    def __init__(self, firestore: Firestore, path: str):
        self._fs = firestore
        self.path = path

    @property
    def id(self) -> str:
        return last_segment(self.path)

    @property
    def name(self) -> str:
        return self._fs.resource_name(self.path)

    @property
    def parent(self) -> CollectionReference:
        return CollectionReference(self._fs, parent_path(self.path))

    @property
    def url(self) -> str:
        return f"{self._fs.base_url}/{self.path}"

    def collection(self, path: str) -> CollectionReference:
        return CollectionReference(self._fs, validate_collection_path(join_path(self.path, path)))

    def transaction(self, mode, param=None) -> TransactionBuilder:
        return TransactionBuilder(self._fs, self.path, mode, param)

    def get(self) -> Document | None:
        """The stored document, or None when it does not exist."""
        res = self._fs._send("GET", self.url)
        if res.status_code == 404:
            return None
        if not res.ok:
            raise FirestoreError(error_message(res), res.status_code)
        doc = Document.from_json(res.json())
        return doc if doc.exists else None

    def delete(self) -> bool:
        res = self._fs._send("DELETE", self.url)
        if not res.ok:
            logger.warning("Deleting %s failed with %s: %s", self.path, res.status_code, error_message(res))
        return res.ok

    def update(self, document: Document, precondition=None, mask=None) -> Document:
        """Patch this document. With ``mask`` only the listed fields are touched."""
        params = []
        if mask is not None:
            params.extend(mask.query_params())
        if precondition is not None:
            params.extend(precondition.query_params())
        body = {"fields": document.to_json()["fields"]}
        return Document.from_json(self._fs._call("PATCH", self.url, params=params or None, json=body))

    def set(self, document: Document) -> Document:
        """Overwrite the whole document, creating it if needed."""
        return self.update(document)

    def list_collections(self, page_size=None, page_token=None) -> CollectionIds:
        body = {}
        if page_size is not None:
            body["pageSize"] = page_size
        if page_token is not None:
            body["pageToken"] = page_token
        return CollectionIds.from_json(self._fs._call("POST", f"{self.url}:listCollectionIds", json=body))

    def __eq__(self, other):
        if not isinstance(other, DocumentReference):
            return NotImplemented
        return self._fs is other._fs and self.path == other.path

    def __repr__(self):
        return f"DocumentReference({self.path!r})"
