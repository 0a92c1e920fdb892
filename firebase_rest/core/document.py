# core/document.py
from __future__ import annotations

from datetime import datetime

from firebase_rest.core.codec import decode_fields, encode_fields, format_timestamp
from firebase_rest.core.errors import DecodeError, InvalidValueError
from firebase_rest.core.paths import last_segment
from firebase_rest.core.values import Value


# ============================================
# 1. DOCUMENT
# ============================================

class Document:
    """A Firestore document: resource name, typed fields and server timestamps.

    ``create_time`` and ``update_time`` are kept as the strings the server sent.
    """

    def __init__(self, name=None, fields=None, create_time=None, update_time=None):
        self.name = name
        self.fields = fields
        self.create_time = create_time
        self.update_time = update_time

    @property
    def exists(self) -> bool:
        return self.name is not None and self.fields is not None

    @property
    def id(self):
        return last_segment(self.name) if self.name else None

    def get(self, key, default=None):
        """Native Python value of one field."""
        if not self.fields or key not in self.fields:
            return default
        return self.fields[key].to_python()

    def to_dict(self) -> dict:
        return {k: v.to_python() for k, v in (self.fields or {}).items()}

    def to_json(self) -> dict:
        body = {}
        if self.name is not None:
            body["name"] = self.name
        body["fields"] = encode_fields(self.fields or {})
        return body

    @classmethod
    def from_json(cls, data) -> "Document":
        if not isinstance(data, dict):
            raise DecodeError(f"Expected a document object, got {type(data).__name__}")
        # an existing document with no fields comes back without "fields"
        fields = data.get("fields")
        if fields is None and data.get("name"):
            fields = {}
        return cls(
            name=data.get("name"),
            fields=decode_fields(fields) if fields is not None else None,
            create_time=data.get("createTime"),
            update_time=data.get("updateTime"),
        )

    @classmethod
    def from_dict(cls, data: dict, name=None) -> "Document":
        return cls(name=name, fields={k: Value.from_python(v) for k, v in data.items()})

    def with_name(self, name) -> "Document":
        return Document(name, self.fields, self.create_time, self.update_time)

    def __eq__(self, other):
        if not isinstance(other, Document):
            return NotImplemented
        return (self.name, self.fields) == (other.name, other.fields)

    def __repr__(self):
        return f"Document(name={self.name!r}, fields={self.fields!r})"


# ============================================
# 2. BUILDER
# ============================================

class DocumentBuilder:

    def __init__(self, fields=None):
        self._document = Document(fields={})
        if fields:
            self.add_fields(fields)

    def add_field(self, key, value) -> "DocumentBuilder":
        if not isinstance(key, str):
            raise InvalidValueError(f"Field names must be strings, got {key!r}")
        self._document.fields[key] = Value.from_python(value)
        return self

    def add_fields(self, pairs=None, **kwargs) -> "DocumentBuilder":
        """Add fields from a dict, an iterable of (key, value) pairs, or kwargs."""
        items = pairs.items() if isinstance(pairs, dict) else (pairs or ())
        for key, value in items:
            self.add_field(key, value)
        for key, value in kwargs.items():
            self.add_field(key, value)
        return self

    @property
    def fields(self) -> dict:
        return self._document.fields

    def clear(self):
        self._document.fields.clear()

    def build(self) -> Document:
        return self._document


# ============================================
# 3. WRITE OPTIONS
# ============================================

class DocumentMask:

    def __init__(self, field_paths=None):
        self.field_paths = list(field_paths or [])

    def to_json(self) -> dict:
        return {"fieldPaths": list(self.field_paths)}

    def query_params(self, prefix="updateMask") -> list:
        return [(f"{prefix}.fieldPaths", p) for p in self.field_paths]


class Precondition:
    """Condition on the current document: ``exists`` or ``update_time``, not both."""

    def __init__(self, exists=None, update_time=None):
        if (exists is None) == (update_time is None):
            raise ValueError("Precondition needs exactly one of exists or update_time")
        if exists is not None and not isinstance(exists, bool):
            raise ValueError(f"exists must be a bool, got {exists!r}")
        if isinstance(update_time, datetime):
            update_time = format_timestamp(update_time)
        self.exists = exists
        self.update_time = update_time

    def to_json(self) -> dict:
        if self.exists is not None:
            return {"exists": self.exists}
        return {"updateTime": self.update_time}

    def query_params(self) -> list:
        if self.exists is not None:
            return [("currentDocument.exists", "true" if self.exists else "false")]
        return [("currentDocument.updateTime", self.update_time)]


# ============================================
# 4. LIST RESPONSES
# ============================================

class DocumentList:

    def __init__(self, documents=None, next_page_token=None):
        self.documents = documents or []
        self.next_page_token = next_page_token

    @classmethod
    def from_json(cls, data) -> "DocumentList":
        data = data or {}
        return cls(
            [Document.from_json(d) for d in data.get("documents", [])],
            data.get("nextPageToken"),
        )

    def __iter__(self):
        return iter(self.documents)

    def __len__(self):
        return len(self.documents)


class CollectionIds:

    def __init__(self, collection_ids=None, next_page_token=None):
        self.collection_ids = collection_ids or []
        self.next_page_token = next_page_token

    @classmethod
    def from_json(cls, data) -> "CollectionIds":
        data = data or {}
        return cls(list(data.get("collectionIds", [])), data.get("nextPageToken"))

    def __iter__(self):
        return iter(self.collection_ids)

    def __len__(self):
        return len(self.collection_ids)
