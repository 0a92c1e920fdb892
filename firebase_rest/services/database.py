# services/database.py
"""Realtime Database REST access (``<path>.json`` endpoints)."""
from __future__ import annotations

import json
import logging

import requests

from firebase_rest.core.errors import DatabaseAuthError, error_message

logger = logging.getLogger(__name__)


class FirebaseDatabase:

    def __init__(self, database_url: str, auth=None, session: requests.Session | None = None, timeout: float = 10):
        self.database_url = database_url.rstrip("/") + "/"
        self._auth = auth
        self._timeout = timeout
        self._http = session or requests.Session()
        self._http.headers.update({"Accept": "application/json"})

    def get_reference(self, child: str | None = None) -> "DatabaseReference":
        """Reference to ``child`` (the root when omitted)."""
        return DatabaseReference(self, (child or "").strip("/"))

    # ---- plumbing used by references ----

    def _params(self, **extra) -> dict:
        params = dict(extra)
        token = self._auth.id_token if self._auth is not None else None
        if token:
            params["auth"] = token
        return params

    def _request(self, method, path, **kwargs) -> requests.Response:
        url = f"{self.database_url}{path}.json"
        res = self._http.request(method, url, timeout=self._timeout, **kwargs)
        if res.status_code == 401:
            raise DatabaseAuthError("You are not authorized to the database", 401)
        if not res.ok:
            logger.warning("%s %s failed with %s: %s", method, path or "/", res.status_code, error_message(res))
        return res


class DatabaseReference:

    def __init__(self, database: FirebaseDatabase, path: str = ""):
        self._db = database
        self.path = path

    def read(self) -> str | None:
        """Raw JSON text at this location, or None when the read fails."""
        res = self._db._request("GET", self.path, params=self._db._params(print="pretty"))
        return res.text if res.ok else None

    def read_json(self):
        text = self.read()
        return json.loads(text) if text is not None else None

    def write(self, data) -> bool:
        """Replace the data here. Strings are sent as already-encoded JSON."""
        body = data if isinstance(data, str) else json.dumps(data)
        res = self._db._request(
            "PUT",
            self.path,
            params=self._db._params(),
            data=body.encode("utf-8"),
            headers={"Content-Type": "application/json"},
        )
        return res.ok

    def delete(self) -> bool:
        res = self._db._request("DELETE", self.path, params=self._db._params())
        return res.ok

    # ---- navigation ----

    def child(self, name: str) -> "DatabaseReference":
        name = name.strip("/")
        return DatabaseReference(self._db, f"{self.path}/{name}" if self.path else name)

    @property
    def root(self) -> "DatabaseReference":
        return DatabaseReference(self._db)

    @property
    def parent(self) -> "DatabaseReference":
        if "/" not in self.path:
            return self.root
        return DatabaseReference(self._db, self.path[:self.path.rindex("/")])

    def __eq__(self, other):
        if not isinstance(other, DatabaseReference):
            return NotImplemented
        return self._db is other._db and self.path == other.path

    def __str__(self):
        return f"{self._db.database_url}{self.path}"

    def __repr__(self):
        return f"DatabaseReference({str(self)!r})"
