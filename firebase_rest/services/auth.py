# services/auth.py
"""Email/password authentication through the Firebase Auth REST API."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Optional

import requests

from firebase_rest.core.errors import AuthError, error_message

logger = logging.getLogger(__name__)

IDENTITY_URL = "https://identitytoolkit.googleapis.com/v1/accounts"
TOKEN_URL = "https://securetoken.googleapis.com/v1/token"


@dataclass
class FirebaseUser:
    local_id: Optional[str] = None
    email: Optional[str] = None
    display_name: Optional[str] = None
    id_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    registered: bool = False
    kind: Optional[str] = None

    @classmethod
    def from_response(cls, data: dict) -> "FirebaseUser":
        """Build from either an identitytoolkit (camelCase) or securetoken (snake_case) body."""
        expires_in = data.get("expiresIn", data.get("expires_in"))
        return cls(
            local_id=data.get("localId", data.get("user_id")),
            email=data.get("email"),
            display_name=data.get("displayName"),
            id_token=data.get("idToken", data.get("id_token")),
            refresh_token=data.get("refreshToken", data.get("refresh_token")),
            expires_in=int(expires_in) if expires_in is not None else None,
            registered=bool(data.get("registered", False)),
            kind=data.get("kind"),
        )

    def to_dict(self) -> dict:
        return asdict(self)

    def __repr__(self):
        # keep tokens out of logs and tracebacks
        return f"FirebaseUser(local_id={self.local_id!r}, email={self.email!r})"


class FirebaseAuth:

    def __init__(self, api_key: str, session: requests.Session | None = None, timeout: float = 10):
        if not api_key:
            raise ValueError("API key cannot be None or empty")
        self._api_key = api_key
        self._timeout = timeout
        self._http = session or requests.Session()
        self._http.headers.update({"Accept": "application/json"})
        self._user: FirebaseUser | None = None

    # ============================================
    # SESSION STATE
    # ============================================

    @property
    def current_user(self) -> FirebaseUser | None:
        return self._user

    @property
    def is_logged_in(self) -> bool:
        return self._user is not None

    @property
    def id_token(self) -> str | None:
        return self._user.id_token if self._user else None

    def sign_out(self):
        self._user = None

    # ============================================
    # IDENTITY TOOLKIT
    # ============================================

    def _post(self, url, **kwargs) -> requests.Response:
        return self._http.post(url, params={"key": self._api_key}, timeout=self._timeout, **kwargs)

    def _accounts(self, endpoint: str, payload: dict) -> dict:
        res = self._post(f"{IDENTITY_URL}:{endpoint}", json=payload)
        if not res.ok:
            message = error_message(res)
            logger.warning("accounts:%s failed with %s: %s", endpoint, res.status_code, message)
            raise AuthError(f"Firebase Auth Error: {message}", res.status_code)
        return res.json()

    def sign_in_with_password(self, email: str, password: str) -> FirebaseUser:
        """Sign a user in and keep them as the current user."""
        payload = {"email": email, "password": password, "returnSecureToken": True}
        try:
            data = self._accounts("signInWithPassword", payload)
        except AuthError:
            self._user = None
            raise

        self._user = FirebaseUser.from_response(data)
        logger.info("Signed in %s", self._user.email)
        return self._user

    def sign_up(self, email: str, password: str) -> FirebaseUser:
        payload = {"email": email, "password": password, "returnSecureToken": True}
        user = FirebaseUser.from_response(self._accounts("signUp", payload))
        logger.info("Created account %s", user.email)
        return user

    def send_password_reset_email(self, email: str) -> bool:
        payload = {"requestType": "PASSWORD_RESET", "email": email}
        res = self._post(f"{IDENTITY_URL}:sendOobCode", json=payload)
        if not res.ok:
            logger.warning("Password reset for %s failed: %s", email, error_message(res))
        return res.ok

    # ============================================
    # SECURE TOKEN
    # ============================================

    def sign_in_with_refresh_token(self, refresh_token: str) -> FirebaseUser:
        """Exchange a refresh token for a fresh id token."""
        payload = {"grant_type": "refresh_token", "refresh_token": refresh_token}
        res = self._post(TOKEN_URL, data=payload)
        if not res.ok:
            self._user = None
            message = error_message(res)
            logger.warning("Token refresh failed with %s: %s", res.status_code, message)
            raise AuthError(f"Firebase Auth Error: {message}", res.status_code)

        refreshed = FirebaseUser.from_response(res.json())
        previous = self._user
        if previous is not None and previous.local_id == refreshed.local_id:
            # securetoken does not echo the profile
            refreshed.email = previous.email
            refreshed.display_name = previous.display_name
            refreshed.registered = previous.registered
        self._user = refreshed
        return refreshed
