# core/errors.py


class FirebaseError(Exception):
    """Base class for every error raised by this library."""


# ============================================
# 1. LOCAL VALIDATION
# ============================================

class InvalidValueError(FirebaseError, ValueError):
    """A Value payload does not fit its declared kind."""


class TypeMismatchError(FirebaseError, TypeError):
    """A child was added to a Value that is neither an array nor a map."""


class InvalidPathError(FirebaseError, ValueError):
    """A document or collection path has the wrong shape."""

    def __init__(self, path, expected):
        self.path = path
        self.expected = expected
        super().__init__(f"Invalid path to {expected}: {path!r}")


class DecodeError(FirebaseError, ValueError):
    """A Firestore wire value could not be decoded."""


# ============================================
# 2. REMOTE FAILURES
# ============================================

class RemoteError(FirebaseError):
    """An HTTP call came back with a non-success status."""

    def __init__(self, message, status_code=None):
        self.status_code = status_code
        super().__init__(message)


class AuthError(RemoteError):
    pass


class DatabaseAuthError(RemoteError):
    pass


class FirestoreError(RemoteError):
    pass


class TransactionError(FirestoreError):
    pass


def error_message(response, default="Unknown error"):
    """Pull Google's error message out of a failed response body."""
    try:
        body = response.json()
    except ValueError:
        return response.text or default

    err = body.get("error") if isinstance(body, dict) else None
    if isinstance(err, dict):
        return err.get("message") or default
    if isinstance(err, str):
        return err
    return default
