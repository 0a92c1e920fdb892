"""REST client for Firebase Auth, Realtime Database and Firestore."""
from firebase_rest.core.codec import decode_fields, decode_value, encode_fields, encode_value
from firebase_rest.core.document import (
    CollectionIds,
    Document,
    DocumentBuilder,
    DocumentList,
    DocumentMask,
    Precondition,
)
from firebase_rest.core.errors import (
    AuthError,
    DatabaseAuthError,
    DecodeError,
    FirebaseError,
    FirestoreError,
    InvalidPathError,
    InvalidValueError,
    TransactionError,
    TypeMismatchError,
)
from firebase_rest.core.values import GeoPoint, Value, ValueKind
from firebase_rest.firebase_client import Firebase, FirebaseConfig
from firebase_rest.services.auth import FirebaseAuth, FirebaseUser
from firebase_rest.services.database import DatabaseReference, FirebaseDatabase
from firebase_rest.services.firestore import CollectionReference, DocumentReference, Firestore
from firebase_rest.services.transactions import Transaction, TransactionBuilder, TransactionMode, WriteAction

__version__ = "0.1.0"
