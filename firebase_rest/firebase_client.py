# firebase_client.py
import logging
import os
from dataclasses import dataclass
from typing import Optional

from firebase_rest.services.auth import FirebaseAuth
from firebase_rest.services.database import FirebaseDatabase
from firebase_rest.services.firestore import Firestore

logger = logging.getLogger(__name__)


# ============================================
# 1. FIREBASE WEB CONFIG
# ============================================
@dataclass(frozen=True)
class FirebaseConfig:
    project_id: str
    api_key: str
    database_url: Optional[str] = None
    timeout: float = 10

    def __post_init__(self):
        if not self.project_id:
            raise ValueError("Firebase project id is required")
        if not self.api_key:
            raise ValueError("Firebase API key is required")
        if not self.database_url:
            object.__setattr__(self, "database_url", f"https://{self.project_id}.firebaseio.com")

    @classmethod
    def from_mapping(cls, data) -> "FirebaseConfig":
        """Accepts the web ``firebaseConfig`` dict (apiKey, projectId, databaseURL) or snake_case keys."""
        def pick(*keys):
            for k in keys:
                if data.get(k):
                    return data[k]
            return None

        timeout = pick("timeout")
        return cls(
            project_id=pick("projectId", "project_id"),
            api_key=pick("apiKey", "api_key"),
            database_url=pick("databaseURL", "database_url"),
            timeout=float(timeout) if timeout else 10,
        )

    @classmethod
    def from_env(cls, environ=None) -> "FirebaseConfig":
        env = os.environ if environ is None else environ
        return cls(
            project_id=env.get("FIREBASE_PROJECT_ID", ""),
            api_key=env.get("FIREBASE_API_KEY", ""),
            database_url=env.get("FIREBASE_DATABASE_URL") or None,
            timeout=float(env.get("FIREBASE_TIMEOUT", 10)),
        )


# ============================================
# 2. SINGLE APP INSTANCE
# ============================================
class Firebase:
    """The one Firebase app in this process and its three sub-clients."""

    _instance = None

    def __init__(self, config: FirebaseConfig, session=None):
        self.config = config
        self.auth = FirebaseAuth(config.api_key, session=session, timeout=config.timeout)
        self.database = FirebaseDatabase(config.database_url, auth=self.auth, session=session, timeout=config.timeout)
        self.firestore = Firestore(config.project_id, auth=self.auth, session=session, timeout=config.timeout)

    @classmethod
    def initialize(cls, project_id, api_key, database_url=None, timeout=10, session=None) -> "Firebase":
        return cls.initialize_from_config(
            FirebaseConfig(project_id, api_key, database_url, timeout), session=session
        )

    @classmethod
    def initialize_from_config(cls, config: FirebaseConfig, session=None) -> "Firebase":
        """Create the app on first call; later calls return it unchanged."""
        if cls._instance is None:
            cls._instance = cls(config, session=session)
            logger.info("Initialized Firebase app for project %s", config.project_id)
        elif cls._instance.config != config:
            logger.warning("Firebase already initialized for %s; ignoring new config", cls._instance.config.project_id)
        return cls._instance

    @classmethod
    def get_instance(cls) -> "Optional[Firebase]":
        return cls._instance

    @classmethod
    def delete_instance(cls):
        cls._instance = None
