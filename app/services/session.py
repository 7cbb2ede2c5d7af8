"""
Client-side session state: anonymous -> authenticated -> anonymous.

The authenticated user is persisted in a key-value store under a fixed key so
that a new SessionManager over the same store picks the session back up.
"""
import json
import logging
from pathlib import Path
from typing import Dict, Optional, Protocol, Union

from pydantic import ValidationError

from app.core.config import settings
from app.schemas.auth import UserProfile

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> None:
        ...

    def delete(self, key: str) -> None:
        ...


class IdentityProvider(Protocol):
    def authenticate(self, email: str, password: str) -> Optional[UserProfile]:
        ...


class InMemoryKeyValueStore:
    def __init__(self):
        self._data: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """Durable store: one JSON object on disk, rewritten on every change."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Session file {self.path} unreadable, starting empty: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def get(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._save(data)


class SessionManager:
    def __init__(self, identity: IdentityProvider, storage: Optional[KeyValueStore] = None, key: str = settings.session_key):
        self.identity = identity
        self.storage = storage if storage is not None else default_session_storage()
        self.key = key
        self.current_user: Optional[UserProfile] = None
        self._restore()

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def _restore(self) -> None:
        raw = self.storage.get(self.key)
        if raw is None:
            return
        try:
            self.current_user = UserProfile.model_validate_json(raw)
        except ValidationError:
            logger.error("Failed to parse stored user, clearing session")
            self.storage.delete(self.key)

    def login(self, email: str, password: str) -> bool:
        user = self.identity.authenticate(email, password)
        if user is None:
            logger.info("Login rejected", extra={"email": email})
            return False
        self.current_user = user
        self.storage.set(self.key, user.model_dump_json())
        return True

    def logout(self) -> None:
        self.current_user = None
        self.storage.delete(self.key)


def default_session_storage() -> KeyValueStore:
    """JSON file when SESSION_FILE is configured, process memory otherwise."""
    if settings.session_file:
        return JsonFileKeyValueStore(settings.session_file)
    return InMemoryKeyValueStore()
