import pytest
from app.models.user import UserRole
from app.schemas.auth import UserProfile
from app.schemas.store import StoreOut
from app.services.auth import DatabaseIdentityProvider
from app.services.session import InMemoryKeyValueStore, JsonFileKeyValueStore, SessionManager

PASSWORD = "Password123!"

PARIS_EMPLOYEE = UserProfile(
    id="4", name="Employee 1", email="emp1@example.com", role=UserRole.EMPLOYEE,
    store_id="1", store=StoreOut(id="1", name="Paris Store", location="Paris"),
)


class StaticIdentity:
    def __init__(self, users):
        self.users = users

    def authenticate(self, email, password):
        user = self.users.get(email.lower())
        if user and password == "secret":
            return user
        return None


@pytest.fixture
def identity():
    return StaticIdentity({"emp1@example.com": PARIS_EMPLOYEE})


def test_login_persists_user(identity):
    storage = InMemoryKeyValueStore()
    session = SessionManager(identity, storage)
    assert not session.is_authenticated

    assert session.login("EMP1@example.com", "secret") is True
    assert session.current_user == PARIS_EMPLOYEE
    assert storage.get("user") is not None

    restored = SessionManager(identity, storage)
    assert restored.is_authenticated
    assert restored.current_user.store.name == "Paris Store"


def test_failed_login_stays_anonymous(identity):
    storage = InMemoryKeyValueStore()
    session = SessionManager(identity, storage)
    assert session.login("emp1@example.com", "wrong") is False
    assert session.current_user is None
    assert storage.get("user") is None


def test_logout_clears_persisted_session(identity):
    storage = InMemoryKeyValueStore()
    session = SessionManager(identity, storage)
    session.login("emp1@example.com", "secret")
    session.logout()
    assert not session.is_authenticated
    assert storage.get("user") is None
    assert not SessionManager(identity, storage).is_authenticated


def test_corrupt_entry_is_dropped(identity):
    storage = InMemoryKeyValueStore()
    storage.set("user", "{not json")
    session = SessionManager(identity, storage)
    assert not session.is_authenticated
    assert storage.get("user") is None


def test_json_file_store_survives_reopen(identity, tmp_path):
    path = tmp_path / "session.json"
    session = SessionManager(identity, JsonFileKeyValueStore(path))
    session.login("emp1@example.com", "secret")

    reopened = SessionManager(identity, JsonFileKeyValueStore(path))
    assert reopened.current_user.id == "4"

    reopened.logout()
    assert JsonFileKeyValueStore(path).get("user") is None


def test_unreadable_session_file_starts_empty(tmp_path):
    path = tmp_path / "session.json"
    path.write_text("garbage", encoding="utf-8")
    assert JsonFileKeyValueStore(path).get("user") is None


def test_database_identity_provider(session_factory, employee):
    provider = DatabaseIdentityProvider(session_factory)
    user = provider.authenticate("Emp1@Example.com", PASSWORD)
    assert user is not None
    assert user.id == "4"
    assert user.role == UserRole.EMPLOYEE
    assert user.store.name == "Paris Store"
    assert provider.authenticate("emp1@example.com", "nope") is None
    assert provider.authenticate("nobody@example.com", PASSWORD) is None


def test_default_storage_follows_session_file(identity, tmp_path, monkeypatch):
    from app.core.config import settings
    from app.services.session import default_session_storage

    monkeypatch.setattr(settings, "session_file", None)
    assert isinstance(default_session_storage(), InMemoryKeyValueStore)

    path = tmp_path / "session.json"
    monkeypatch.setattr(settings, "session_file", str(path))
    assert isinstance(default_session_storage(), JsonFileKeyValueStore)

    session = SessionManager(identity)
    session.login("emp1@example.com", "secret")
    assert path.exists()
    assert SessionManager(identity).current_user.id == "4"
