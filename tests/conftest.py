import pytest
import os
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set env before importing app components
os.environ["APP_ENV"] = "testing"
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["RATE_LIMIT_ENABLED"] = "false"

from app.database import Base, get_db
from app.main import app
from fastapi.testclient import TestClient

# SQLite in-memory database configuration
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "Password123!"


@pytest.fixture(scope="session", autouse=True)
def setup_database():
    """Create tables once for the whole test session."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db_connection():
    """A connection wrapped in a transaction that is rolled back after the test."""
    connection = engine.connect()
    transaction = connection.begin()
    yield connection
    transaction.rollback()
    connection.close()


@pytest.fixture(scope="function")
def session_factory(db_connection):
    return lambda: TestingSessionLocal(bind=db_connection)


@pytest.fixture(scope="function")
def db_session(session_factory):
    """Get a clean database session for each test function with rollback safety."""
    session = session_factory()
    yield session
    session.close()


@pytest.fixture(scope="function")
def stores(db_session):
    """Paris (1) and Lyon (2) stores."""
    from app.models.store import Store

    paris = Store(id="1", name="Paris Store", location="Paris")
    lyon = Store(id="2", name="Lyon Store", location="Lyon")
    db_session.add_all([paris, lyon])
    db_session.commit()
    return {"paris": paris, "lyon": lyon}


def _make_user(db_session, user_id, name, email, role, store_id=None, is_active=True):
    from app.models.user import User
    from app.services import auth as auth_service

    user = User(
        id=user_id,
        name=name,
        email=email,
        hashed_password=auth_service.get_password_hash(PASSWORD),
        role=role,
        store_id=store_id,
        is_active=is_active,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope="function")
def admin_user(db_session, stores):
    from app.models.user import UserRole
    return _make_user(db_session, "1", "Admin", "admin@example.com", UserRole.ADMIN)


@pytest.fixture(scope="function")
def paris_manager(db_session, stores):
    from app.models.user import UserRole
    return _make_user(db_session, "2", "Paris Manager", "paris@example.com", UserRole.MANAGER, "1")


@pytest.fixture(scope="function")
def employee(db_session, stores):
    from app.models.user import UserRole
    return _make_user(db_session, "4", "Employee 1", "emp1@example.com", UserRole.EMPLOYEE, "1")


@pytest.fixture(scope="function")
def lyon_employee(db_session, stores):
    from app.models.user import UserRole
    return _make_user(db_session, "6", "Employee 3", "emp3@example.com", UserRole.EMPLOYEE, "2")


@pytest.fixture(scope="function")
def auth_headers():
    """Helper fixture building bearer headers for a user."""
    from app.services import auth as auth_service

    def _auth_headers(user):
        token = auth_service.create_access_token(data=auth_service.token_claims(user))
        return {"Authorization": f"Bearer {token}"}
    return _auth_headers


@pytest.fixture(scope="function")
def client(db_session):
    """Get a TestClient that uses the test database session via dependency override."""
    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
