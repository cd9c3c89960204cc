"""
Student registry - test configuration and fixtures
"""
import os
from collections.abc import AsyncGenerator, Generator

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ADMIN_EMAIL"] = "admin@college.edu"
os.environ["ADMIN_PASSWORD"] = "admin123"

from app.core.database import Base, get_db
from app.datastore.backends import FirestoreStudentBackend, RestStudentBackend
from app.datastore.records import BackendKind
from app.datastore.repository import StudentRepository
from app.datastore.selector import ActiveBackendSelector
from app.datastore.session import AdminSession
from app.datastore.state import ClientState
from app.main import app
from tests.fakes import FakeFirestoreClient, FakeProber

ADMIN_EMAIL = "admin@college.edu"
ADMIN_PASSWORD = "admin123"
TEST_API_URL = "http://test/api"

# One shared in-memory database for every connection
test_engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, class_=Session, expire_on_commit=False)


@pytest.fixture
def database() -> Generator[None, None, None]:
    """Fresh tables per test, wired into the app's get_db dependency"""
    Base.metadata.create_all(bind=test_engine)

    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    yield
    app.dependency_overrides.clear()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def asgi_transport(database) -> ASGITransport:
    return ASGITransport(app=app)


@pytest.fixture
async def client(asgi_transport) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client for the REST backend app"""
    async with AsyncClient(transport=asgi_transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def rest_backend(asgi_transport) -> RestStudentBackend:
    return RestStudentBackend(TEST_API_URL, transport=asgi_transport)


@pytest.fixture
def firestore_client() -> FakeFirestoreClient:
    return FakeFirestoreClient()


@pytest.fixture
def firestore_backend(firestore_client) -> FirestoreStudentBackend:
    return FirestoreStudentBackend(firestore_client)


@pytest.fixture
def state(tmp_path) -> ClientState:
    return ClientState(tmp_path / "state.json")


@pytest.fixture
def prober() -> FakeProber:
    return FakeProber(available=True)


@pytest.fixture
def selector(state, prober) -> ActiveBackendSelector:
    """Selector that accepts every switch prompt"""
    return ActiveBackendSelector(state, prober, confirm=lambda message: True)


@pytest.fixture
def repository(selector, firestore_backend, rest_backend) -> StudentRepository:
    return StudentRepository(
        selector,
        {BackendKind.FIRESTORE: firestore_backend, BackendKind.MONGO: rest_backend},
    )


@pytest.fixture
def admin_session(repository, state) -> AdminSession:
    return AdminSession(repository, state, timeout_minutes=30)


@pytest.fixture
def firestore_admin(firestore_client) -> dict:
    """Admin document in the Firestore admins collection"""
    admin = {"username": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    firestore_client.collection("admins").docs["admin1"] = dict(admin)
    return admin
