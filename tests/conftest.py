"""
Pytest configuration and fixtures for Inkwell API tests.
"""
import os

# Keep the application engine off the filesystem during tests
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from inkwell.auth import create_access_token, get_password_hash
from inkwell.database import Base, get_db
from inkwell.events import ALL_EVENTS, EventBus
from inkwell.limiter import limiter
from inkwell.main import app
from inkwell.models.post import Post, PostStatus
from inkwell.models.user import User
from inkwell.services.approvals import ApprovalService

# Disable rate limiting for tests
limiter.enabled = False

# Use in-memory SQLite for tests with shared connection
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Global session for sharing across requests
_test_session = None


def get_test_db():
    """Get the shared test database session."""
    yield _test_session


def make_user(db, email, role="author", password="testpassword123", display_name=None):
    user = User(
        email=email,
        hashed_password=get_password_hash(password),
        display_name=display_name or email.split("@")[0],
        role=role,
        is_active=True,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def make_post(db, author, title="Draft post", slug=None):
    post = Post(
        author_id=author.id,
        title=title,
        slug=slug or title.lower().replace(" ", "-"),
        content=f"{title} body",
        status=PostStatus.DRAFT.value,
        published=False,
    )
    db.add(post)
    db.commit()
    db.refresh(post)
    return post


def headers_for(user):
    token = create_access_token({"sub": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture(scope="function")
def db():
    """Create a fresh database for each test."""
    global _test_session

    Base.metadata.create_all(bind=engine)
    _test_session = TestingSessionLocal()
    app.dependency_overrides[get_db] = get_test_db

    yield _test_session

    app.dependency_overrides.clear()
    _test_session.close()
    _test_session = None
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db):
    """Create a test client."""
    with TestClient(app) as c:
        yield c


@pytest.fixture(scope="function")
def test_user(db):
    """An author account."""
    return make_user(db, "test@example.com", display_name="Test User")


@pytest.fixture(scope="function")
def other_user(db):
    """A second author who owns nothing in the default fixtures."""
    return make_user(db, "other@example.com", display_name="Other User")


@pytest.fixture(scope="function")
def admin_user(db):
    """A privileged reviewer."""
    return make_user(db, "admin@example.com", role="admin", display_name="Admin")


@pytest.fixture(scope="function")
def test_post(db, test_user):
    """An unpublished draft owned by ``test_user``."""
    return make_post(db, test_user, title="First draft")


@pytest.fixture(scope="function")
def auth_headers(test_user):
    return headers_for(test_user)


@pytest.fixture(scope="function")
def admin_headers(admin_user):
    return headers_for(admin_user)


@pytest.fixture(scope="function")
def other_headers(other_user):
    return headers_for(other_user)


@pytest.fixture(scope="function")
def recorded_events():
    """An event bus that remembers everything emitted on it."""
    bus = EventBus()
    events = []
    bus.subscribe(ALL_EVENTS, events.append)
    bus.events = events
    return bus


@pytest.fixture(scope="function")
def service(db, recorded_events):
    return ApprovalService(db, recorded_events)


@pytest.fixture(scope="function")
def user_factory(db):
    return lambda email, role="author": make_user(db, email, role=role)


@pytest.fixture(scope="function")
def post_factory(db):
    return lambda author, title, slug=None: make_post(db, author, title=title, slug=slug)


@pytest.fixture(scope="function")
def headers_factory():
    return headers_for
