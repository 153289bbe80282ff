"""Pytest fixtures for testing"""

import pytest
from typing import Generator
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from card_portal.api.main import create_app
from card_portal.infrastructure.database.models import Base
from card_portal.infrastructure.database.repositories import SessionRepository
from card_portal.infrastructure.database.session import get_db
from card_portal.domain.models import PortalSession, UserProfile


# Test database
TEST_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(TEST_DATABASE_URL, connect_args={"check_same_thread": False})
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db() -> Generator[Session, None, None]:
    """Create test database and session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def client(db: Session) -> TestClient:
    """Create FastAPI test client with test database"""
    app = create_app()

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture
def customer_user() -> UserProfile:
    return UserProfile(id="2", username="alice", role="CUSTOMER", email="alice@cardhub.test", first_name="Alice")


@pytest.fixture
def admin_user() -> UserProfile:
    return UserProfile(id="1", username="admin", role="ADMIN", email="admin@cardhub.test")


@pytest.fixture
def customer_session(db: Session, customer_user: UserProfile) -> PortalSession:
    """Logged-in customer, stored the way /v1/auth/login stores it"""
    session = SessionRepository(db).create_session("token-customer", customer_user)
    db.commit()
    return session


@pytest.fixture
def admin_session(db: Session, admin_user: UserProfile) -> PortalSession:
    session = SessionRepository(db).create_session("token-admin", admin_user)
    db.commit()
    return session


@pytest.fixture
def customer_headers(customer_session: PortalSession) -> dict:
    return {"X-Session-ID": customer_session.session_id}


@pytest.fixture
def admin_headers(admin_session: PortalSession) -> dict:
    return {"X-Session-ID": admin_session.session_id}
