import pytest
import os
import tempfile
from datetime import datetime, timezone
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# The app reads these at import time
os.environ.setdefault("JWT_SECRET", "test-signing-key")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "gym_api_tests", "api.log"))

from gym_api.main import app
from gym_api.core.database import get_db
from gym_api.core.rate_limit import DailyRateLimiter
from gym_api.core.security import issue_token
from gym_api.models.orm import Base
from gym_api.models.token import SUPER_ADMIN, TRAINER, TokenPayload
from gym_api.src.init_users import ensure_admin, ensure_trainer

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "adminpass"
ADMIN_NAME = "Alex Admin"

TRAINER_EMAIL = "trainer@example.com"
TRAINER_PASSWORD = "trainerpass"
TRAINER_NAME = "Tom Trainer"

# 2026-10-19 10:00:00 UTC
START_OF_TEST_DAY = datetime(2026, 10, 19, 10, 0, tzinfo=timezone.utc).timestamp()


class FakeClock:
    """Settable replacement for time.time"""

    def __init__(self, now: float = START_OF_TEST_DAY):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def db_session():
    """
    Fresh in-memory SQLite database per test, wired into the app's get_db
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
        app.dependency_overrides.clear()
        engine.dispose()


@pytest.fixture
def accounts(db_session):
    """Seed one super-admin and one active trainer"""
    admin, _ = ensure_admin(db_session, ADMIN_EMAIL, ADMIN_PASSWORD, ADMIN_NAME)
    trainer, _ = ensure_trainer(db_session, TRAINER_EMAIL, TRAINER_PASSWORD, TRAINER_NAME)
    return {"admin": admin, "trainer": trainer}


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(accounts, clock):
    """Test client for FastAPI app, with a plan limiter driven by the fake clock"""
    app.state.rate_limiter = DailyRateLimiter(clock=clock)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_token(accounts):
    admin = accounts["admin"]
    return issue_token(TokenPayload(user_id=admin.id, email=admin.email, role=SUPER_ADMIN, name=admin.name))


@pytest.fixture
def trainer_token(accounts):
    trainer = accounts["trainer"]
    return issue_token(TokenPayload(user_id=trainer.id, email=trainer.email, role=TRAINER, name=trainer.name))


@pytest.fixture
def admin_headers(admin_token):
    return {"Authorization": f"Bearer {admin_token}"}


@pytest.fixture
def trainer_headers(trainer_token):
    return {"Authorization": f"Bearer {trainer_token}"}
