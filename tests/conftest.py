import os

# Settings are read at import time, so the test environment goes first
os.environ.setdefault("ENV", "testing")
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("ADMIN_REGISTRATION_CODE", "bake-admin-2024")
os.environ.setdefault("MAIL_USERNAME", "shop@example.com")
os.environ.setdefault("MAIL_PASSWORD", "mail-password")
os.environ.setdefault("MAIL_FROM", "shop@example.com")
os.environ.setdefault("MAIL_SERVER", "smtp.example.com")
os.environ.setdefault("MAIL_PORT", "587")
os.environ.setdefault("ADMIN_EMAIL", "owner@example.com")
os.environ.setdefault("PASSWORD_HASH_ROUNDS", "4")
os.environ.setdefault("LOG_DIR", "logs")

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from typing import Generator

from main import app
from core.config import settings
from core.database import Base
from models.products import Product
from models.users import User
from services.email_service import EmailService
from utils.deps import get_db, get_email_service
from utils.hashing import get_password_hash

# SYNC SQLite for testing (matches sync service layer)
SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False}
)


@event.listens_for(engine, "connect")
def set_sqlite_pragma(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


TestingSessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)

TEST_PASSWORD = "TestPassword123"


class RecordingEmailService(EmailService):
    """EmailService in testing mode that can be told to fail like a broken SMTP server."""

    def __init__(self):
        super().__init__(settings)
        self.fail = False

    def send(self, to, subject, html, text=None):
        if self.fail:
            return False
        return super().send(to, subject, html, text)

    def sent_to(self, address: str) -> list[dict]:
        return [message for message in self.outbox if message["to"] == address]


@pytest.fixture
def session() -> Generator[Session, None, None]:
    """
    Creates a fresh, empty database for each test.
    Uses SYNC SQLAlchemy to match the service layer.
    """
    Base.metadata.create_all(bind=engine)

    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def session_factory():
    """Opens extra sessions on the test database, e.g. to play a concurrent request."""
    return TestingSessionLocal


@pytest.fixture
def mailer() -> RecordingEmailService:
    return RecordingEmailService()


@pytest.fixture
async def client(session: Session, mailer: RecordingEmailService):
    """
    Yields an HTTP client that interacts with the app using the test database.
    The client is async (for FastAPI), but the DB session is sync.
    """
    def override_get_db():
        try:
            yield session
        finally:
            pass  # Session cleanup handled by session fixture

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_email_service] = lambda: mailer

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
async def admin_client(client, admin_user):
    """A second client, signed in as the admin, sharing the overrides of ``client``."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test"
    ) as ac:
        await login(ac, admin_user.username)
        yield ac


def make_user(session: Session, username: str, email: str, **fields) -> User:
    user = User(
        username=username,
        email=email,
        password=get_password_hash(fields.pop("password", TEST_PASSWORD)),
        full_name=fields.pop("full_name", "Test User"),
        phone=fields.pop("phone", "+254712345678"),
        **fields
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


async def login(client: AsyncClient, username: str, password: str = TEST_PASSWORD):
    response = await client.post("/api/login", json={"username": username, "password": password})
    assert response.status_code == 200, response.text
    return response


@pytest.fixture
def verified_user(session: Session) -> User:
    return make_user(session, "testuser", "test@example.com", is_verified=True)


@pytest.fixture
def unverified_user(session: Session) -> User:
    return make_user(session, "newbie", "newbie@example.com", is_verified=False)


@pytest.fixture
def admin_user(session: Session) -> User:
    return make_user(session, "admin", "admin@example.com", is_verified=True, is_admin=True)


@pytest.fixture
async def logged_in_client(client, verified_user):
    await login(client, verified_user.username)
    return client


@pytest.fixture
def products(session: Session) -> list[Product]:
    items = [
        Product(name="Chocolate Cake", slug="chocolate-cake", description="Rich and moist",
                price=250000, image_url="/img/choc.jpg", featured=True),
        Product(name="Vanilla Cupcake", slug="vanilla-cupcake", description="Six per box",
                price=60000, image_url="/img/vanilla.jpg"),
    ]
    session.add_all(items)
    session.commit()
    for item in items:
        session.refresh(item)
    return items


@pytest.fixture
def user_factory(session: Session):
    def _make(username: str, email: str, **fields) -> User:
        return make_user(session, username, email, **fields)
    return _make


@pytest.fixture
def login_as():
    return login
