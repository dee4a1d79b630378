"""
Pytest configuration for shop service tests.

Points the service at a throwaway SQLite file before the application is
imported, and rebuilds the schema around every test.
"""
import os

os.environ["DATABASE_URL"] = "sqlite:///./test_shop.db"

import pytest
from fastapi.testclient import TestClient

from shop_platform.shop_service.main import app
from shop_platform.shop_service.db import Base, SessionLocal, engine
from shop_platform.shop_service.utils.mailer import Mailer, get_mailer


class FakeMailer(Mailer):
    """Keeps messages in memory instead of delivering them."""

    def __init__(self):
        super().__init__(sender="test@example.com")
        self.sent = []

    def send_email(self, to: str, subject: str, text: str) -> None:
        self.sent.append({"to": to, "subject": subject, "text": text})


@pytest.fixture(autouse=True)
def reset_database():
    # Drop all tables and recreate them before each test
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def mailer():
    fake = FakeMailer()
    app.dependency_overrides[get_mailer] = lambda: fake
    yield fake
    app.dependency_overrides.pop(get_mailer, None)


@pytest.fixture
def client(mailer):
    with TestClient(app) as c:
        yield c
