"""
Shared fixtures. Environment is pinned before the app is imported so
settings pick up a throwaway database and upload directory.
"""

import io
import os
import tempfile

_TEST_ROOT = tempfile.mkdtemp(prefix="sheet-analytics-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_TEST_ROOT}/test.db"
os.environ["UPLOAD_DIR"] = os.path.join(_TEST_ROOT, "uploads")
os.environ["AI_PROVIDER"] = "none"

import openpyxl
import pytest
from unittest.mock import Mock

from app.core.database import Base, SessionLocal, engine, init_db


@pytest.fixture(autouse=True)
def reset_database():
    """Fresh tables for every test"""
    Base.metadata.drop_all(bind=engine)
    init_db()
    yield


@pytest.fixture
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    """API client with the app lifespan running"""
    from fastapi.testclient import TestClient
    from app.main import app

    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def build_xlsx(rows) -> bytes:
    """Serialize rows into an .xlsx workbook"""
    workbook = openpyxl.Workbook()
    sheet = workbook.active
    for row in rows:
        sheet.append(list(row))
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes():
    return build_xlsx


def make_chat_client(content="- Sales peak in March"):
    """Mock chat client returning a fixed completion"""
    client = Mock()
    message = Mock()
    message.content = content
    client.chat.completions.create.return_value = Mock(choices=[Mock(message=message)])
    return client


@pytest.fixture
def chat_client():
    return make_chat_client()
