"""
Pytest Configuration and Fixtures

Shared fixtures for the DoctorPath test suite. The environment is pinned
before the application is imported: an in-memory SQLite database, no demo
seed, no Gemini key and a throw-away upload directory.
"""
import os
import tempfile

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SEED_DEMO_DATA"] = "false"
os.environ["GEMINI_API_KEY"] = ""
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="doctorpath-uploads-")
os.environ["LOG_LEVEL"] = "WARNING"

from types import SimpleNamespace
from unittest.mock import AsyncMock, Mock

import pytest
from langchain_core.messages import AIMessage

from doctorpath.core.llm import GeminiClient, GeminiConfig, OncologyAssistant
from doctorpath.db.models import Base
from doctorpath.db.session import SessionLocal, engine
from doctorpath.db.storage import Storage
from doctorpath.services.auth import hash_password

# bcrypt is slow on purpose; hash the shared test password once.
TEST_PASSWORD = "secret123"
_TEST_PASSWORD_HASH = hash_password(TEST_PASSWORD)


@pytest.fixture
def db_session():
    """Fresh schema per test."""
    Base.metadata.create_all(bind=engine)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def storage(db_session) -> Storage:
    return Storage(db_session)


@pytest.fixture
def make_patient(storage):
    """Factory: create a patient account, returns the Patient row."""
    def _make(name: str = "Test Patient", email: str = "patient@example.com", **profile):
        user = storage.create_user(
            email=email, password_hash=_TEST_PASSWORD_HASH, name=name, role="patient",
        )
        return storage.create_patient(user_id=user.id, **profile)
    return _make


@pytest.fixture
def make_doctor(storage):
    """Factory: create a doctor account, returns the Doctor row."""
    def _make(name: str = "Dr. Test", email: str = "doctor@example.com", **profile):
        user = storage.create_user(
            email=email, password_hash=_TEST_PASSWORD_HASH, name=name, role="doctor",
        )
        return storage.create_doctor(user_id=user.id, **profile)
    return _make


@pytest.fixture
def fake_llm():
    """LangChain-shaped chat model whose replies are set per test."""
    llm = Mock()
    llm.ainvoke = AsyncMock(return_value=AIMessage(content=""))
    llm.invoke = Mock(return_value=AIMessage(content=""))
    return llm


@pytest.fixture
def available_assistant(fake_llm) -> OncologyAssistant:
    client = GeminiClient(GeminiConfig(api_key=None), llm=fake_llm)
    return OncologyAssistant(client)


@pytest.fixture
def unavailable_assistant() -> OncologyAssistant:
    return OncologyAssistant(GeminiClient(GeminiConfig(api_key=None)))


def request_row(doctor_id: int, patient_id: int, status: str) -> SimpleNamespace:
    """Stand-in for a DoctorRequest row in pure-logic tests."""
    return SimpleNamespace(doctor_id=doctor_id, patient_id=patient_id, status=status)


@pytest.fixture
def make_request_row():
    return request_row


@pytest.fixture
def password() -> str:
    """Plain-text password of every account made by the factories."""
    return TEST_PASSWORD
