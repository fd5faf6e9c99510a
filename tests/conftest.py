"""
Shared fixtures: a throwaway SQLite database per test and cheap bcrypt settings.
"""

import os

# config.settings builds the process settings at import time.
os.environ.setdefault("JWT_SECRET", "test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from auth.jwt import TokenIssuer
from auth.service import SessionIssuer
from auth.store import CredentialStore
from config.settings import Settings
from database.session import build_engine, build_session_factory, create_tables
from main import create_app

HASH_ROUNDS = 4
HASH_LAYERS = 3


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        jwt_secret="test-secret",
        jwt_expiry_seconds=3600,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'students.db'}",
        password_hash_rounds=HASH_ROUNDS,
        password_hash_layers=HASH_LAYERS,
    )


@pytest_asyncio.fixture
async def db_session(settings):
    engine = build_engine(settings.database_url)
    await create_tables(engine)
    factory = build_session_factory(engine)
    async with factory() as session:
        yield session
    await engine.dispose()


@pytest.fixture
def store(db_session) -> CredentialStore:
    return CredentialStore(db_session, hash_rounds=HASH_ROUNDS, hash_layers=HASH_LAYERS)


@pytest.fixture
def tokens(settings) -> TokenIssuer:
    return TokenIssuer(settings.jwt_secret, settings.jwt_expiry_seconds)


@pytest.fixture
def issuer(store, tokens) -> SessionIssuer:
    return SessionIssuer(store, tokens)


@pytest.fixture
def client(settings):
    app = create_app(settings)
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client


def signup_payload(**overrides) -> dict:
    payload = {
        "fullName": "Ada Lovelace",
        "email": "ada@uni.edu",
        "institutionName": "Analytical University",
        "studentId": "S-1001",
        "department": "Mathematics",
        "course": "Computation",
        "password": "Abcd1234",
        "confirmPassword": "Abcd1234",
    }
    payload.update(overrides)
    return payload


def account_fields(**overrides) -> dict:
    fields = {
        "full_name": "Ada Lovelace",
        "email": "ada@uni.edu",
        "institution_name": "Analytical University",
        "student_id": "S-1001",
        "department": "Mathematics",
        "course": "Computation",
    }
    fields.update(overrides)
    return fields
