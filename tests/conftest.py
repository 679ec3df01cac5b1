import pytest
from fastapi.testclient import TestClient

from blueprint_service.api.main import create_app
from blueprint_service.db.database import SQLITE_MEMORY_URL, build_engine
from blueprint_service.db.repositories import BlueprintStore


# Fresh in-memory sqlite per test; StaticPool keeps the schema alive across sessions
@pytest.fixture
def engine():
    eng = build_engine(SQLITE_MEMORY_URL)
    try:
        yield eng
    finally:
        eng.dispose()


@pytest.fixture
def store(engine):
    return BlueprintStore(engine)


@pytest.fixture
def client(store):
    return TestClient(create_app(store=store))
