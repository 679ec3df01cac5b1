import os

import pytest

from blueprint_service.db import models
from blueprint_service.db.database import build_engine
from blueprint_service.db.repositories import BlueprintStore
from postgres_support import start_postgres


# Session-wide Postgres test container; skipped when Docker is not reachable
@pytest.fixture(scope="session")
def _test_postgres():
    container = start_postgres(os.getenv("TEST_POSTGRES_IMAGE", "postgres:16-alpine"))
    try:
        yield container.get_connection_url()
    finally:
        container.stop()


@pytest.fixture
def pg_engine(_test_postgres):
    engine = build_engine(_test_postgres, pool_size=10, max_overflow=10)
    models.Base.metadata.drop_all(bind=engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def pg_store(pg_engine):
    return BlueprintStore(pg_engine)
