"""
Database engine configuration.

Builds the SQLAlchemy engine from environment configuration with a test
fallback (SQLite in-memory). No engine is created at import time: the API
factory, scripts and tests call ``create_engine_from_env`` (or
``build_engine``) once and inject the result into ``BlueprintStore``.
"""
import os
import sys

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

SQLITE_MEMORY_URL = "sqlite+pysqlite:///:memory:"


# Database connection URL
# Generate dynamically from individual components if DATABASE_URL is not provided
def get_database_url() -> str:
    # If DATABASE_URL is explicitly set, use it
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")

    # Otherwise, generate from individual components (all must be set)
    db_user = os.getenv("POSTGRES_USER")
    db_password = os.getenv("POSTGRES_PASSWORD")
    db_host = os.getenv("POSTGRES_HOST")
    db_port = os.getenv("POSTGRES_PORT")
    db_name = os.getenv("POSTGRES_DB")

    if not all([db_user, db_password, db_host, db_port, db_name]):
        missing = []
        if not db_user: missing.append("POSTGRES_USER")
        if not db_password: missing.append("POSTGRES_PASSWORD")
        if not db_host: missing.append("POSTGRES_HOST")
        if not db_port: missing.append("POSTGRES_PORT")
        if not db_name: missing.append("POSTGRES_DB")
        raise ValueError(f"Missing required database environment variables: {', '.join(missing)}")

    return f"postgresql://{db_user}:{db_password}@{db_host}:{db_port}/{db_name}"


def _is_pytest_runtime() -> bool:
    """Best-effort detection that we're executing under pytest.

    ``PYTEST_CURRENT_TEST`` is only set while an individual test is running,
    so also look for the pytest package in ``sys.modules``. ``PYTEST_RUNNING=1``
    forces detection on.
    """
    if os.getenv("PYTEST_RUNNING") == "1":  # explicit opt-in
        return True
    if "PYTEST_CURRENT_TEST" in os.environ:  # during an active test
        return True
    # During collection pytest is already imported
    if "pytest" in sys.modules:
        return True
    return False


def resolve_database_url() -> str:
    """Pick the URL the service should connect to.

    Override strategy:
    1. ``BLUEPRINTS_TEST_DB`` wins when set.
    2. Under pytest, without an explicit ``DATABASE_URL``, use in-memory sqlite.
    3. Otherwise ``get_database_url()`` (DATABASE_URL or POSTGRES_* parts).
    """
    explicit_test_db = os.getenv("BLUEPRINTS_TEST_DB")
    if explicit_test_db:
        return explicit_test_db
    if _is_pytest_runtime() and not os.getenv("DATABASE_URL"):
        return SQLITE_MEMORY_URL
    return get_database_url()


def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    # SQLite ignores REFERENCES ... ON DELETE CASCADE unless asked per connection
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, **kwargs) -> Engine:
    """Create an engine for ``url``.

    In-memory SQLite gets a ``StaticPool`` so the schema persists across
    connections, and every SQLite connection has foreign keys switched on.
    """
    if url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False})
        if ":memory:" in url:
            kwargs.setdefault("poolclass", StaticPool)
    else:
        kwargs.setdefault("pool_pre_ping", True)
    engine = create_engine(url, **kwargs)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


def create_engine_from_env() -> Engine:
    return build_engine(resolve_database_url())


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_append_attempts(default: int = 3) -> int:
    """Bound on append retries after a position index collision."""
    raw = os.getenv("BLUEPRINT_APPEND_ATTEMPTS")
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"BLUEPRINT_APPEND_ATTEMPTS must be an integer, got {raw!r}")
    if value < 1:
        raise ValueError("BLUEPRINT_APPEND_ATTEMPTS must be at least 1")
    return value
