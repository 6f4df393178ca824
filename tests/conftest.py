from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("PYTEST_RUNNING", "true")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_URL", "")

from wordcloud_stage.api.v1 import dependencies as api_dependencies
from wordcloud_stage.core.settings import Settings
from wordcloud_stage.db.session import Base
from wordcloud_stage.db.session import get_db as app_get_session
from wordcloud_stage.main import app as fastapi_app
from wordcloud_stage.models import WordCloudSession
from wordcloud_stage.services import store
from wordcloud_stage.services.notifier import SummaryNotifier

TEST_DB_URL = "sqlite://"

_TEST_SETTINGS_INSTANCE = Settings()


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits occurred.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def notifier(app: FastAPI) -> Iterator[SummaryNotifier]:
    """Give each test its own in-process notifier."""
    instance = SummaryNotifier()
    app.dependency_overrides[api_dependencies.get_notifier_dep] = lambda: instance
    try:
        yield instance
    finally:
        app.dependency_overrides.pop(api_dependencies.get_notifier_dep, None)


@pytest.fixture()
def client(app: FastAPI, notifier: SummaryNotifier) -> Iterator[TestClient]:
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """Provide a Settings instance aligned with runtime configuration."""
    return _TEST_SETTINGS_INSTANCE


@pytest.fixture()
def make_session(db_session: Session) -> Callable[..., WordCloudSession]:
    """Return a factory that stores sessions with optional overrides."""

    def _make(**overrides: Any) -> WordCloudSession:
        values: dict[str, Any] = {"question": "Describe your cat in one word"}
        values.update(overrides)
        status = values.pop("status", None)
        session = store.create_session(db_session, values)
        if status is not None:
            session = store.set_status(db_session, session.id, status)
        return session

    return _make


@pytest.fixture()
def live_session(make_session: Callable[..., WordCloudSession]) -> WordCloudSession:
    """A live session with the default quota of three attempts."""
    return make_session(status="live")


@pytest.fixture()
def grouped_session(make_session: Callable[..., WordCloudSession]) -> WordCloudSession:
    """A live session that merges near-duplicates by cluster key."""
    return make_session(status="live", grouping_enabled=True, max_entries_per_user=10)
