"""Shared test fixtures for the review assistant test suite."""

import pytest
from fastapi.testclient import TestClient

from review_assistant.core import dependencies
from review_assistant.core.config import get_settings
from review_assistant.db.database import Database
from review_assistant.db.store import AnalysisStore, UserStore
from review_assistant.main import app

from tests.fakes import SAMPLE_REPO, FakeGitHub, FakeLLM


@pytest.fixture
def fake_github():
    return FakeGitHub(SAMPLE_REPO)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def database():
    db = Database("sqlite://")
    db.create_all()
    yield db
    db.dispose()


@pytest.fixture
def user_store(database):
    return UserStore(database, session_ttl_hours=24)


@pytest.fixture
def analysis_store(database):
    return AnalysisStore(database)


@pytest.fixture
def user(user_store):
    return user_store.upsert_user(
        github_id="1001",
        access_token="gho_test_token",
        name="Octo Cat",
        email="octo@example.com",
    )


@pytest.fixture
def client_factory_calls():
    return []


@pytest.fixture
def client(database, user_store, analysis_store, fake_github, fake_llm, client_factory_calls):
    """TestClient with every remote collaborator replaced by a fake."""

    def factory(access_token):
        client_factory_calls.append(access_token)
        return fake_github

    app.dependency_overrides[dependencies.get_database] = lambda: database
    app.dependency_overrides[dependencies.get_user_store] = lambda: user_store
    app.dependency_overrides[dependencies.get_analysis_store] = lambda: analysis_store
    app.dependency_overrides[dependencies.get_github_client_factory] = lambda: factory
    app.dependency_overrides[dependencies.get_llm_service] = lambda: fake_llm
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client, user, user_store):
    """TestClient carrying a valid session cookie for ``user``."""
    token = user_store.create_session(user.id)
    client.cookies.set(get_settings().session_cookie_name, token)
    return client
