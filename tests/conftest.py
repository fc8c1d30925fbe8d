import pytest
from fastapi.testclient import TestClient

from doubles import InMemoryClient
from users_api.entrypoints.api import create_app
from users_api.services.config import Settings


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        _env_file=None,
        MONGO_URI="mongodb://localhost:27017",
        USERS_API_RETRY_ATTEMPTS=2,
        USERS_API_STORE_TIMEOUT=1.0,
        USERS_API_SERVER_SELECTION_TIMEOUT_MS=200,
    )


@pytest.fixture()
def mongo_client() -> InMemoryClient:
    return InMemoryClient()


@pytest.fixture()
def app(settings, mongo_client):
    return create_app(settings, client=mongo_client)


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
