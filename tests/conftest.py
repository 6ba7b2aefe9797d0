import pytest
from fastapi.testclient import TestClient

from api.config import Settings
from api.dependencies import get_db
from api.main import create_app
from fakes import STORAGE_PREFIX, FakeDatabaseManager


@pytest.fixture
def db():
    return FakeDatabaseManager()


@pytest.fixture
def client(db):
    settings = Settings(
        database_url="postgresql://test@localhost/test",
        object_storage_public_prefix=STORAGE_PREFIX,
    )
    app = create_app(settings, use_lifespan=False)
    app.dependency_overrides[get_db] = lambda: db
    with TestClient(app) as c:
        yield c
