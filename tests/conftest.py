import pytest
from fastapi.testclient import TestClient

from app.core.config import Settings
from app.main import create_app
from storage.database import create_schema, open_engine
from storage.repository import Models


@pytest.fixture
def engine():
    engine = open_engine("sqlite://")
    create_schema(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def models(engine):
    return Models(engine)


@pytest.fixture
def client():
    app = create_app(Settings(database_url="sqlite://", environment="testing"))
    with TestClient(app) as client:
        yield client
