import os

# Must be set before core.config is imported anywhere
os.environ.setdefault("MOMENTUM_BCRYPT_ROUNDS", "4")
os.environ.setdefault("MOMENTUM_JWT_SECRET_KEY", "momentum-test-secret")

from datetime import date
import mongomock
import pytest
from fastapi.testclient import TestClient
from data_layer.mongodb import connection
from utils.datetime_utils import format_calendar_day
from utils.security_utils import create_access_token


@pytest.fixture
def mongo():
    client = mongomock.MongoClient()
    connection.set_mongodb_client(client)
    yield client
    connection.set_mongodb_client(None)


@pytest.fixture
def api(mongo):
    from main import app
    return TestClient(app)


def auth_headers(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'user_id': user_id})}"}


@pytest.fixture
def alice():
    return auth_headers("user-alice")


@pytest.fixture
def bob():
    return auth_headers("user-bob")


@pytest.fixture
def today():
    return format_calendar_day(date.today())
