import os
os.environ["ENV_STATE"] = "test"

from typing import AsyncGenerator

import pytest
from httpx import ASGITransport, AsyncClient
from jose import jwt

from app.config import config
from app.db.database import database, engine
from app.db.metadata import metadata
import app.db  # registers every table on the shared metadata
from app.main import app
from app.tests.helpers import insert_category, insert_member



# Ensure tables are created before running tests
@pytest.fixture(scope="session", autouse=True)
def create_test_tables():
    metadata.create_all(engine)
    yield
    metadata.drop_all(engine)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(autouse=True)
async def db() -> AsyncGenerator:
    await database.connect()
    yield
    await database.disconnect()


@pytest.fixture(scope="session")
def auth_token():
    """Generate a valid JWT for test authentication."""
    payload = {
        "sub": "secretary@example.com",
        "userId": 1,
        "user_role": "RiskAssessmentsAdmin",
        "name": "Church Secretary",
    }
    return jwt.encode(payload, config.SECRET_KEY, algorithm=config.ALGORITHM)


@pytest.fixture
async def async_client(auth_token) -> AsyncGenerator[AsyncClient, None]:
    """Async client that automatically includes Authorization header."""
    # Unhandled errors must come back as 500 responses rather than be re-raised into the test
    transport = ASGITransport(app=app, raise_app_exceptions=False)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        ac.headers.update({
            "Authorization": f"Bearer {auth_token}",
            "Content-Type": "application/json",
        })
        yield ac


@pytest.fixture
async def category_id():
    return await insert_category()


@pytest.fixture
async def deacons():
    return [
        await insert_member("Alice", "Smith"),
        await insert_member("Bob", "Jones"),
        await insert_member("Carol", "White"),
    ]
