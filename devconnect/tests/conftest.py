from typing import AsyncGenerator, Callable
import os

# Force test configuration for all imports
os.environ.setdefault("ENV", "test")

import pytest
from httpx import AsyncClient, ASGITransport

from devconnect import security
from devconnect.db import SessionLocal, post_table, profile_table
from devconnect.main import app

@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"

@pytest.fixture()
async def db(request) -> AsyncGenerator:
    """
    DB fixture for integration/API tests. Opt-in via @pytest.mark.usefixtures("db")
    or module-level pytestmark. Skipped for pure unit tests.
    """
    if request.node.get_closest_marker("no_db"):
        yield
        return
    with SessionLocal() as session:
        session.execute(post_table.delete())
        session.execute(profile_table.delete())
        session.commit()
    yield

@pytest.fixture()
async def async_client() -> AsyncGenerator:
    """A client for making asynchronous requests to the app."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver", timeout=5.0) as ac:
        yield ac

@pytest.fixture()
def make_profile() -> Callable[[str], None]:
    def _make_profile(user_id: str) -> None:
        with SessionLocal() as session:
            session.execute(profile_table.insert().values(user_id=user_id, handle=f"handle-{user_id}"))
            session.commit()

    return _make_profile

@pytest.fixture()
def auth_headers() -> Callable[[str], dict]:
    def _auth_headers(user_id: str) -> dict:
        return {"Authorization": f"Bearer {security.create_access_token(user_id)}"}

    return _auth_headers
