import contextlib
import os
import tempfile

# Must be set before the settings module is imported
_test_db_dir = tempfile.mkdtemp(prefix="event_checker_tests_")
os.environ["DATABASE_URL"] = os.environ.get(
    "TEST_DATABASE_URL", f"sqlite+aiosqlite:///{_test_db_dir}/test.db"
)

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from event_checker.config.database import engine  # noqa: E402
from event_checker.main import app  # noqa: E402
from event_checker.models.base import BaseModel  # noqa: E402


@pytest_asyncio.fixture
async def db():
    """Create all tables for one test and drop them afterwards."""
    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(BaseModel.metadata.drop_all)
    # Pooled connections are bound to this test's event loop
    await engine.dispose()


@pytest_asyncio.fixture
async def client():
    """Create a test client."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def client_factory():
    """Build a test client with dependency overrides applied for its lifetime."""

    @contextlib.asynccontextmanager
    async def factory(overrides: dict | None = None):
        app.dependency_overrides.update(overrides or {})
        transport = ASGITransport(app=app)
        try:
            async with AsyncClient(transport=transport, base_url="http://test") as ac:
                yield ac
        finally:
            app.dependency_overrides.clear()

    return factory
