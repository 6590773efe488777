import os

# Settings are read from the environment, so pin them before the app is imported.
os.environ["ENV_NAME"] = "test"
os.environ["ADMIN_EMAILS"] = "admin@example.com,Second.Admin@Example.com"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["JWT_AUDIENCE"] = "authenticated"
os.environ["JWT_ISSUER"] = ""
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["REQUIRE_LOCATION"] = "true"
os.environ["QUESTIONS_DEFAULT_LIMIT"] = "20"

import time  # noqa: E402
from collections.abc import AsyncGenerator, Callable  # noqa: E402
from uuid import uuid4  # noqa: E402

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from jose import jwt  # noqa: E402
from sqlalchemy import text  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession  # noqa: E402

from app.database import dispose_db, get_engine, get_session_factory, init_db  # noqa: E402
from app.main import app  # noqa: E402
from app.models.response import Response  # noqa: E402
from app.models.submission import Submission  # noqa: E402
from app.schema_probe import probe_schema  # noqa: E402
from shared.database.postgres import Base  # noqa: E402

ADMIN_EMAIL = "admin@example.com"

# questions as created by revision 001, before the mode column existed
LEGACY_QUESTIONS_DDL = """
CREATE TABLE questions (
    question_id CHAR(32) NOT NULL PRIMARY KEY,
    title VARCHAR(255) NOT NULL,
    description TEXT,
    category VARCHAR(100),
    priority VARCHAR(10) NOT NULL,
    status VARCHAR(10) NOT NULL,
    created_by VARCHAR(100),
    created_at DATETIME NOT NULL,
    updated_at DATETIME NOT NULL
)
"""


def _sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'survey.db'}"


@pytest_asyncio.fixture
async def engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    init_db(_sqlite_url(tmp_path))
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    app.state.schema = await probe_schema(engine)
    yield engine
    await dispose_db()


@pytest_asyncio.fixture
async def legacy_engine(tmp_path) -> AsyncGenerator[AsyncEngine, None]:
    init_db(_sqlite_url(tmp_path))
    engine = get_engine()
    async with engine.begin() as conn:
        await conn.execute(text(LEGACY_QUESTIONS_DDL))
        await conn.run_sync(
            lambda sync_conn: Base.metadata.create_all(
                sync_conn, tables=[Submission.__table__, Response.__table__],
            )
        )
    app.state.schema = await probe_schema(engine)
    yield engine
    await dispose_db()


@pytest_asyncio.fixture
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def legacy_session(legacy_engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        yield session


@pytest_asyncio.fixture
async def async_client(engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest_asyncio.fixture
async def legacy_client(legacy_engine: AsyncEngine) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
def make_token() -> Callable[..., str]:
    def _make(email: str, *, secret: str = "test-secret", audience: str = "authenticated") -> str:
        claims = {
            "sub": str(uuid4()),
            "email": email,
            "aud": audience,
            "exp": int(time.time()) + 3600,
        }
        return jwt.encode(claims, secret, algorithm="HS256")

    return _make


@pytest.fixture
def admin_headers(make_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token(ADMIN_EMAIL)}"}


@pytest.fixture
def user_headers(make_token) -> dict[str, str]:
    return {"Authorization": f"Bearer {make_token('visitor@example.com')}"}
