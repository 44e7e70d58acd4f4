"""
Handpicked Test Configuration

Shared fixtures and configuration for all tests.
"""

import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import AsyncGenerator, Generator
from unittest.mock import patch

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import handpicked.config
from handpicked.database.connection import get_db
from handpicked.database.models.base import Base
from handpicked.main import create_app


# ============ Database Fixtures ============


@pytest.fixture(scope="function")
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create a test database engine (in-memory SQLite)."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    session_factory = async_sessionmaker(engine, expire_on_commit=False, autoflush=False)
    async with session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


@pytest.fixture(scope="function")
async def db(db_session: AsyncSession) -> AsyncGenerator[AsyncSession, None]:
    """Alias for db_session."""
    yield db_session


# ============ FastAPI Test Client Fixtures ============


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """Create a test FastAPI application."""
    app = create_app()

    # Override the database dependency
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    return app


@pytest.fixture(scope="function")
async def async_client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


# ============ Temporary File Fixtures ============


@pytest.fixture(scope="function")
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(scope="function")
def temp_config_file(temp_dir: Path) -> Path:
    """Create a temporary config file."""
    config_file = temp_dir / "config.yaml"
    config_content = """
server:
  host: "127.0.0.1"
  port: 8421
  debug: true

database:
  url: "sqlite:///:memory:"

logging:
  level: "DEBUG"
  to_file: false

playback:
  disabling_error_codes: [100, 150]
"""
    config_file.write_text(config_content)
    return config_file


# ============ Time Fixtures ============


@pytest.fixture
def t0() -> datetime:
    """Loop anchor used by timeline tests."""
    return datetime(2024, 1, 1, 12, 0, 0)


# ============ Environment Fixtures ============


@pytest.fixture(autouse=True)
def clean_environment():
    """Clean environment variables and cached config for each test."""
    # Save current environment
    original_env = os.environ.copy()

    # Remove Handpicked-specific vars
    for key in list(os.environ.keys()):
        if key.startswith("HANDPICKED_"):
            del os.environ[key]

    handpicked.config._config = None

    yield

    handpicked.config._config = None

    # Restore original environment
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def mock_env_vars():
    """Set up mock environment variables."""
    env_vars = {
        "HANDPICKED_PORT": "8421",
        "HANDPICKED_DEBUG": "true",
        "HANDPICKED_DATABASE_URL": "sqlite:///:memory:",
        "HANDPICKED_LOG_LEVEL": "DEBUG",
    }
    with patch.dict(os.environ, env_vars):
        yield env_vars


# ============ Markers ============


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Integration tests")
