# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from src.config.settings import Settings
from src.database.database import Base
from src.database import models  # noqa: F401  registers the tables


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite metadata store per test."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def settings() -> Settings:
    return Settings(metadata_url="sqlite://", clone_disk_extension=".disk", _env_file=None)
