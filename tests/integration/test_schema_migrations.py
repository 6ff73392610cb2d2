"""Integration tests for schema creation and migrations."""

from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine

from rpeconomy.config import get_settings
from rpeconomy.database import check_database_health, get_table_names, init_db
from rpeconomy.models import Base

EXPECTED_TABLES = {
    "bank_accounts",
    "government_policies",
    "governments",
    "interest_accruals",
    "jobs",
    "players",
    "transactions",
}


@pytest.fixture(scope="module")
def project_root():
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def test_init_db_creates_every_table(engine):
    init_db(engine)

    assert EXPECTED_TABLES <= set(get_table_names(engine))
    assert check_database_health(engine)


def test_health_check_reports_unreachable_database(tmp_path):
    engine = create_engine(f"sqlite:///{tmp_path / 'missing' / 'nowhere.db'}")
    try:
        assert check_database_health(engine) is False
    finally:
        engine.dispose()


def test_migrations_match_models(project_root, tmp_path, monkeypatch):
    db_url = f"sqlite:///{tmp_path / 'migrated.db'}"
    monkeypatch.setenv("RPECONOMY_DATABASE_URL", db_url)
    get_settings.cache_clear()
    try:
        command.upgrade(Config(str(project_root / "alembic.ini")), "head")
    finally:
        get_settings.cache_clear()

    engine = create_engine(db_url)
    try:
        assert set(get_table_names(engine)) - {"alembic_version"} == set(Base.metadata.tables)
    finally:
        engine.dispose()
