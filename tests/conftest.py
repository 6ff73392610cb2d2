"""Pytest configuration and shared ledger fixtures.

This adds the `src/` directory to `sys.path` so tests can import the
`rpeconomy` package without requiring an editable install in CI, and
provides an in-memory SQLite database with the government bootstrapped.
"""

import sys
from pathlib import Path

import pytest

SRC_PATH = Path(__file__).resolve().parents[1] / "src"
if str(SRC_PATH) not in sys.path:
    sys.path.insert(0, str(SRC_PATH))

from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from rpeconomy.config import Settings  # noqa: E402
from rpeconomy.database import build_session_factory, configure_sqlite_engine  # noqa: E402
from rpeconomy.domain.enums import AccountSubType  # noqa: E402
from rpeconomy.factory import create_all_services  # noqa: E402
from rpeconomy.models import Base  # noqa: E402


def make_memory_engine():
    """One shared in-memory SQLite connection with the full schema."""
    engine = create_engine(
        "sqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    configure_sqlite_engine(engine)
    Base.metadata.create_all(engine)
    return engine


@pytest.fixture
def engine():
    """Create an in-memory SQLite engine for testing and dispose it after use."""
    engine = make_memory_engine()
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def session(engine):
    """Create a new database session for a test."""
    session = build_session_factory(engine)()
    yield session
    session.close()


@pytest.fixture
def settings():
    return Settings(
        database_url="sqlite://",
        bootstrap_on_startup=False,
        treasury_opening_balance=1_000_000,
        default_player_cash=500,
    )


@pytest.fixture
def services(session, settings):
    return create_all_services(session, settings)


@pytest.fixture
def government(services):
    """Bootstrap the default policy, government player and treasury."""
    return services["government"].ensure_government()


@pytest.fixture
def player(services, government):  # noqa: ARG001
    """A player holding 500 cash with empty personal accounts."""
    return services["players"].create_player("Ada", "Lovelace", cash=500)


@pytest.fixture
def accounts(services, player):
    """The player's personal accounts keyed by sub type."""
    ledger = services["ledger"]
    return {sub_type: ledger.find_account(player.id, sub_type) for sub_type in AccountSubType}
