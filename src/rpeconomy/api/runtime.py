"""Runtime primitives backing the economy HTTP API."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from rpeconomy.config import Settings, get_settings
from rpeconomy.database import build_session_factory, create_db_engine, init_db
from rpeconomy.factory import create_government_service

logger = logging.getLogger(__name__)


class ApiState:
    """Engine, session factory and settings shared by the FastAPI layer."""

    def __init__(self, *, settings: Settings | None = None, engine: Engine | None = None) -> None:
        self.settings = settings or get_settings()
        self.engine = engine or create_db_engine(self.settings)
        self.session_factory: sessionmaker[Session] = build_session_factory(self.engine)

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Open a session for one request and close it afterwards."""
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()

    def bootstrap(self) -> None:
        """Create missing tables, the default policy and the government."""
        init_db(self.engine)
        with self.session() as session:
            government = create_government_service(session, self.settings).ensure_government()
            logger.info("economy ready; treasury account %s", government.account_id)

    async def shutdown(self) -> None:
        self.engine.dispose()


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    state = ApiState()
    if state.settings.bootstrap_on_startup:
        state.bootstrap()
    return state
