"""Player provisioning.

Creating a player also provisions its personal chequing, savings and
investing accounts in the same transaction, so a player never exists
without them.
"""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from rpeconomy.config import Settings, get_settings
from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.enums import AccountType
from rpeconomy.domain.errors import InvalidAmount, JobNotFound
from rpeconomy.models import Job, Player
from rpeconomy.services.account_ledger import AccountLedger

logger = logging.getLogger(__name__)


class PlayerService:
    """Service creating and reading players."""

    def __init__(self, session: Session, ledger: AccountLedger, settings: Settings | None = None):
        self.session = session
        self.ledger = ledger
        self.settings = settings or get_settings()

    def create_player(
        self,
        first_name: str,
        last_name: str,
        *,
        cash: int | None = None,
        job_id: int | None = None,
        attributes: dict[str, Any] | None = None,
    ) -> Player:
        """Create a player with its personal accounts.

        Args:
            first_name: Given name
            last_name: Family name
            cash: Starting cash; defaults to ``Settings.default_player_cash``
            job_id: Optional job to assign immediately
            attributes: Cosmetic attributes stored as-is

        Raises:
            InvalidAmount: If cash is negative or not a whole number
            JobNotFound: If job_id does not exist
            PolicyMissing: If no policy exists to snapshot account rates from
        """
        cash = self.settings.default_player_cash if cash is None else cash
        if not isinstance(cash, int) or isinstance(cash, bool) or cash < 0:
            raise InvalidAmount("Starting cash must be a non-negative whole number")

        with atomic(self.session):
            if job_id is not None and self.session.get(Job, job_id) is None:
                raise JobNotFound()
            player = Player(
                first_name=first_name,
                last_name=last_name,
                attributes=dict(attributes or {}),
                job_id=job_id,
                cash=cash,
                bank=0,
            )
            self.session.add(player)
            self.session.flush()
            self.ledger.provision_accounts(player.id, AccountType.PERSONAL)
            self.ledger.recompute_owner_cached_balance(player.id)

        logger.info("created player %s (%s %s)", player.id, first_name, last_name)
        return player

    def get_player(self, player_id: str) -> Player:
        return self.ledger.get_player(player_id)

    def list_players(self, *, include_system: bool = False) -> list[Player]:
        stmt = select(Player).order_by(Player.created_at, Player.id)
        if not include_system:
            stmt = stmt.where(Player.is_system.is_(False))
        with storage_errors():
            return list(self.session.execute(stmt).scalars())
