"""Government singleton bootstrap and treasury resolution.

The government is a ``governments`` row pointing at a synthetic player and
that player's business chequing account (the treasury). Everything else
resolves the treasury through this row; the configured well-known player id
is only used when bootstrap has to create the player.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from rpeconomy.config import Settings, get_settings
from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.enums import AccountSubType, AccountType, EntryMemo, EntryType
from rpeconomy.domain.errors import (
    GovernmentNotFound,
    StorageError,
    TransactionConflict,
    TreasuryNotFound,
)
from rpeconomy.models import Account, Government, Player
from rpeconomy.services.account_ledger import AccountLedger
from rpeconomy.services.policy_store import PolicyStore

logger = logging.getLogger(__name__)


class GovernmentService:
    """Service owning the government entity and its treasury account."""

    def __init__(
        self,
        session: Session,
        ledger: AccountLedger,
        policies: PolicyStore,
        settings: Settings | None = None,
    ):
        self.session = session
        self.ledger = ledger
        self.policies = policies
        self.settings = settings or get_settings()

    def find_government(self) -> Government | None:
        stmt = select(Government).order_by(Government.id).limit(1)
        with storage_errors():
            return self.session.execute(stmt).scalar_one_or_none()

    def get_government(self) -> Government:
        """Return the government row.

        Raises:
            GovernmentNotFound: If bootstrap has not run
        """
        government = self.find_government()
        if government is None:
            raise GovernmentNotFound()
        return government

    def find_treasury_account(self, *, lock: bool = False) -> Account | None:
        government = self.find_government()
        if government is None or government.account_id is None:
            return None
        stmt = select(Account).where(Account.id == government.account_id)
        if lock:
            stmt = stmt.with_for_update()
        with storage_errors():
            return self.session.execute(
                stmt.execution_options(populate_existing=True)
            ).scalar_one_or_none()

    def get_treasury_account(self) -> Account:
        """Return the treasury account.

        Raises:
            GovernmentNotFound: If bootstrap has not run
            TreasuryNotFound: If the government row has no usable account
        """
        self.get_government()
        account = self.find_treasury_account()
        if account is None:
            raise TreasuryNotFound()
        return account

    def ensure_government(self) -> Government:
        """Idempotently bootstrap the default policy and the government.

        Safe to call on every start. The check-then-create runs in one
        transaction and the ``governments.slot`` unique constraint rejects a
        concurrent duplicate; the loser of such a race re-reads and returns
        the winner's row.
        """
        self.policies.ensure_policy()

        existing = self.find_government()
        if existing is not None:
            return existing

        try:
            with atomic(self.session):
                government = self._create_government()
        except (TransactionConflict, StorageError):
            existing = self.find_government()
            if existing is None:
                raise
            logger.info("government created concurrently; using row %s", existing.id)
            return existing

        logger.info(
            "bootstrapped government '%s' with treasury %s (opening balance %s)",
            government.name,
            government.account_id,
            self.settings.treasury_opening_balance,
        )
        return government

    def _create_government(self) -> Government:
        player = self.session.get(Player, self.settings.government_player_id)
        if player is None:
            player = Player(
                id=self.settings.government_player_id,
                first_name="Government",
                last_name="Entity",
                attributes={},
                cash=0,
                bank=0,
                is_system=True,
            )
            self.session.add(player)
            self.session.flush()

        treasury = self.ledger.find_account(
            player.id, AccountSubType.CHEQUING, AccountType.BUSINESS
        )
        if treasury is None:
            (treasury,) = self.ledger.provision_accounts(player.id, AccountType.BUSINESS)
            opening = self.settings.treasury_opening_balance
            if opening > 0:
                self.ledger.mutate_balance(treasury.id, opening)
                self.ledger.append_ledger_entry(
                    player.id,
                    treasury.id,
                    opening,
                    EntryType.DEPOSIT,
                    EntryMemo.TREASURY_SEED,
                )

        government = Government(
            name=self.settings.government_name,
            player_id=player.id,
            account_id=treasury.id,
        )
        self.session.add(government)
        self.ledger.recompute_owner_cached_balance(player.id)
        return government
