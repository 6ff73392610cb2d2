"""Account Ledger for the economy.

This module owns the balance-mutation primitives and the append-only
transaction log. The primitives never commit: callers wrap them in
``rpeconomy.database.atomic`` so every read-check-write step and every log
append of one operation land in a single storage transaction.
"""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.enums import AccountSubType, AccountType, EntryType
from rpeconomy.domain.errors import (
    AccountNotFound,
    AccountsAlreadyExist,
    InsufficientCash,
    InsufficientFunds,
    PlayerNotFound,
    TransactionNotFound,
)
from rpeconomy.interfaces import IPolicyStore
from rpeconomy.models import Account, LedgerEntry, Player

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 500


class AccountLedger:
    """Primitive balance mutation, account provisioning and log queries."""

    def __init__(self, session: Session, policies: IPolicyStore):
        self.session = session
        self.policies = policies

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def get_player(self, player_id: str, *, lock: bool = False) -> Player:
        """Load a player, optionally locking the row until commit.

        Raises:
            PlayerNotFound: If no such player exists
        """
        stmt = select(Player).where(Player.id == player_id)
        if lock:
            stmt = stmt.with_for_update()
        with storage_errors():
            player = self.session.execute(
                stmt.execution_options(populate_existing=True)
            ).scalar_one_or_none()
        if player is None:
            raise PlayerNotFound()
        return player

    def get_account(self, account_id: str, *, lock: bool = False) -> Account:
        """Load an account, optionally locking the row until commit.

        Raises:
            AccountNotFound: If no such account exists
        """
        stmt = select(Account).where(Account.id == account_id)
        if lock:
            stmt = stmt.with_for_update()
        with storage_errors():
            account = self.session.execute(
                stmt.execution_options(populate_existing=True)
            ).scalar_one_or_none()
        if account is None:
            raise AccountNotFound()
        return account

    def find_account(
        self,
        owner_id: str,
        sub_type: AccountSubType,
        account_type: AccountType = AccountType.PERSONAL,
        *,
        lock: bool = False,
    ) -> Account | None:
        """Return the owner's account of the given kind, if any.

        The (owner, type, sub_type) unique constraint guarantees at most one.
        """
        stmt = select(Account).where(
            Account.owner_id == owner_id,
            Account.type == str(account_type),
            Account.sub_type == str(sub_type),
        )
        if lock:
            stmt = stmt.with_for_update()
        with storage_errors():
            return self.session.execute(
                stmt.execution_options(populate_existing=True)
            ).scalar_one_or_none()

    def get_accounts_by_owner(self, owner_id: str) -> list[Account]:
        """Return every account owned by ``owner_id``."""
        stmt = (
            select(Account)
            .where(Account.owner_id == owner_id)
            .order_by(Account.type, Account.sub_type)
        )
        with storage_errors():
            return list(self.session.execute(stmt).scalars())

    # ------------------------------------------------------------------
    # Mutation primitives
    # ------------------------------------------------------------------

    def mutate_balance(self, account_id: str, delta: int) -> Account:
        """Apply ``delta`` to an account balance under a row lock.

        Raises:
            AccountNotFound: If no such account exists
            InsufficientFunds: If the balance would drop below zero
        """
        account = self.get_account(account_id, lock=True)
        new_balance = account.balance + delta
        if new_balance < 0:
            raise InsufficientFunds(
                f"Insufficient funds in account {account_id}: "
                f"balance {account.balance}, requested {-delta}"
            )
        account.balance = new_balance
        with storage_errors():
            self.session.flush()
        return account

    def adjust_cash(self, player_id: str, delta: int) -> Player:
        """Apply ``delta`` to a player's cash under a row lock.

        Raises:
            PlayerNotFound: If no such player exists
            InsufficientCash: If cash would drop below zero
        """
        player = self.get_player(player_id, lock=True)
        new_cash = player.cash + delta
        if new_cash < 0:
            raise InsufficientCash(f"Not enough cash: have {player.cash}, need {-delta}")
        player.cash = new_cash
        with storage_errors():
            self.session.flush()
        return player

    def append_ledger_entry(
        self,
        initiator_id: str,
        account_id: str | None,
        amount: int,
        entry_type: EntryType,
        memo: str | None = None,
        *,
        correlation_id: str | None = None,
        counterparty_account_id: str | None = None,
    ) -> LedgerEntry:
        """Insert one immutable ledger entry and return it (with its id)."""
        entry = LedgerEntry(
            player_id=initiator_id,
            account_id=account_id,
            amount=amount,
            type=str(entry_type),
            memo=memo,
            correlation_id=correlation_id,
            counterparty_account_id=counterparty_account_id,
        )
        self.session.add(entry)
        with storage_errors():
            self.session.flush()
        return entry

    def recompute_owner_cached_balance(self, owner_id: str) -> int:
        """Write the sum of the owner's balances into ``Player.bank``.

        Runs in the caller's transaction, so the cached total commits (or
        rolls back) together with the mutation that changed it.
        """
        stmt = select(func.coalesce(func.sum(Account.balance), 0)).where(
            Account.owner_id == owner_id
        )
        with storage_errors():
            total = int(self.session.execute(stmt).scalar_one())
            owner = self.session.get(Player, owner_id)
            if owner is None:
                raise PlayerNotFound()
            owner.bank = total
            self.session.flush()
        return total

    # ------------------------------------------------------------------
    # Provisioning
    # ------------------------------------------------------------------

    def provision_accounts(
        self, owner_id: str, account_type: AccountType = AccountType.PERSONAL
    ) -> list[Account]:
        """Create the standard accounts for an owner inside the caller's transaction.

        Personal owners get chequing, savings and investing accounts whose
        apr / is_active are a snapshot of the current policy. Business owners
        get a single chequing account.

        Raises:
            PlayerNotFound: If the owner does not exist
            PolicyMissing: If no policy exists
            AccountsAlreadyExist: If the owner already has accounts of this type
        """
        self.get_player(owner_id)
        policy = self.policies.get_current_policy()

        existing_stmt = select(func.count(Account.id)).where(
            Account.owner_id == owner_id, Account.type == str(account_type)
        )
        with storage_errors():
            existing = self.session.execute(existing_stmt).scalar_one()
        if existing:
            raise AccountsAlreadyExist(f"Owner {owner_id} already has {account_type} accounts")

        if account_type == AccountType.PERSONAL:
            blueprints = [
                (AccountSubType.CHEQUING, 0, True),
                (AccountSubType.SAVINGS, policy.savings_apr, True),
                (AccountSubType.INVESTING, 0, policy.is_investing_enabled),
            ]
        else:
            blueprints = [(AccountSubType.CHEQUING, 0, True)]

        accounts = [
            Account(
                owner_id=owner_id,
                type=str(account_type),
                sub_type=str(sub_type),
                balance=0,
                apr=apr,
                is_active=is_active,
            )
            for sub_type, apr, is_active in blueprints
        ]
        self.session.add_all(accounts)
        with storage_errors():
            self.session.flush()
        return accounts

    def create_accounts_for_owner(
        self, owner_id: str, account_type: AccountType = AccountType.PERSONAL
    ) -> list[Account]:
        """Provision an owner's accounts in their own transaction."""
        with atomic(self.session):
            accounts = self.provision_accounts(owner_id, account_type)
        logger.info(
            "provisioned %d %s account(s) for owner %s", len(accounts), account_type, owner_id
        )
        return accounts

    # ------------------------------------------------------------------
    # Transaction log queries
    # ------------------------------------------------------------------

    def get_transactions_by_player(
        self, player_id: str, limit: int = DEFAULT_PAGE_SIZE
    ) -> list[LedgerEntry]:
        """Return entries initiated by ``player_id``, newest first."""
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.player_id == player_id)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .limit(_page_size(limit))
        )
        with storage_errors():
            return list(self.session.execute(stmt).scalars())

    def get_transactions_by_account(
        self, account_id: str, limit: int = DEFAULT_PAGE_SIZE
    ) -> list[LedgerEntry]:
        """Return entries applied to ``account_id``, newest first."""
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.account_id == account_id)
            .order_by(LedgerEntry.created_at.desc(), LedgerEntry.id.desc())
            .limit(_page_size(limit))
        )
        with storage_errors():
            return list(self.session.execute(stmt).scalars())

    def get_transactions_by_correlation(self, correlation_id: str) -> list[LedgerEntry]:
        """Return every leg of one logical operation, in insert order."""
        stmt = (
            select(LedgerEntry)
            .where(LedgerEntry.correlation_id == correlation_id)
            .order_by(LedgerEntry.id)
        )
        with storage_errors():
            return list(self.session.execute(stmt).scalars())

    def get_transaction(self, entry_id: int) -> LedgerEntry:
        """Load a single ledger entry.

        Raises:
            TransactionNotFound: If no such entry exists
        """
        with storage_errors():
            entry = self.session.get(LedgerEntry, entry_id)
        if entry is None:
            raise TransactionNotFound()
        return entry


def _page_size(limit: int) -> int:
    return max(1, min(limit, MAX_PAGE_SIZE))
