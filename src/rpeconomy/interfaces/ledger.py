"""Account Ledger and Treasury Protocol Interfaces.

These protocols define the balance-mutation primitives the money-movement,
interest and payroll engines are built on. Every method is expected to run
inside a transaction opened by the caller with ``rpeconomy.database.atomic``.
"""

from typing import Protocol

from rpeconomy.domain.enums import AccountSubType, AccountType, EntryType
from rpeconomy.models import Account, Government, LedgerEntry, Player


class IAccountLedger(Protocol):
    """Protocol for primitive, all-or-nothing balance mutation and logging."""

    def get_player(self, player_id: str, *, lock: bool = False) -> Player:
        """Load a player.

        Raises:
            PlayerNotFound: If no such player exists
        """
        ...

    def get_account(self, account_id: str, *, lock: bool = False) -> Account:
        """Load an account, optionally holding a row lock until commit.

        Raises:
            AccountNotFound: If no such account exists
        """
        ...

    def find_account(
        self,
        owner_id: str,
        sub_type: AccountSubType,
        account_type: AccountType = AccountType.PERSONAL,
        *,
        lock: bool = False,
    ) -> Account | None:
        """Return the owner's account of the given kind, if any."""
        ...

    def mutate_balance(self, account_id: str, delta: int) -> Account:
        """Apply ``delta`` to an account balance.

        Raises:
            AccountNotFound: If no such account exists
            InsufficientFunds: If the balance would go negative
        """
        ...

    def adjust_cash(self, player_id: str, delta: int) -> Player:
        """Apply ``delta`` to a player's cash.

        Raises:
            PlayerNotFound: If no such player exists
            InsufficientCash: If cash would go negative
        """
        ...

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
        """Insert one immutable ledger entry."""
        ...

    def recompute_owner_cached_balance(self, owner_id: str) -> int:
        """Refresh ``Player.bank`` from the owner's account balances."""
        ...


class ITreasury(Protocol):
    """Protocol resolving the government singleton and its treasury."""

    def find_government(self) -> Government | None:
        """Return the government row, or None before bootstrap."""
        ...

    def find_treasury_account(self, *, lock: bool = False) -> Account | None:
        """Return the treasury account, or None when it cannot be resolved."""
        ...
