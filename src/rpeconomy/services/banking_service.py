"""Transfer, deposit and withdraw engine.

Composes the Account Ledger primitives into user-facing money movements.
Each operation validates its business rules, then applies every balance
change, cache refresh and log entry inside one ``atomic`` block, so a failure
at any step leaves no leg applied.
"""

import logging

from sqlalchemy.orm import Session

from rpeconomy.database import atomic
from rpeconomy.domain.economics import is_valid_amount
from rpeconomy.domain.enums import AccountType, EntryType
from rpeconomy.domain.errors import (
    AccountInactive,
    BusinessAccountRestriction,
    InvalidAmount,
    LedgerError,
)
from rpeconomy.domain.results import CashMovementResult, TransferResult
from rpeconomy.interfaces import IAccountLedger
from rpeconomy.models import Account, new_uuid

logger = logging.getLogger(__name__)


class BankingService:
    """Service for cash deposits, cash withdrawals and account transfers."""

    def __init__(self, session: Session, ledger: IAccountLedger):
        self.session = session
        self.ledger = ledger

    def deposit(self, player_id: str, account_id: str, amount: int) -> CashMovementResult:
        """Move physical cash from a player into a personal bank account.

        Args:
            player_id: Player handing over the cash
            account_id: Personal account receiving it
            amount: Positive amount in minor units

        Returns:
            CashMovementResult with the updated player and account
        """
        try:
            _require_amount(amount)
            with atomic(self.session):
                player = self.ledger.get_player(player_id, lock=True)
                account = self.ledger.get_account(account_id, lock=True)
                _require_cash_eligible(account)

                self.ledger.adjust_cash(player.id, -amount)
                self.ledger.mutate_balance(account.id, amount)
                self.ledger.append_ledger_entry(player.id, account.id, amount, EntryType.DEPOSIT)
                self.ledger.recompute_owner_cached_balance(account.owner_id)
        except LedgerError as exc:
            logger.warning(
                "deposit of %s by player %s into %s failed: %s",
                amount,
                player_id,
                account_id,
                exc.message,
            )
            return CashMovementResult.failed(exc)

        logger.info("player %s deposited %s into %s", player_id, amount, account_id)
        return CashMovementResult(
            success=True,
            message="Deposit successful",
            player=player,
            account=account,
        )

    def withdraw(self, player_id: str, account_id: str, amount: int) -> CashMovementResult:
        """Move money from a personal bank account into a player's cash.

        Args:
            player_id: Player receiving the cash
            account_id: Personal account being drawn down
            amount: Positive amount in minor units

        Returns:
            CashMovementResult with the updated player and account
        """
        try:
            _require_amount(amount)
            with atomic(self.session):
                player = self.ledger.get_player(player_id, lock=True)
                account = self.ledger.get_account(account_id, lock=True)
                _require_cash_eligible(account)

                self.ledger.mutate_balance(account.id, -amount)
                self.ledger.adjust_cash(player.id, amount)
                self.ledger.append_ledger_entry(player.id, account.id, -amount, EntryType.WITHDRAW)
                self.ledger.recompute_owner_cached_balance(account.owner_id)
        except LedgerError as exc:
            logger.warning(
                "withdrawal of %s by player %s from %s failed: %s",
                amount,
                player_id,
                account_id,
                exc.message,
            )
            return CashMovementResult.failed(exc)

        logger.info("player %s withdrew %s from %s", player_id, amount, account_id)
        return CashMovementResult(
            success=True,
            message="Withdrawal successful",
            player=player,
            account=account,
        )

    def transfer(
        self, from_account_id: str, to_account_id: str, amount: int, initiator_id: str
    ) -> TransferResult:
        """Move money between two bank accounts of any owner or type.

        Both rows are locked in id order before either is changed. The two
        ledger legs share a correlation id and name each other as
        counterparty.

        Args:
            from_account_id: Account debited
            to_account_id: Account credited
            amount: Positive amount in minor units
            initiator_id: Player recorded as the initiator of both legs

        Returns:
            TransferResult with both updated accounts and the correlation id
        """
        try:
            _require_amount(amount)
            if from_account_id == to_account_id:
                raise InvalidAmount("Source and destination accounts must differ")

            with atomic(self.session):
                initiator = self.ledger.get_player(initiator_id)
                locked = {
                    account_id: self.ledger.get_account(account_id, lock=True)
                    for account_id in sorted((from_account_id, to_account_id))
                }
                source, target = locked[from_account_id], locked[to_account_id]
                _require_active(source)
                _require_active(target)

                self.ledger.mutate_balance(source.id, -amount)
                self.ledger.mutate_balance(target.id, amount)

                correlation_id = new_uuid()
                self.ledger.append_ledger_entry(
                    initiator.id,
                    source.id,
                    -amount,
                    EntryType.TRANSFER,
                    f"to:{target.id}",
                    correlation_id=correlation_id,
                    counterparty_account_id=target.id,
                )
                self.ledger.append_ledger_entry(
                    initiator.id,
                    target.id,
                    amount,
                    EntryType.TRANSFER,
                    f"from:{source.id}",
                    correlation_id=correlation_id,
                    counterparty_account_id=source.id,
                )
                for owner_id in {source.owner_id, target.owner_id}:
                    self.ledger.recompute_owner_cached_balance(owner_id)
        except LedgerError as exc:
            logger.warning(
                "transfer of %s from %s to %s failed: %s",
                amount,
                from_account_id,
                to_account_id,
                exc.message,
            )
            return TransferResult.failed(exc)

        logger.info(
            "transfer %s: %s moved from %s to %s by %s",
            correlation_id,
            amount,
            from_account_id,
            to_account_id,
            initiator_id,
        )
        return TransferResult(
            success=True,
            message="Transfer successful",
            from_account=source,
            to_account=target,
            correlation_id=correlation_id,
        )


def _require_amount(amount: int) -> None:
    if not is_valid_amount(amount):
        raise InvalidAmount()


def _require_active(account: Account) -> None:
    if not account.is_active:
        raise AccountInactive(f"Account {account.id} is not active")


def _require_cash_eligible(account: Account) -> None:
    if account.type != AccountType.PERSONAL:
        raise BusinessAccountRestriction()
    _require_active(account)
