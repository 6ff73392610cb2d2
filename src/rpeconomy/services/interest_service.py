"""Interest Accrual Engine.

Applies one month of savings interest, at the live policy APR, to every
active savings account with a positive balance. Accounts are processed in
independent transactions so one failure does not abort the batch, and each
credit is recorded against its ``YYYY-MM`` period so a second run in the same
period skips accounts that were already paid.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.economics import accrual_period, monthly_interest
from rpeconomy.domain.enums import AccountSubType, EntryMemo, EntryType
from rpeconomy.domain.errors import LedgerError, NoPolicyFound, ZeroOrNegativeAPR
from rpeconomy.domain.results import AccrualFailure, InterestResult
from rpeconomy.interfaces import IAccountLedger, IPolicyStore
from rpeconomy.models import Account, InterestAccrual, utc_now

logger = logging.getLogger(__name__)


class InterestService:
    """Service for the on-demand savings interest batch."""

    def __init__(self, session: Session, ledger: IAccountLedger, policies: IPolicyStore):
        self.session = session
        self.ledger = ledger
        self.policies = policies

    def apply_savings_interest(self, period: str | None = None) -> InterestResult:
        """Credit one month of interest to every eligible savings account.

        Args:
            period: Accrual period (``YYYY-MM``); defaults to the current month

        Returns:
            InterestResult counting updated and skipped accounts, plus any
            per-account failures
        """
        period = period or accrual_period(utc_now())
        try:
            policy = self.policies.find_current_policy()
            if policy is None:
                raise NoPolicyFound()
            apr = policy.savings_apr
            if apr <= 0:
                raise ZeroOrNegativeAPR(f"Savings APR is {apr}; nothing to accrue")
            account_ids = self._eligible_account_ids()
            # End the read transaction before per-account writes begin
            with storage_errors():
                self.session.commit()
        except LedgerError as exc:
            self.session.rollback()
            logger.warning("savings interest for %s not applied: %s", period, exc.message)
            result = InterestResult.failed(exc)
            result.period = period
            return result

        result = InterestResult(success=True, message="", period=period)
        for account_id in account_ids:
            try:
                with atomic(self.session):
                    credited = self._accrue_account(account_id, apr, period)
            except LedgerError as exc:
                logger.error(
                    "interest for account %s in %s failed: %s", account_id, period, exc.message
                )
                result.failures.append(
                    AccrualFailure(account_id=account_id, error=exc.kind, message=exc.message)
                )
                continue

            if credited:
                result.accounts_updated += 1
                result.interest_paid += credited
            else:
                result.accounts_skipped += 1

        result.message = (
            f"Applied interest to {result.accounts_updated} account(s) for {period}"
        )
        logger.info(
            "savings interest %s at %s%% APR: %d updated, %d skipped, %d failed, %d paid",
            period,
            apr,
            result.accounts_updated,
            result.accounts_skipped,
            len(result.failures),
            result.interest_paid,
        )
        return result

    def _eligible_account_ids(self) -> list[str]:
        stmt = (
            select(Account.id)
            .where(
                Account.sub_type == str(AccountSubType.SAVINGS),
                Account.is_active.is_(True),
                Account.balance > 0,
            )
            .order_by(Account.id)
        )
        with storage_errors():
            return list(self.session.execute(stmt).scalars())

    def _accrue_account(self, account_id: str, apr: int, period: str) -> int:
        """Credit one account; returns the interest paid (0 when skipped)."""
        account = self.ledger.get_account(account_id, lock=True)
        if not account.is_active or account.balance <= 0:
            return 0

        already_stmt = select(InterestAccrual.id).where(
            InterestAccrual.account_id == account.id,
            InterestAccrual.period == period,
        )
        with storage_errors():
            already_paid = self.session.execute(already_stmt).first() is not None
        if already_paid:
            return 0

        interest = monthly_interest(account.balance, apr)
        if interest <= 0:
            return 0

        self.ledger.mutate_balance(account.id, interest)
        entry = self.ledger.append_ledger_entry(
            account.owner_id,
            account.id,
            interest,
            EntryType.DEPOSIT,
            EntryMemo.SAVINGS_INTEREST,
        )
        self.session.add(
            InterestAccrual(account_id=account.id, period=period, amount=interest, entry_id=entry.id)
        )
        self.ledger.recompute_owner_cached_balance(account.owner_id)
        return interest
