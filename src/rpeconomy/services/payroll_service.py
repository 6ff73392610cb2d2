"""Payroll Engine.

Pays a player's job salary with income tax withheld at the live policy
rate: the net amount goes to the player's personal chequing account and the
tax to the government treasury, both in one transaction.
"""

import logging

from sqlalchemy.orm import Session

from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.economics import split_salary
from rpeconomy.domain.enums import AccountSubType, AccountType, EntryMemo, EntryType
from rpeconomy.domain.errors import (
    ChequingAccountNotFound,
    JobNotFound,
    LedgerError,
    TreasuryNotFound,
)
from rpeconomy.domain.results import PayrollResult
from rpeconomy.interfaces import IAccountLedger, IPolicyStore, ITreasury
from rpeconomy.models import Job, new_uuid

logger = logging.getLogger(__name__)


class PayrollService:
    """Service computing and paying tax-withheld salaries."""

    def __init__(
        self,
        session: Session,
        ledger: IAccountLedger,
        policies: IPolicyStore,
        treasury: ITreasury,
    ):
        self.session = session
        self.ledger = ledger
        self.policies = policies
        self.treasury = treasury

    def pay_salary(self, player_id: str) -> PayrollResult:
        """Pay one salary to ``player_id``.

        The paycheck leg is recorded with the employee as initiator and the
        income tax leg with the government player as initiator; both share a
        correlation id. A leg whose amount is zero is not applied or logged.

        Returns:
            PayrollResult with both updated accounts, the net salary and the
            tax withheld
        """
        try:
            with atomic(self.session):
                player = self.ledger.get_player(player_id)
                job = self._get_job(player.job_id)
                policy = self.policies.get_current_policy()
                net_salary, tax_amount = split_salary(job.salary, policy.income_tax_rate)

                chequing = self.ledger.find_account(
                    player.id, AccountSubType.CHEQUING, AccountType.PERSONAL, lock=True
                )
                if chequing is None:
                    raise ChequingAccountNotFound()
                government = self.treasury.find_government()
                treasury = self.treasury.find_treasury_account(lock=True)
                if government is None or treasury is None:
                    raise TreasuryNotFound()

                correlation_id = new_uuid()
                if net_salary > 0:
                    self.ledger.mutate_balance(chequing.id, net_salary)
                    self.ledger.append_ledger_entry(
                        player.id,
                        chequing.id,
                        net_salary,
                        EntryType.DEPOSIT,
                        EntryMemo.PAYCHECK,
                        correlation_id=correlation_id,
                    )
                if tax_amount > 0:
                    self.ledger.mutate_balance(treasury.id, tax_amount)
                    self.ledger.append_ledger_entry(
                        government.player_id,
                        treasury.id,
                        tax_amount,
                        EntryType.DEPOSIT,
                        EntryMemo.INCOME_TAX,
                        correlation_id=correlation_id,
                    )
                for owner_id in {chequing.owner_id, treasury.owner_id}:
                    self.ledger.recompute_owner_cached_balance(owner_id)
        except LedgerError as exc:
            logger.warning("salary payment for player %s failed: %s", player_id, exc.message)
            return PayrollResult.failed(exc)

        logger.info(
            "paid player %s salary %s (net %s, tax %s)",
            player_id,
            job.salary,
            net_salary,
            tax_amount,
        )
        return PayrollResult(
            success=True,
            message=f"Salary paid: {job.salary} (Net: {net_salary}, Tax: {tax_amount})",
            player_account=chequing,
            gov_account=treasury,
            gross_salary=job.salary,
            net_salary=net_salary,
            tax_amount=tax_amount,
            correlation_id=correlation_id,
        )

    def _get_job(self, job_id: int | None) -> Job:
        if job_id is None:
            raise JobNotFound("Player has no job assigned")
        with storage_errors():
            job = self.session.get(Job, job_id)
        if job is None:
            raise JobNotFound()
        return job
