"""Unit tests for PayrollService."""

import pytest

from rpeconomy.domain.enums import AccountSubType, EntryMemo
from rpeconomy.domain.errors import ErrorKind
from rpeconomy.services.payroll_service import PayrollService


class FakeTreasury:
    """Treasury that was never bootstrapped."""

    def find_government(self):
        return None

    def find_treasury_account(self, *, lock=False):  # noqa: ARG002
        return None


@pytest.fixture
def payroll(services):
    return services["payroll"]


@pytest.fixture
def employee(services, player):
    job = services["jobs"].create_job("Mechanic", 1000)
    services["jobs"].assign_job(player.id, job.id)
    return player


def test_salary_is_split_between_player_and_treasury(payroll, services, employee, government):
    ledger = services["ledger"]
    chequing = ledger.find_account(employee.id, AccountSubType.CHEQUING)

    result = payroll.pay_salary(employee.id)

    assert result.success
    assert result.message == "Salary paid: 1000 (Net: 900, Tax: 100)"
    assert (result.gross_salary, result.net_salary, result.tax_amount) == (1000, 900, 100)
    assert ledger.get_account(chequing.id).balance == 900
    assert ledger.get_account(government.account_id).balance == 1_000_100
    assert ledger.get_player(employee.id).bank == 900
    assert ledger.get_player(government.player_id).bank == 1_000_100

    paycheck, tax = ledger.get_transactions_by_correlation(result.correlation_id)
    assert (paycheck.memo, paycheck.amount, paycheck.player_id) == (
        EntryMemo.PAYCHECK,
        900,
        employee.id,
    )
    assert (tax.memo, tax.amount, tax.player_id) == (
        EntryMemo.INCOME_TAX,
        100,
        government.player_id,
    )


def test_rate_is_read_at_payment_time(payroll, services, employee):
    services["policies"].update_policy({"income_tax_rate": 25})

    result = payroll.pay_salary(employee.id)

    assert (result.net_salary, result.tax_amount) == (750, 250)


def test_zero_tax_logs_only_the_paycheck(payroll, services, employee, government):
    ledger = services["ledger"]
    services["policies"].update_policy({"income_tax_rate": 0})

    result = payroll.pay_salary(employee.id)

    assert result.success
    assert (result.gross_salary, result.net_salary, result.tax_amount) == (1000, 1000, 0)
    assert ledger.get_account(government.account_id).balance == 1_000_000
    (paycheck,) = ledger.get_transactions_by_correlation(result.correlation_id)
    assert (paycheck.memo, paycheck.amount) == (EntryMemo.PAYCHECK, 1000)
    treasury_entries = ledger.get_transactions_by_account(government.account_id)
    assert [e.memo for e in treasury_entries] == [EntryMemo.TREASURY_SEED]


def test_player_without_job(payroll, player):
    result = payroll.pay_salary(player.id)

    assert not result.success
    assert result.error == ErrorKind.NOT_FOUND
    assert "job" in result.message.lower()


def test_unknown_player(payroll, government):  # noqa: ARG001
    assert payroll.pay_salary("ghost").error == ErrorKind.NOT_FOUND


def test_missing_treasury_leaves_balances_untouched(session, services, employee):
    ledger = services["ledger"]
    service = PayrollService(session, ledger, services["policies"], FakeTreasury())

    result = service.pay_salary(employee.id)

    assert not result.success
    assert result.error == ErrorKind.NOT_FOUND
    assert result.message == "Government treasury account not found"
    chequing = ledger.find_account(employee.id, AccountSubType.CHEQUING)
    assert chequing.balance == 0
    assert ledger.get_transactions_by_player(employee.id) == []
