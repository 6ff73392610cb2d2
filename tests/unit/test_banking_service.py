"""Unit tests for BankingService: deposit, withdraw and transfer."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
from sqlalchemy import func, select

from rpeconomy.config import Settings
from rpeconomy.database import build_session_factory, create_db_engine, init_db
from rpeconomy.domain.enums import AccountSubType, EntryType
from rpeconomy.domain.errors import ErrorKind, StorageError
from rpeconomy.factory import create_all_services
from rpeconomy.models import Account, LedgerEntry, Player


@pytest.fixture
def banking(services):
    return services["banking"]


@pytest.fixture
def ledger(services):
    return services["ledger"]


def _total_money(session) -> int:
    balances = session.execute(select(func.sum(Account.balance))).scalar_one() or 0
    cash = session.execute(select(func.sum(Player.cash))).scalar_one() or 0
    return balances + cash


def _entry_count(session) -> int:
    return session.execute(select(func.count(LedgerEntry.id))).scalar_one()


class TestDeposit:
    def test_deposit_moves_cash_into_chequing(self, session, banking, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]

        result = banking.deposit(player.id, chequing.id, 200)

        assert result.success
        assert result.error is None
        assert result.player.cash == 300
        assert result.account.balance == 200
        assert ledger.get_player(player.id).bank == 200

        (entry,) = ledger.get_transactions_by_account(chequing.id)
        assert entry.type == EntryType.DEPOSIT
        assert entry.amount == 200
        assert entry.player_id == player.id

    def test_deposit_more_than_cash(self, session, banking, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]
        before = _entry_count(session)

        result = banking.deposit(player.id, chequing.id, 501)

        assert not result.success
        assert result.error == ErrorKind.INSUFFICIENT_CASH
        assert ledger.get_player(player.id).cash == 500
        assert ledger.get_account(chequing.id).balance == 0
        assert _entry_count(session) == before

    @pytest.mark.parametrize("amount", [0, -10, True, 2.5])
    def test_invalid_amounts(self, banking, player, accounts, amount):
        result = banking.deposit(player.id, accounts[AccountSubType.CHEQUING].id, amount)

        assert not result.success
        assert result.error == ErrorKind.INVALID_AMOUNT

    def test_business_accounts_refuse_cash(self, banking, player, services):
        treasury = services["government"].get_treasury_account()

        result = banking.deposit(player.id, treasury.id, 10)

        assert result.error == ErrorKind.BUSINESS_ACCOUNT_RESTRICTION

    def test_inactive_account_refuses_cash(self, banking, player, accounts):
        result = banking.deposit(player.id, accounts[AccountSubType.INVESTING].id, 10)

        assert result.error == ErrorKind.ACCOUNT_INACTIVE

    def test_unknown_player_and_account(self, banking, player, accounts):
        assert banking.deposit("ghost", accounts[AccountSubType.CHEQUING].id, 1).error == (
            ErrorKind.NOT_FOUND
        )
        assert banking.deposit(player.id, "ghost", 1).error == ErrorKind.NOT_FOUND


class TestWithdraw:
    def test_withdraw_is_logged_as_outflow(self, banking, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]
        banking.deposit(player.id, chequing.id, 300)

        result = banking.withdraw(player.id, chequing.id, 120)

        assert result.success
        assert result.player.cash == 320
        assert result.account.balance == 180
        newest = ledger.get_transactions_by_account(chequing.id)[0]
        assert newest.type == EntryType.WITHDRAW
        assert newest.amount == -120

    def test_overdraft_is_refused(self, banking, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]
        banking.deposit(player.id, chequing.id, 50)

        result = banking.withdraw(player.id, chequing.id, 51)

        assert result.error == ErrorKind.INSUFFICIENT_FUNDS
        assert ledger.get_account(chequing.id).balance == 50
        assert ledger.get_player(player.id).cash == 450


class TestTransfer:
    def test_transfer_between_own_accounts(self, session, banking, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]
        savings = accounts[AccountSubType.SAVINGS]
        banking.deposit(player.id, chequing.id, 500)
        total = _total_money(session)

        result = banking.transfer(chequing.id, savings.id, 200, player.id)

        assert result.success
        assert result.from_account.balance == 300
        assert result.to_account.balance == 200
        assert _total_money(session) == total
        assert ledger.get_player(player.id).bank == 500

        debit, credit = ledger.get_transactions_by_correlation(result.correlation_id)
        assert (debit.amount, credit.amount) == (-200, 200)
        assert debit.memo == f"to:{savings.id}"
        assert credit.memo == f"from:{chequing.id}"
        assert debit.counterparty_account_id == savings.id
        assert credit.counterparty_account_id == chequing.id
        assert {debit.type, credit.type} == {EntryType.TRANSFER}

    def test_transfer_to_another_owner_updates_both_caches(
        self, services, banking, ledger, player, accounts
    ):
        other = services["players"].create_player("Alan", "Turing", cash=0)
        other_chequing = ledger.find_account(other.id, AccountSubType.CHEQUING)
        banking.deposit(player.id, accounts[AccountSubType.CHEQUING].id, 400)

        result = banking.transfer(
            accounts[AccountSubType.CHEQUING].id, other_chequing.id, 150, player.id
        )

        assert result.success
        assert ledger.get_player(player.id).bank == 250
        assert ledger.get_player(other.id).bank == 150

    def test_insufficient_funds_changes_nothing(self, session, banking, ledger, accounts, player):
        chequing = accounts[AccountSubType.CHEQUING]
        savings = accounts[AccountSubType.SAVINGS]
        banking.deposit(player.id, chequing.id, 100)
        before = _entry_count(session)

        result = banking.transfer(chequing.id, savings.id, 101, player.id)

        assert result.error == ErrorKind.INSUFFICIENT_FUNDS
        assert ledger.get_account(chequing.id).balance == 100
        assert ledger.get_account(savings.id).balance == 0
        assert _entry_count(session) == before

    def test_same_account_is_rejected(self, banking, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]

        result = banking.transfer(chequing.id, chequing.id, 1, player.id)

        assert result.error == ErrorKind.INVALID_AMOUNT

    def test_unknown_initiator(self, banking, player, accounts):
        banking.deposit(player.id, accounts[AccountSubType.CHEQUING].id, 10)

        result = banking.transfer(
            accounts[AccountSubType.CHEQUING].id, accounts[AccountSubType.SAVINGS].id, 5, "ghost"
        )

        assert result.error == ErrorKind.NOT_FOUND

    def test_inactive_destination(self, banking, player, accounts):
        banking.deposit(player.id, accounts[AccountSubType.CHEQUING].id, 10)

        result = banking.transfer(
            accounts[AccountSubType.CHEQUING].id,
            accounts[AccountSubType.INVESTING].id,
            5,
            player.id,
        )

        assert result.error == ErrorKind.ACCOUNT_INACTIVE

    def test_failure_between_legs_rolls_back_the_debit(
        self, session, monkeypatch, banking, ledger, player, accounts
    ):
        chequing = accounts[AccountSubType.CHEQUING]
        savings = accounts[AccountSubType.SAVINGS]
        banking.deposit(player.id, chequing.id, 300)
        before = _entry_count(session)

        real_mutate = ledger.mutate_balance
        calls = []

        def failing_mutate(account_id, delta):
            calls.append(account_id)
            if len(calls) == 2:
                raise StorageError("disk full")
            return real_mutate(account_id, delta)

        monkeypatch.setattr(ledger, "mutate_balance", failing_mutate)

        result = banking.transfer(chequing.id, savings.id, 200, player.id)

        assert not result.success
        assert result.error == ErrorKind.STORAGE_ERROR
        assert calls == [chequing.id, savings.id]
        monkeypatch.undo()
        assert ledger.get_account(chequing.id).balance == 300
        assert ledger.get_account(savings.id).balance == 0
        assert ledger.get_player(player.id).bank == 300
        assert _entry_count(session) == before

    def test_business_accounts_may_transfer(self, services, banking, ledger, player, accounts):
        treasury = services["government"].get_treasury_account()
        government = services["government"].get_government()

        result = banking.transfer(
            treasury.id, accounts[AccountSubType.CHEQUING].id, 1000, government.player_id
        )

        assert result.success
        assert ledger.get_account(treasury.id).balance == 999_000
        assert ledger.get_player(player.id).bank == 1000


@pytest.fixture
def file_ledger(tmp_path):
    """A file-backed SQLite ledger: one player with 100 in chequing and 0 cash."""
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'ledger.db'}", bootstrap_on_startup=False
    )
    engine = create_db_engine(settings)
    init_db(engine)
    factory = build_session_factory(engine)
    with factory() as session:
        services = create_all_services(session, settings)
        services["government"].ensure_government()
        player = services["players"].create_player("Race", "Winner", cash=100)
        chequing = services["ledger"].find_account(player.id, AccountSubType.CHEQUING)
        savings = services["ledger"].find_account(player.id, AccountSubType.SAVINGS)
        assert services["banking"].deposit(player.id, chequing.id, 100).success
        ids = (player.id, chequing.id, savings.id)
    try:
        yield settings, factory, ids
    finally:
        engine.dispose()


def _race(settings, factory, operation):
    """Run ``operation`` from two threads, each on its own session.

    Every account read is followed by a short pause so both threads would
    pass their funds check before either writes if reads were not serialised.
    """
    start = threading.Barrier(2)

    def run():
        with factory() as session:
            services = create_all_services(session, settings)
            ledger = services["ledger"]
            read_account = ledger.get_account

            def slow_get_account(account_id, *, lock=False):
                account = read_account(account_id, lock=lock)
                time.sleep(0.2)
                return account

            ledger.get_account = slow_get_account
            start.wait(timeout=5)
            return operation(services["banking"])

    with ThreadPoolExecutor(max_workers=2) as pool:
        futures = [pool.submit(run) for _ in range(2)]
        return [future.result(timeout=30) for future in futures]


def _assert_one_winner(results):
    assert sorted(result.success for result in results) == [False, True]
    (loser,) = [result for result in results if not result.success]
    assert loser.error in {ErrorKind.INSUFFICIENT_FUNDS, ErrorKind.TRANSACTION_CONFLICT}


class TestConcurrentMovements:
    def test_competing_withdrawals_cannot_overdraw(self, file_ledger):
        settings, factory, (player_id, chequing_id, _) = file_ledger

        results = _race(settings, factory, lambda bank: bank.withdraw(player_id, chequing_id, 100))

        _assert_one_winner(results)
        with factory() as session:
            ledger = create_all_services(session, settings)["ledger"]
            player = ledger.get_player(player_id)
            chequing = ledger.get_account(chequing_id)
            assert (player.cash, chequing.balance) == (100, 0)
            assert player.cash + chequing.balance == 100
            withdrawals = [
                entry
                for entry in ledger.get_transactions_by_account(chequing_id)
                if entry.type == EntryType.WITHDRAW
            ]
            assert len(withdrawals) == 1

    def test_competing_transfers_move_the_money_once(self, file_ledger):
        settings, factory, (player_id, chequing_id, savings_id) = file_ledger

        results = _race(
            settings,
            factory,
            lambda bank: bank.transfer(chequing_id, savings_id, 100, player_id),
        )

        _assert_one_winner(results)
        with factory() as session:
            ledger = create_all_services(session, settings)["ledger"]
            assert ledger.get_account(chequing_id).balance == 0
            assert ledger.get_account(savings_id).balance == 100
            assert ledger.get_player(player_id).bank == 100
            legs = [
                entry
                for entry in ledger.get_transactions_by_player(player_id)
                if entry.type == EntryType.TRANSFER
            ]
            assert len(legs) == 2
