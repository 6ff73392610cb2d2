"""Unit tests for the AccountLedger primitives and transaction log queries."""

import pytest

from rpeconomy.database import atomic
from rpeconomy.domain.enums import AccountSubType, AccountType, EntryType
from rpeconomy.domain.errors import (
    AccountNotFound,
    AccountsAlreadyExist,
    InsufficientCash,
    InsufficientFunds,
    PlayerNotFound,
    TransactionNotFound,
)


@pytest.fixture
def ledger(services):
    return services["ledger"]


class TestProvisioning:
    def test_personal_accounts_snapshot_policy(self, services, ledger, government):  # noqa: ARG002
        services["policies"].update_policy({"savings_apr": 7, "is_investing_enabled": True})
        player = services["players"].create_player("Grace", "Hopper")

        accounts = {a.sub_type: a for a in ledger.get_accounts_by_owner(player.id)}

        assert set(accounts) == {"chequing", "savings", "investing"}
        assert accounts["savings"].apr == 7
        assert accounts["chequing"].apr == 0
        assert accounts["investing"].is_active is True
        assert all(a.balance == 0 and a.type == AccountType.PERSONAL for a in accounts.values())

    def test_later_policy_changes_do_not_touch_existing_accounts(
        self, services, accounts
    ):
        services["policies"].update_policy({"savings_apr": 9})

        savings = services["ledger"].get_account(accounts[AccountSubType.SAVINGS].id)
        assert savings.apr == 2

    def test_investing_starts_inactive_by_default(self, accounts):
        assert accounts[AccountSubType.INVESTING].is_active is False

    def test_duplicate_provisioning_is_rejected(self, ledger, player):
        with pytest.raises(AccountsAlreadyExist):
            ledger.create_accounts_for_owner(player.id, AccountType.PERSONAL)

        assert len(ledger.get_accounts_by_owner(player.id)) == 3

    def test_business_accounts_can_be_added_to_a_personal_owner(self, ledger, player):
        (business,) = ledger.create_accounts_for_owner(player.id, AccountType.BUSINESS)

        assert business.type == AccountType.BUSINESS
        assert business.sub_type == AccountSubType.CHEQUING
        assert len(ledger.get_accounts_by_owner(player.id)) == 4

    def test_unknown_owner(self, ledger, government):  # noqa: ARG002
        with pytest.raises(PlayerNotFound):
            ledger.create_accounts_for_owner("missing-player")


class TestPrimitives:
    def test_mutate_balance_rejects_overdraft(self, session, ledger, accounts):
        chequing = accounts[AccountSubType.CHEQUING]

        with pytest.raises(InsufficientFunds), atomic(session):
            ledger.mutate_balance(chequing.id, -1)

        assert ledger.get_account(chequing.id).balance == 0

    def test_adjust_cash_rejects_negative_cash(self, session, ledger, player):
        with pytest.raises(InsufficientCash), atomic(session):
            ledger.adjust_cash(player.id, -501)

        assert ledger.get_player(player.id).cash == 500

    def test_recompute_owner_cached_balance(self, session, ledger, player, accounts):
        with atomic(session):
            ledger.mutate_balance(accounts[AccountSubType.CHEQUING].id, 40)
            ledger.mutate_balance(accounts[AccountSubType.SAVINGS].id, 60)
            total = ledger.recompute_owner_cached_balance(player.id)

        assert total == 100
        assert ledger.get_player(player.id).bank == 100

    def test_lookups_raise_not_found(self, ledger):
        with pytest.raises(AccountNotFound):
            ledger.get_account("nope")
        with pytest.raises(PlayerNotFound):
            ledger.get_player("nope")
        with pytest.raises(TransactionNotFound):
            ledger.get_transaction(424242)


class TestTransactionLog:
    def test_entries_are_newest_first_and_limited(self, session, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]
        with atomic(session):
            for amount in (1, 2, 3):
                ledger.append_ledger_entry(player.id, chequing.id, amount, EntryType.DEPOSIT)

        entries = ledger.get_transactions_by_player(player.id, limit=2)
        assert [e.amount for e in entries] == [3, 2]

        by_account = ledger.get_transactions_by_account(chequing.id)
        assert [e.amount for e in by_account] == [3, 2, 1]

    def test_entry_fields_round_trip(self, session, ledger, player, accounts):
        chequing = accounts[AccountSubType.CHEQUING]
        savings = accounts[AccountSubType.SAVINGS]
        with atomic(session):
            entry = ledger.append_ledger_entry(
                player.id,
                chequing.id,
                -5,
                EntryType.TRANSFER,
                f"to:{savings.id}",
                correlation_id="corr-1",
                counterparty_account_id=savings.id,
            )

        stored = ledger.get_transaction(entry.id)
        assert stored.type == "transfer"
        assert stored.memo == f"to:{savings.id}"
        assert stored.counterparty_account_id == savings.id
        assert ledger.get_transactions_by_correlation("corr-1") == [stored]
