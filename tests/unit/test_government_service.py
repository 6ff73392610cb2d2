"""Unit tests for government bootstrap and treasury lookup."""

import pytest
from sqlalchemy import func, select

from rpeconomy.domain.enums import AccountSubType, AccountType, EntryMemo
from rpeconomy.domain.errors import GovernmentNotFound
from rpeconomy.models import Account, Government, Policy


def _count(session, column) -> int:
    return session.execute(select(func.count(column))).scalar_one()


def test_treasury_lookup_before_bootstrap(services):
    assert services["government"].find_government() is None
    assert services["government"].find_treasury_account() is None
    with pytest.raises(GovernmentNotFound):
        services["government"].get_treasury_account()


def test_bootstrap_creates_player_treasury_and_policy(session, services, settings):
    government = services["government"].ensure_government()

    assert government.name == "Los Santos Government"
    assert government.player_id == settings.government_player_id
    assert _count(session, Policy.id) == 1

    treasury = services["government"].get_treasury_account()
    assert treasury.id == government.account_id
    assert treasury.type == AccountType.BUSINESS
    assert treasury.sub_type == AccountSubType.CHEQUING
    assert treasury.balance == 1_000_000

    system_player = services["ledger"].get_player(government.player_id)
    assert system_player.is_system is True
    assert system_player.bank == 1_000_000

    (seed,) = services["ledger"].get_transactions_by_account(treasury.id)
    assert seed.memo == EntryMemo.TREASURY_SEED
    assert seed.amount == 1_000_000


def test_bootstrap_is_idempotent(session, services):
    first = services["government"].ensure_government()
    second = services["government"].ensure_government()

    assert first.id == second.id
    assert _count(session, Government.id) == 1
    assert _count(session, Account.id) == 1
    assert _count(session, Policy.id) == 1


def test_existing_policy_is_kept(services):
    services["policies"].update_policy({"income_tax_rate": 30})

    services["government"].ensure_government()

    assert services["policies"].get_current_policy().income_tax_rate == 30
    assert len(services["policies"].list_policies()) == 1
