"""Unit tests for the transaction boundary and storage error translation."""

from unittest.mock import Mock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError

from rpeconomy.database import atomic, count_rows, translate_storage_error
from rpeconomy.domain.errors import InvalidAmount, StorageError, TransactionConflict
from rpeconomy.models import Job


class TestTranslateStorageError:
    def test_sqlite_lock_is_a_conflict(self):
        exc = OperationalError("UPDATE bank_accounts", {}, Exception("database is locked"))
        assert isinstance(translate_storage_error(exc), TransactionConflict)

    @pytest.mark.parametrize("sqlstate", ["40001", "40P01", "55P03"])
    def test_postgres_conflict_sqlstates(self, sqlstate):
        orig = Mock()
        orig.pgcode = sqlstate
        exc = DBAPIError("SELECT ... FOR UPDATE", {}, orig)
        assert isinstance(translate_storage_error(exc), TransactionConflict)

    def test_constraint_violation_is_storage_error(self):
        exc = IntegrityError("INSERT", {}, Exception("CHECK constraint failed"))
        translated = translate_storage_error(exc)
        assert isinstance(translated, StorageError)
        assert "IntegrityError" in translated.message


class TestAtomic:
    def test_commits_on_success(self, session):
        with atomic(session):
            session.add(Job(name="Mechanic", salary=800))

        assert count_rows(session, "jobs") == 1

    def test_rolls_back_on_ledger_error(self, session):
        with pytest.raises(InvalidAmount), atomic(session):
            session.add(Job(name="Mechanic", salary=800))
            session.flush()
            raise InvalidAmount()

        assert session.execute(select(func.count(Job.id))).scalar_one() == 0

    def test_commit_failure_surfaces_as_storage_error(self, session):
        with pytest.raises(StorageError), atomic(session):
            session.add(Job(name="Broken", salary=-1))

        assert count_rows(session, "jobs") == 0


def test_count_rows_rejects_unknown_table(session):
    with pytest.raises(ValueError, match="Invalid table name"):
        count_rows(session, "nope")
