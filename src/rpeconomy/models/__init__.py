"""SQLAlchemy models for the economy ledger.

This module exports all database models and the declarative base.
"""

from .account import Account
from .base import Base, TimestampCreatedMixin, TimestampMixin, new_uuid, utc_now
from .government import Government
from .job import Job
from .ledger import InterestAccrual, LedgerEntry
from .player import Player
from .policy import Policy

__all__ = [
    "Account",
    "Base",
    "Government",
    "InterestAccrual",
    "Job",
    "LedgerEntry",
    "Player",
    "Policy",
    "TimestampCreatedMixin",
    "TimestampMixin",
    "new_uuid",
    "utc_now",
]
