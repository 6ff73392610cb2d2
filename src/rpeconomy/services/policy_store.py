"""Policy Store for the economy ledger.

Policies are versioned by insertion: every update writes a new row merged
from the previous latest version, so the full history stays available for
audit and the highest id is always the current policy.
"""

import logging
from collections.abc import Mapping
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from rpeconomy.database import atomic, storage_errors
from rpeconomy.domain.economics import DEFAULT_POLICY, POLICY_FIELDS, RATE_FIELDS
from rpeconomy.domain.errors import InvalidPolicy, PolicyMissing
from rpeconomy.models import Policy

logger = logging.getLogger(__name__)

MAX_HISTORY = 500


class PolicyStore:
    """Service reading and versioning government policy."""

    def __init__(self, session: Session):
        self.session = session

    def find_current_policy(self) -> Policy | None:
        """Return the latest policy row, or None when the table is empty."""
        stmt = select(Policy).order_by(Policy.id.desc()).limit(1)
        with storage_errors():
            return self.session.execute(stmt).scalar_one_or_none()

    def get_current_policy(self) -> Policy:
        """Return the latest policy row.

        Raises:
            PolicyMissing: If no policy exists (bootstrap has not run)
        """
        policy = self.find_current_policy()
        if policy is None:
            raise PolicyMissing()
        return policy

    def list_policies(self, limit: int = 50) -> list[Policy]:
        """Return policy history, newest first."""
        limit = max(1, min(limit, MAX_HISTORY))
        stmt = select(Policy).order_by(Policy.id.desc()).limit(limit)
        with storage_errors():
            return list(self.session.execute(stmt).scalars())

    def update_policy(self, updates: Mapping[str, Any]) -> Policy:
        """Insert a new policy version.

        Fields missing from ``updates`` (or given as None) are carried over
        from the current policy, or from the defaults when there is none.

        Args:
            updates: Partial mapping of policy lever names to new values

        Returns:
            The newly inserted policy row

        Raises:
            InvalidPolicy: If a field is unknown or a value is out of range
        """
        changes = {key: value for key, value in updates.items() if value is not None}
        _validate_policy_changes(changes)

        with atomic(self.session):
            current = self.find_current_policy()
            values = current.as_dict() if current is not None else DEFAULT_POLICY.as_dict()
            values.update(changes)
            policy = Policy(**values)
            self.session.add(policy)
            self.session.flush()

        logger.info(
            "policy version %s recorded (previous %s): %s",
            policy.id,
            current.id if current is not None else None,
            changes,
        )
        return policy

    def ensure_policy(self) -> Policy:
        """Return the current policy, inserting the defaults if there is none."""
        current = self.find_current_policy()
        if current is not None:
            return current

        with atomic(self.session):
            policy = Policy(**DEFAULT_POLICY.as_dict())
            self.session.add(policy)
            self.session.flush()
        logger.info("seeded default policy as version %s", policy.id)
        return policy


def _validate_policy_changes(changes: Mapping[str, Any]) -> None:
    unknown = set(changes) - POLICY_FIELDS
    if unknown:
        raise InvalidPolicy(f"Unknown policy fields: {', '.join(sorted(unknown))}")

    for name, value in changes.items():
        if name == "is_investing_enabled":
            if not isinstance(value, bool):
                raise InvalidPolicy("is_investing_enabled must be a boolean")
            continue
        if not isinstance(value, int) or isinstance(value, bool):
            raise InvalidPolicy(f"{name} must be a whole number")
        if value < 0:
            raise InvalidPolicy(f"{name} cannot be negative")
        if name in RATE_FIELDS and value > 100:  # noqa: PLR2004
            raise InvalidPolicy(f"{name} must be between 0 and 100")
