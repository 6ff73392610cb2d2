"""Policy Store Protocol Interface."""

from typing import Protocol

from rpeconomy.models import Policy


class IPolicyStore(Protocol):
    """Read access to the current economic policy.

    The engines only need the latest version; writes go through the concrete
    ``PolicyStore``.
    """

    def find_current_policy(self) -> Policy | None:
        """Return the latest policy version, or None when none exists."""
        ...

    def get_current_policy(self) -> Policy:
        """Return the latest policy version.

        Raises:
            PolicyMissing: If no policy has been recorded yet
        """
        ...
