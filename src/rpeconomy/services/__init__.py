"""Service layer for the economy ledger.

All services take a SQLAlchemy session and depend on Protocol interfaces
where another service is needed:

- AccountLedger: balance/cash primitives, provisioning, transaction log
- PolicyStore: versioned government policy
- BankingService: deposit, withdraw, transfer
- InterestService: savings interest batch
- PayrollService: tax-withheld salary payments
- GovernmentService: government bootstrap and treasury lookup
- JobService, PlayerService: jobs and player provisioning

Production Usage:
    from rpeconomy.factory import create_banking_service
    banking = create_banking_service(session)
    result = banking.deposit(player_id, account_id, 200)

Testing Usage:
    from rpeconomy.services.payroll_service import PayrollService

    class FakeTreasury:
        def find_government(self):
            return None

        def find_treasury_account(self, *, lock=False):
            return None

    payroll = PayrollService(session, ledger, policies, FakeTreasury())
"""

from rpeconomy.services.account_ledger import AccountLedger
from rpeconomy.services.banking_service import BankingService
from rpeconomy.services.government_service import GovernmentService
from rpeconomy.services.interest_service import InterestService
from rpeconomy.services.job_service import JobService
from rpeconomy.services.payroll_service import PayrollService
from rpeconomy.services.player_service import PlayerService
from rpeconomy.services.policy_store import PolicyStore

__all__ = [
    "AccountLedger",
    "BankingService",
    "GovernmentService",
    "InterestService",
    "JobService",
    "PayrollService",
    "PlayerService",
    "PolicyStore",
]
