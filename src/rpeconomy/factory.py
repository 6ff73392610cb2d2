"""Service Factory for the economy ledger.

This module provides factory functions for creating service instances with
proper dependency wiring. Use these functions in production code to ensure
all service dependencies are correctly initialized.

For testing, inject protocol-based fakes instead of using these factories.

Example:
    # Production usage
    from rpeconomy.factory import create_payroll_service
    payroll = create_payroll_service(session)

    # Testing usage
    from rpeconomy.services.interest_service import InterestService

    class FakePolicies:
        def find_current_policy(self):
            return None

    interest = InterestService(session, ledger, FakePolicies())
"""

from sqlalchemy.orm import Session

from rpeconomy.config import Settings
from rpeconomy.services.account_ledger import AccountLedger
from rpeconomy.services.banking_service import BankingService
from rpeconomy.services.government_service import GovernmentService
from rpeconomy.services.interest_service import InterestService
from rpeconomy.services.job_service import JobService
from rpeconomy.services.payroll_service import PayrollService
from rpeconomy.services.player_service import PlayerService
from rpeconomy.services.policy_store import PolicyStore


def create_policy_store(session: Session) -> PolicyStore:
    """Create a PolicyStore bound to ``session``."""
    return PolicyStore(session)


def create_account_ledger(session: Session) -> AccountLedger:
    """Create an AccountLedger with its PolicyStore dependency."""
    return AccountLedger(session, create_policy_store(session))


def create_banking_service(session: Session) -> BankingService:
    """Create a BankingService with its AccountLedger dependency."""
    return BankingService(session, create_account_ledger(session))


def create_government_service(
    session: Session, settings: Settings | None = None
) -> GovernmentService:
    """Create a GovernmentService with ledger and policy dependencies."""
    policies = create_policy_store(session)
    return GovernmentService(session, AccountLedger(session, policies), policies, settings)


def create_interest_service(session: Session) -> InterestService:
    """Create an InterestService with ledger and policy dependencies."""
    policies = create_policy_store(session)
    return InterestService(session, AccountLedger(session, policies), policies)


def create_payroll_service(session: Session, settings: Settings | None = None) -> PayrollService:
    """Create a PayrollService; the GovernmentService acts as its treasury."""
    policies = create_policy_store(session)
    ledger = AccountLedger(session, policies)
    treasury = GovernmentService(session, ledger, policies, settings)
    return PayrollService(session, ledger, policies, treasury)


def create_job_service(session: Session) -> JobService:
    """Create a JobService with its AccountLedger dependency."""
    return JobService(session, create_account_ledger(session))


def create_player_service(session: Session, settings: Settings | None = None) -> PlayerService:
    """Create a PlayerService with its AccountLedger dependency."""
    return PlayerService(session, create_account_ledger(session), settings)


def create_all_services(session: Session, settings: Settings | None = None) -> dict:
    """Create all services sharing one session, ledger and policy store.

    Returns:
        Dictionary containing all initialized services:
        - policies: PolicyStore
        - ledger: AccountLedger
        - banking: BankingService
        - government: GovernmentService
        - interest: InterestService
        - payroll: PayrollService
        - jobs: JobService
        - players: PlayerService
    """
    policies = PolicyStore(session)
    ledger = AccountLedger(session, policies)
    government = GovernmentService(session, ledger, policies, settings)
    return {
        "policies": policies,
        "ledger": ledger,
        "banking": BankingService(session, ledger),
        "government": government,
        "interest": InterestService(session, ledger, policies),
        "payroll": PayrollService(session, ledger, policies, government),
        "jobs": JobService(session, ledger),
        "players": PlayerService(session, ledger, settings),
    }
