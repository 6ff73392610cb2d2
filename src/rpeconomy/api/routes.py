"""HTTP routes for the economy API.

Thin adapters: validate the request, call one service operation, and turn
its result (or ``LedgerError``) into a response.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, HTTPException, Query, Request, status
from pydantic import BaseModel, Field

from rpeconomy.api.runtime import ApiState
from rpeconomy.database import count_rows, storage_errors
from rpeconomy.domain.errors import ErrorKind, LedgerError
from rpeconomy.domain.results import OperationResult
from rpeconomy.factory import create_all_services
from rpeconomy.models import LedgerEntry
from rpeconomy.schemas import (
    AccountCreate,
    AccountRead,
    JobCreate,
    JobRead,
    LedgerEntryRead,
    PlayerCreate,
    PlayerRead,
    PolicyRead,
    PolicyUpdate,
)

router = APIRouter()

UNPROCESSABLE = 422

STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.INSUFFICIENT_FUNDS: UNPROCESSABLE,
    ErrorKind.INSUFFICIENT_CASH: UNPROCESSABLE,
    ErrorKind.BUSINESS_ACCOUNT_RESTRICTION: UNPROCESSABLE,
    ErrorKind.INVALID_AMOUNT: UNPROCESSABLE,
    ErrorKind.ACCOUNT_INACTIVE: UNPROCESSABLE,
    ErrorKind.INVALID_POLICY: UNPROCESSABLE,
    ErrorKind.ZERO_OR_NEGATIVE_APR: UNPROCESSABLE,
    ErrorKind.ALREADY_EXISTS: status.HTTP_409_CONFLICT,
    ErrorKind.TRANSACTION_CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.POLICY_MISSING: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.STORAGE_ERROR: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def http_error(kind: ErrorKind, message: str) -> HTTPException:
    """Build the HTTP error for a ledger failure."""
    return HTTPException(
        status_code=STATUS_BY_KIND.get(kind, status.HTTP_400_BAD_REQUEST),
        detail={"error": str(kind), "message": message},
    )


def ensure_success(result: OperationResult) -> None:
    if not result.success:
        raise http_error(result.error or ErrorKind.STORAGE_ERROR, result.message)


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def get_services(state: ApiStateDep) -> Iterator[dict[str, Any]]:
    with state.session() as session:
        yield create_all_services(session, state.settings)


ServicesDep = Annotated[dict[str, Any], Depends(get_services)]
LimitQuery = Annotated[int | None, Query(ge=1, le=500)]


class CashMovementRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    account_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)


class CashMovementResponse(BaseModel):
    message: str
    player: PlayerRead
    account: AccountRead


class TransferRequest(BaseModel):
    from_account_id: str = Field(..., min_length=1)
    to_account_id: str = Field(..., min_length=1)
    amount: int = Field(..., gt=0)
    initiator_id: str = Field(..., min_length=1, description="Player initiating the transfer")


class TransferResponse(BaseModel):
    message: str
    from_account: AccountRead
    to_account: AccountRead
    correlation_id: str


class AssignJobRequest(BaseModel):
    player_id: str = Field(..., min_length=1)
    job_id: int


class PaySalaryRequest(BaseModel):
    player_id: str = Field(..., min_length=1)


class PayrollResponse(BaseModel):
    message: str
    player_account: AccountRead
    gov_account: AccountRead
    gross_salary: int
    net_salary: int
    tax_amount: int
    correlation_id: str


class ApplyInterestRequest(BaseModel):
    period: str | None = Field(
        default=None,
        pattern=r"^\d{4}-(0[1-9]|1[0-2])$",
        description="Accrual period YYYY-MM; defaults to the current month",
    )


class AccrualFailureRead(BaseModel):
    account_id: str
    error: str
    message: str


class InterestResponse(BaseModel):
    message: str
    period: str
    accounts_updated: int
    accounts_skipped: int
    interest_paid: int
    failures: list[AccrualFailureRead]


class TreasuryResponse(BaseModel):
    name: str
    player_id: str
    account: AccountRead


# ----------------------------------------------------------------------
# Health
# ----------------------------------------------------------------------


@router.get("/health")
def health(services: ServicesDep) -> dict[str, object]:
    policy = services["policies"].find_current_policy()
    with storage_errors():
        entries = count_rows(services["ledger"].session, LedgerEntry.__tablename__)
    return {
        "status": "ok",
        "policy_version": policy.id if policy is not None else None,
        "government_ready": services["government"].find_government() is not None,
        "ledger_entries": entries,
    }


# ----------------------------------------------------------------------
# Players & jobs
# ----------------------------------------------------------------------


@router.post("/players", response_model=PlayerRead, status_code=status.HTTP_201_CREATED)
def create_player(request: PlayerCreate, services: ServicesDep) -> PlayerRead:
    player = services["players"].create_player(
        request.first_name,
        request.last_name,
        cash=request.cash,
        job_id=request.job_id,
        attributes=request.attributes,
    )
    return PlayerRead.model_validate(player)


@router.get("/players", response_model=list[PlayerRead])
def list_players(services: ServicesDep) -> list[PlayerRead]:
    return [PlayerRead.model_validate(p) for p in services["players"].list_players()]


@router.get("/players/{player_id}", response_model=PlayerRead)
def get_player(player_id: str, services: ServicesDep) -> PlayerRead:
    return PlayerRead.model_validate(services["players"].get_player(player_id))


@router.post("/jobs/create", response_model=JobRead, status_code=status.HTTP_201_CREATED)
def create_job(request: JobCreate, services: ServicesDep) -> JobRead:
    return JobRead.model_validate(services["jobs"].create_job(request.name, request.salary))


@router.get("/jobs", response_model=list[JobRead])
def list_jobs(services: ServicesDep) -> list[JobRead]:
    return [JobRead.model_validate(job) for job in services["jobs"].list_jobs()]


@router.post("/jobs/assign", response_model=PlayerRead)
def assign_job(request: AssignJobRequest, services: ServicesDep) -> PlayerRead:
    player = services["jobs"].assign_job(request.player_id, request.job_id)
    return PlayerRead.model_validate(player)


@router.post("/jobs/pay", response_model=PayrollResponse)
def pay_salary(request: PaySalaryRequest, services: ServicesDep) -> PayrollResponse:
    result = services["payroll"].pay_salary(request.player_id)
    ensure_success(result)
    return PayrollResponse(
        message=result.message,
        player_account=AccountRead.model_validate(result.player_account),
        gov_account=AccountRead.model_validate(result.gov_account),
        gross_salary=result.gross_salary,
        net_salary=result.net_salary,
        tax_amount=result.tax_amount,
        correlation_id=result.correlation_id,
    )


# ----------------------------------------------------------------------
# Bank
# ----------------------------------------------------------------------


@router.get("/bank/accounts/{owner_id}", response_model=list[AccountRead])
def get_accounts_by_owner(owner_id: str, services: ServicesDep) -> list[AccountRead]:
    accounts = services["ledger"].get_accounts_by_owner(owner_id)
    return [AccountRead.model_validate(account) for account in accounts]


@router.get("/bank/account/{account_id}", response_model=AccountRead)
def get_account(account_id: str, services: ServicesDep) -> AccountRead:
    return AccountRead.model_validate(services["ledger"].get_account(account_id))


@router.post(
    "/bank/accounts", response_model=list[AccountRead], status_code=status.HTTP_201_CREATED
)
def create_accounts(request: AccountCreate, services: ServicesDep) -> list[AccountRead]:
    accounts = services["ledger"].create_accounts_for_owner(request.owner_id, request.type)
    return [AccountRead.model_validate(account) for account in accounts]


@router.post("/bank/deposit", response_model=CashMovementResponse)
def deposit(request: CashMovementRequest, services: ServicesDep) -> CashMovementResponse:
    result = services["banking"].deposit(request.player_id, request.account_id, request.amount)
    ensure_success(result)
    return CashMovementResponse(
        message=result.message,
        player=PlayerRead.model_validate(result.player),
        account=AccountRead.model_validate(result.account),
    )


@router.post("/bank/withdraw", response_model=CashMovementResponse)
def withdraw(request: CashMovementRequest, services: ServicesDep) -> CashMovementResponse:
    result = services["banking"].withdraw(request.player_id, request.account_id, request.amount)
    ensure_success(result)
    return CashMovementResponse(
        message=result.message,
        player=PlayerRead.model_validate(result.player),
        account=AccountRead.model_validate(result.account),
    )


@router.post("/bank/transfer", response_model=TransferResponse)
def transfer(request: TransferRequest, services: ServicesDep) -> TransferResponse:
    result = services["banking"].transfer(
        request.from_account_id,
        request.to_account_id,
        request.amount,
        request.initiator_id,
    )
    ensure_success(result)
    return TransferResponse(
        message=result.message,
        from_account=AccountRead.model_validate(result.from_account),
        to_account=AccountRead.model_validate(result.to_account),
        correlation_id=result.correlation_id,
    )


# ----------------------------------------------------------------------
# Transactions
# ----------------------------------------------------------------------


@router.get("/transactions/player/{player_id}", response_model=list[LedgerEntryRead])
def transactions_by_player(
    player_id: str, services: ServicesDep, state: ApiStateDep, limit: LimitQuery = None
) -> list[LedgerEntryRead]:
    limit = limit or state.settings.transaction_page_size
    entries = services["ledger"].get_transactions_by_player(player_id, limit)
    return [LedgerEntryRead.model_validate(entry) for entry in entries]


@router.get("/transactions/account/{account_id}", response_model=list[LedgerEntryRead])
def transactions_by_account(
    account_id: str, services: ServicesDep, state: ApiStateDep, limit: LimitQuery = None
) -> list[LedgerEntryRead]:
    limit = limit or state.settings.transaction_page_size
    entries = services["ledger"].get_transactions_by_account(account_id, limit)
    return [LedgerEntryRead.model_validate(entry) for entry in entries]


@router.get("/transactions/correlation/{correlation_id}", response_model=list[LedgerEntryRead])
def transactions_by_correlation(
    correlation_id: str, services: ServicesDep
) -> list[LedgerEntryRead]:
    entries = services["ledger"].get_transactions_by_correlation(correlation_id)
    return [LedgerEntryRead.model_validate(entry) for entry in entries]


@router.get("/transactions/{entry_id}", response_model=LedgerEntryRead)
def get_transaction(entry_id: int, services: ServicesDep) -> LedgerEntryRead:
    return LedgerEntryRead.model_validate(services["ledger"].get_transaction(entry_id))


# ----------------------------------------------------------------------
# Government
# ----------------------------------------------------------------------


@router.get("/government/policy", response_model=PolicyRead)
def get_policy(services: ServicesDep) -> PolicyRead:
    return PolicyRead.model_validate(services["policies"].get_current_policy())


@router.get("/government/policy/history", response_model=list[PolicyRead])
def policy_history(
    services: ServicesDep, state: ApiStateDep, limit: LimitQuery = None
) -> list[PolicyRead]:
    limit = limit or state.settings.transaction_page_size
    return [PolicyRead.model_validate(p) for p in services["policies"].list_policies(limit)]


@router.post("/government/policy/update", response_model=PolicyRead)
def update_policy(request: PolicyUpdate, services: ServicesDep) -> PolicyRead:
    policy = services["policies"].update_policy(request.model_dump(exclude_none=True))
    return PolicyRead.model_validate(policy)


@router.post("/government/apply-interest", response_model=InterestResponse)
def apply_interest(
    services: ServicesDep,
    request: Annotated[ApplyInterestRequest | None, Body()] = None,
) -> InterestResponse:
    period = request.period if request is not None else None
    result = services["interest"].apply_savings_interest(period)
    ensure_success(result)
    return InterestResponse(
        message=result.message,
        period=result.period,
        accounts_updated=result.accounts_updated,
        accounts_skipped=result.accounts_skipped,
        interest_paid=result.interest_paid,
        failures=[
            AccrualFailureRead(
                account_id=failure.account_id, error=str(failure.error), message=failure.message
            )
            for failure in result.failures
        ],
    )


@router.get("/government/treasury", response_model=TreasuryResponse)
def get_treasury(services: ServicesDep) -> TreasuryResponse:
    government = services["government"].get_government()
    account = services["government"].get_treasury_account()
    return TreasuryResponse(
        name=government.name,
        player_id=government.player_id,
        account=AccountRead.model_validate(account),
    )


def ledger_error_detail(exc: LedgerError) -> tuple[int, dict[str, str]]:
    """Status code and body for a ``LedgerError`` raised by a read or admin call."""
    code = STATUS_BY_KIND.get(exc.kind, status.HTTP_400_BAD_REQUEST)
    return code, {"error": str(exc.kind), "message": exc.message}
