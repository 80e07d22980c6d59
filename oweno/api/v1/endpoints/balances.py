from fastapi import APIRouter

from oweno.models.ledger import DashboardSummary, UserSummary
from oweno.schemas.balance import DashboardRequest, LedgerRequest, LedgerResponse
from oweno.services.balance_service import BalanceService

router = APIRouter()


@router.post("", response_model=LedgerResponse)
def get_balances(payload: LedgerRequest):
    """Net balances and the simplified settlement plan."""
    balances = BalanceService.calculate_balances(payload.members, payload.expenses)
    return LedgerResponse(
        balances=balances,
        debts=BalanceService.simplify_debts(balances),
        total_spend=BalanceService.total_spend(payload.expenses),
        history_total=BalanceService.history_total(payload.expenses)
    )


@router.post("/summary/{user_id}", response_model=UserSummary)
def get_user_summary(user_id: str, payload: LedgerRequest):
    balances = BalanceService.calculate_balances(payload.members, payload.expenses)
    return BalanceService.summarize_user(user_id, balances)


@router.post("/dashboard/{user_id}", response_model=DashboardSummary)
def get_dashboard(user_id: str, payload: DashboardRequest):
    """User's position summed group by group."""
    return BalanceService.dashboard_summary(user_id, payload.groups)
