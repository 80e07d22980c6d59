from fastapi import APIRouter, HTTPException, status

from oweno.models.expense import Expense
from oweno.schemas.settlement import SettlementCreate
from oweno.services.settlement_service import SettlementService
from oweno.utils.split_validation import SplitValidationError

router = APIRouter()

@router.post("", response_model=Expense)
def create_settlement(settlement_in: SettlementCreate):
    try:
        return SettlementService.build(
            settlement_in.debt,
            settlement_in.group_id,
            amount=settlement_in.amount,
            expense_id=settlement_in.expense_id,
            date=settlement_in.date,
            debtor_name=settlement_in.debtor_name,
            creditor_name=settlement_in.creditor_name
        )
    except SplitValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
