from fastapi import APIRouter, HTTPException, status

from oweno.models.expense import Expense
from oweno.schemas.expense import ComposeRequest, EditInputsResponse
from oweno.services.expense_service import ExpenseService
from oweno.utils.split_validation import SplitValidationError

router = APIRouter()


@router.post("/compose", response_model=Expense)
def compose_expense(payload: ComposeRequest):
    """Build an expense from a form draft (or replace `existing` wholesale)."""
    try:
        if payload.existing is not None:
            return ExpenseService.recompose(payload.existing, payload.draft, payload.members)
        return ExpenseService.compose(payload.draft, payload.members)
    except SplitValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )


@router.post("/edit-inputs", response_model=EditInputsResponse)
def get_edit_inputs(expense: Expense):
    """Values to pre-fill the edit form with."""
    return EditInputsResponse(
        split_type=expense.split_type,
        participant_ids=expense.participant_ids(),
        inputs=ExpenseService.edit_inputs(expense)
    )
