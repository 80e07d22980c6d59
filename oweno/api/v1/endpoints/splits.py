from fastapi import APIRouter, HTTPException, status

from oweno.schemas.split import AllocateRequest
from oweno.services.split_service import SplitAllocation, SplitService
from oweno.utils.split_validation import SplitValidationError

router = APIRouter()


@router.post("/allocate", response_model=SplitAllocation)
def allocate_split(payload: AllocateRequest):
    """Split a total across participants; amounts always sum to the total."""
    try:
        return SplitService.allocate(
            payload.total_amount,
            payload.split_type,
            payload.participant_ids,
            payload.inputs
        )
    except SplitValidationError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(exc)
        )
