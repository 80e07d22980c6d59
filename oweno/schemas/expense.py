from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional, Union

from pydantic import BaseModel, Field

from oweno.models.expense import Expense, Member, SplitType


class ExpenseDraft(BaseModel):
    """What the add/edit expense form submits."""
    id: Optional[str] = None
    group_id: str
    title: str
    amount: Decimal
    paid_by_id: str
    date: Optional[datetime] = None
    category: str = "General"
    split_type: SplitType = SplitType.EQUAL
    participant_ids: List[str]
    inputs: Dict[str, Union[str, Decimal]] = {}


class ComposeRequest(BaseModel):
    """Compose (or, with `existing`, recompose) an expense against its group."""
    draft: ExpenseDraft
    members: List[Member] = Field(min_length=1)
    existing: Optional[Expense] = None


class EditInputsResponse(BaseModel):
    split_type: SplitType
    participant_ids: List[str]
    inputs: Dict[str, str] = {}
