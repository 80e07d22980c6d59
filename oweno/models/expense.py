"""
Expense model - one shared cost and its per-member splits.

Design principles:
- Splits always sum to the expense amount, to the cent
- Edits replace the whole record (splits are never patched in place)
- Settlements are ordinary expenses tagged with ExpenseKind.SETTLEMENT
- split_metadata remembers what the user typed so edits survive rounding
"""

from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, model_validator

from oweno.core.config import settings
from oweno.utils.money import sum_cents, to_cents


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SplitType(str, Enum):
    EQUAL = "EQUAL"
    EXACT = "EXACT"
    PERCENT = "PERCENT"
    SHARES = "SHARES"


class ExpenseKind(str, Enum):
    EXPENSE = "expense"
    SETTLEMENT = "settlement"


class Member(BaseModel):
    id: str
    name: str = ""
    avatar: Optional[str] = None


class Split(BaseModel):
    user_id: str
    amount: Decimal = Field(ge=0)


# Original inputs, tagged by the strategy they were typed for
class ExactAmount(BaseModel):
    kind: Literal["exact"] = "exact"
    value: Decimal


class Percentage(BaseModel):
    kind: Literal["percent"] = "percent"
    value: Decimal


class ShareCount(BaseModel):
    kind: Literal["shares"] = "shares"
    value: Decimal


OriginalInput = Annotated[
    Union[ExactAmount, Percentage, ShareCount],
    Field(discriminator="kind"),
]

INPUT_TYPES = {
    SplitType.EXACT: ExactAmount,
    SplitType.PERCENT: Percentage,
    SplitType.SHARES: ShareCount,
}


class Expense(BaseModel):
    """
    A logged bill (or settlement) within a group.

    Invariants:
    - sum(splits.amount) == amount, in cents
    - kind == SETTLEMENT implies split_type EXACT and exactly one split
    """
    model_config = ConfigDict(populate_by_name=True)

    id: str
    group_id: str
    title: str
    amount: Decimal = Field(gt=0)
    paid_by_id: str
    date: datetime = Field(default_factory=_utcnow)
    category: str = "General"
    kind: ExpenseKind = ExpenseKind.EXPENSE
    split_type: SplitType = SplitType.EQUAL
    splits: List[Split] = []
    split_metadata: Dict[str, OriginalInput] = {}

    @model_validator(mode="before")
    @classmethod
    def _infer_settlement_kind(cls, data):
        # Records written before ExpenseKind existed only carry the category
        if isinstance(data, dict) and "kind" not in data:
            if data.get("category") == settings.SETTLEMENT_CATEGORY:
                data = {**data, "kind": ExpenseKind.SETTLEMENT}
        return data

    @model_validator(mode="after")
    def _check_invariants(self):
        if not self.splits:
            raise ValueError("Expense must have at least one split")
        split_total = sum_cents(split.amount for split in self.splits)
        if split_total != to_cents(self.amount):
            raise ValueError(
                f"Splits sum to {split_total} cents but expense amount is "
                f"{to_cents(self.amount)} cents"
            )
        if self.kind == ExpenseKind.SETTLEMENT:
            if self.split_type != SplitType.EXACT or len(self.splits) != 1:
                raise ValueError("Settlement must be an EXACT expense with a single split")
        return self

    @property
    def is_settlement(self) -> bool:
        return self.kind == ExpenseKind.SETTLEMENT

    def participant_ids(self) -> List[str]:
        """Split owners in split order."""
        return [split.user_id for split in self.splits]
