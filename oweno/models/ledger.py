"""
Ledger models - positions and transfers derived from expense history.

Nothing here is persisted; every value is recomputed from the full set
of expenses on each query.
"""

from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field

from oweno.models.expense import Expense, Member


class Balance(BaseModel):
    """Net position: positive = owed money, negative = owes money."""
    user_id: str
    net: Decimal


class Debt(BaseModel):
    """One transfer in a settlement plan."""
    from_user_id: str
    to_user_id: str
    amount: Decimal = Field(gt=0)


class UserSummary(BaseModel):
    user_id: str
    net: Decimal
    to_receive: Decimal
    to_settle: Decimal
    debts: List[Debt] = []    # transfers the user should make
    credits: List[Debt] = []  # transfers the user should receive


class GroupLedger(BaseModel):
    group_id: str
    members: List[Member] = []
    expenses: List[Expense] = []


class DashboardSummary(BaseModel):
    """Cross-group position; to_receive/to_settle derive from the pooled net."""
    user_id: str
    total_net: Decimal
    to_receive: Decimal
    to_settle: Decimal
    debts: List[Debt] = []
    credits: List[Debt] = []
