from decimal import Decimal
from typing import List

from pydantic import BaseModel

from oweno.models.expense import Expense, Member
from oweno.models.ledger import Balance, Debt, GroupLedger


class LedgerRequest(BaseModel):
    """A consistent snapshot of a group (or a user's) expense history."""
    members: List[Member] = []
    expenses: List[Expense] = []


class LedgerResponse(BaseModel):
    balances: List[Balance]
    debts: List[Debt]
    total_spend: Decimal
    history_total: Decimal


class DashboardRequest(BaseModel):
    groups: List[GroupLedger] = []
