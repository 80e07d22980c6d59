from pydantic import BaseModel
from datetime import datetime
from decimal import Decimal
from typing import Optional

from oweno.models.ledger import Debt

class SettlementCreate(BaseModel):
    group_id: str
    debt: Debt
    amount: Optional[Decimal] = None
    expense_id: Optional[str] = None
    date: Optional[datetime] = None
    debtor_name: Optional[str] = None
    creditor_name: Optional[str] = None
