import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from oweno.core.config import settings
from oweno.models.expense import ExactAmount, Expense, ExpenseKind, Split, SplitType
from oweno.models.ledger import Debt
from oweno.utils.money import parse_decimal, quantize
from oweno.utils.split_validation import InvalidSplitInputError

logger = logging.getLogger(__name__)


class SettlementService:
    @staticmethod
    def build(
        debt: Debt,
        group_id: str,
        amount: Optional[Decimal] = None,
        expense_id: Optional[str] = None,
        date: Optional[datetime] = None,
        debtor_name: Optional[str] = None,
        creditor_name: Optional[str] = None,
    ) -> Expense:
        """
        Records "debtor paid creditor" as a settlement expense.

        The debtor is the payer and the creditor the only split owner, so
        the regular balance computation nets the debt out. Pass the stored
        expense_id and date to edit an existing settlement.
        """
        amount = quantize(debt.amount if amount is None else parse_decimal(amount, "Settlement amount"))
        if amount <= 0:
            raise InvalidSplitInputError("Settlement amount must be greater than zero")

        # A settlement may be partial or exceed the planned transfer
        if amount != debt.amount:
            logger.info(
                "Settlement %s -> %s of %s differs from planned %s",
                debt.from_user_id, debt.to_user_id, amount, debt.amount
            )

        debtor = debtor_name or debt.from_user_id
        creditor = creditor_name or debt.to_user_id

        return Expense(
            id=expense_id or uuid.uuid4().hex,
            group_id=group_id,
            title=f"Settle: {debtor} paid {creditor}",
            amount=amount,
            paid_by_id=debt.from_user_id,
            date=date or datetime.now(timezone.utc),
            category=settings.SETTLEMENT_CATEGORY,
            kind=ExpenseKind.SETTLEMENT,
            split_type=SplitType.EXACT,
            splits=[Split(user_id=debt.to_user_id, amount=amount)],
            split_metadata={debt.to_user_id: ExactAmount(value=amount)}
        )
