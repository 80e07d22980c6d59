import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable

from oweno.core.config import settings
from oweno.models.expense import Expense, ExpenseKind, Member, SplitType
from oweno.schemas.expense import ExpenseDraft
from oweno.services.split_service import SplitService
from oweno.utils.money import quantize
from oweno.utils.split_validation import ExpenseValidationError

logger = logging.getLogger(__name__)


class ExpenseService:
    @staticmethod
    def compose(draft: ExpenseDraft, members: Iterable[Member]) -> Expense:
        """
        Builds a complete expense from a form draft.

        Validates the draft against the group, then allocates splits from
        scratch. Raises SplitValidationError subclasses.
        """
        member_ids = {m.id for m in members}
        ExpenseService._validate_draft(draft, member_ids)

        allocation = SplitService.allocate(
            draft.amount, draft.split_type, draft.participant_ids, draft.inputs
        )

        return Expense(
            id=draft.id or uuid.uuid4().hex,
            group_id=draft.group_id,
            title=draft.title.strip(),
            amount=quantize(draft.amount),
            paid_by_id=draft.paid_by_id,
            date=draft.date or datetime.now(timezone.utc),
            category=draft.category,
            kind=ExpenseKind.EXPENSE,
            split_type=draft.split_type,
            splits=allocation.splits,
            split_metadata=allocation.metadata
        )

    @staticmethod
    def recompose(existing: Expense, draft: ExpenseDraft, members: Iterable[Member]) -> Expense:
        """Replaces an expense wholesale; only its id and (by default) date survive."""
        updates = {"id": existing.id}
        if draft.date is None:
            updates["date"] = existing.date
        return ExpenseService.compose(draft.model_copy(update=updates), members)

    @staticmethod
    def edit_inputs(expense: Expense) -> Dict[str, str]:
        """
        Per-participant values to pre-fill the edit form with.

        Stored metadata wins; otherwise the value is derived from the split
        amounts, which may have lost precision to rounding.
        """
        if expense.split_type == SplitType.EQUAL:
            return {}

        inputs: Dict[str, str] = {}
        for split in expense.splits:
            original = expense.split_metadata.get(split.user_id)
            if original is not None:
                inputs[split.user_id] = str(original.value)
            elif expense.split_type == SplitType.EXACT:
                inputs[split.user_id] = str(split.amount)
            elif expense.split_type == SplitType.PERCENT:
                percent = (split.amount / expense.amount * 100).quantize(
                    Decimal("0.1"), rounding=ROUND_HALF_UP
                )
                inputs[split.user_id] = str(percent)
            else:
                inputs[split.user_id] = "1"
        return inputs

    @staticmethod
    def _validate_draft(draft: ExpenseDraft, member_ids: set) -> None:
        if len(draft.title.strip()) < settings.MIN_TITLE_LENGTH:
            raise ExpenseValidationError(
                f"Bill title must be at least {settings.MIN_TITLE_LENGTH} characters long"
            )

        if draft.category == settings.SETTLEMENT_CATEGORY:
            raise ExpenseValidationError(
                "Settlements are recorded from a debt, not composed as expenses"
            )

        if draft.paid_by_id not in member_ids:
            logger.warning("Payer %s is not a member of group %s", draft.paid_by_id, draft.group_id)
            raise ExpenseValidationError("Paid by user is not a member of the group")

        outsiders = [p for p in draft.participant_ids if p not in member_ids]
        if outsiders:
            raise ExpenseValidationError(
                f"Participants are not members of the group: {', '.join(outsiders)}"
            )
