import logging
from decimal import Decimal
from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel

from oweno.core.config import settings
from oweno.models.expense import INPUT_TYPES, OriginalInput, Split, SplitType
from oweno.utils.money import from_cents, parse_decimal, quantize, round_cents, to_cents
from oweno.utils.split_validation import (
    InvalidSplitInputError,
    MismatchError,
    NoParticipantsError,
    NonPositiveSharesError,
)

logger = logging.getLogger(__name__)

HUNDRED = Decimal(100)


class SplitAllocation(BaseModel):
    splits: List[Split]
    metadata: Dict[str, OriginalInput] = {}


class SplitService:
    @staticmethod
    def allocate(
        total_amount: Any,
        split_type: SplitType,
        participant_ids: Sequence[str],
        inputs: Optional[Mapping[str, Any]] = None,
    ) -> SplitAllocation:
        """
        Allocates an expense total across its participants.

        Amounts always sum exactly to the total. Rounding slack goes to the
        first participant for EQUAL and to the last participant with a
        non-zero weight for PERCENT/SHARES.
        Raises a SplitValidationError subclass; nothing is returned partially.
        """
        split_type = SplitType(split_type)
        total_cents = SplitService._validate_total(total_amount)
        participants = SplitService._validate_participants(participant_ids)
        inputs = inputs or {}

        if split_type == SplitType.EQUAL:
            cents = SplitService._equal(total_cents, len(participants))
            values: Dict[str, Decimal] = {}
        else:
            values = {
                user_id: SplitService._parse_input(split_type, user_id, inputs.get(user_id))
                for user_id in participants
            }
            if split_type == SplitType.EXACT:
                cents = SplitService._exact(total_cents, participants, values)
            elif split_type == SplitType.PERCENT:
                cents = SplitService._percent(total_cents, participants, values)
            else:
                cents = SplitService._shares(total_cents, participants, values)

        splits = [
            Split(user_id=user_id, amount=from_cents(amount))
            for user_id, amount in zip(participants, cents)
        ]
        metadata = {}
        if split_type != SplitType.EQUAL:
            input_type = INPUT_TYPES[split_type]
            metadata = {user_id: input_type(value=values[user_id]) for user_id in participants}

        logger.debug(
            "Allocated %s cents across %d participants (%s)",
            total_cents, len(participants), split_type.value
        )
        return SplitAllocation(splits=splits, metadata=metadata)

    # ===== VALIDATION =====

    @staticmethod
    def _validate_total(total_amount: Any) -> int:
        total_cents = to_cents(total_amount)
        if total_cents <= 0:
            raise InvalidSplitInputError(
                f"Total amount must be greater than zero, got {total_amount}"
            )
        return total_cents

    @staticmethod
    def _validate_participants(participant_ids: Sequence[str]) -> List[str]:
        participants = list(participant_ids or [])
        if not participants:
            raise NoParticipantsError()
        if len(set(participants)) != len(participants):
            raise InvalidSplitInputError("Participants must be distinct")
        return participants

    @staticmethod
    def _parse_input(split_type: SplitType, user_id: str, raw: Any) -> Decimal:
        if isinstance(raw, tuple(INPUT_TYPES.values())):
            raw = raw.value
        value = parse_decimal(raw, f"Input for {user_id}")
        if value < 0:
            if split_type == SplitType.SHARES:
                raise NonPositiveSharesError(f"Shares cannot be negative ({user_id}: {raw})")
            raise InvalidSplitInputError(f"Input for {user_id} cannot be negative: {raw}")
        return value

    # ===== STRATEGIES =====

    @staticmethod
    def _equal(total_cents: int, count: int) -> List[int]:
        base = total_cents // count
        remainder = total_cents - base * count
        return [base + remainder] + [base] * (count - 1)

    @staticmethod
    def _exact(total_cents: int, participants: List[str], values: Dict[str, Decimal]) -> List[int]:
        for user_id in participants:
            if values[user_id] != quantize(values[user_id]):
                raise InvalidSplitInputError(
                    f"Amount for {user_id} has more than {settings.CURRENCY_PLACES} decimal places: {values[user_id]}"
                )
        cents = [to_cents(values[user_id]) for user_id in participants]
        if sum(cents) != total_cents:
            logger.info("Rejected EXACT split: %s cents vs total %s", sum(cents), total_cents)
            raise MismatchError(from_cents(total_cents), from_cents(sum(cents)))
        return cents

    @staticmethod
    def _percent(total_cents: int, participants: List[str], values: Dict[str, Decimal]) -> List[int]:
        percent_total = sum(values.values(), Decimal(0))
        if percent_total != HUNDRED:
            logger.info("Rejected PERCENT split: percentages sum to %s", percent_total)
            raise MismatchError(HUNDRED, percent_total, unit="percentage")
        weights = [values[user_id] / HUNDRED for user_id in participants]
        return SplitService._weighted(total_cents, weights)

    @staticmethod
    def _shares(total_cents: int, participants: List[str], values: Dict[str, Decimal]) -> List[int]:
        share_total = sum(values.values(), Decimal(0))
        if share_total <= 0:
            raise NonPositiveSharesError()
        weights = [values[user_id] / share_total for user_id in participants]
        return SplitService._weighted(total_cents, weights)

    @staticmethod
    def _weighted(total_cents: int, weights: List[Decimal]) -> List[int]:
        """
        Zero-weight participants get nothing; every other participant but
        the last weighted one is rounded, and that last one absorbs the rest.
        """
        absorber = max(i for i, weight in enumerate(weights) if weight > 0)
        cents = [0] * len(weights)
        running = 0
        for i, weight in enumerate(weights):
            if i == absorber or weight == 0:
                continue
            cents[i] = round_cents(Decimal(total_cents) * weight)
            running += cents[i]
        cents[absorber] = total_cents - running
        if cents[absorber] < 0:
            raise InvalidSplitInputError(
                f"Rounding each share of {from_cents(total_cents)} overshoots the total "
                f"by {from_cents(-cents[absorber])}; adjust the weights"
            )
        return cents
