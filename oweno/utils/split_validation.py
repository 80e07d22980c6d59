"""Split and expense validation errors."""
from decimal import Decimal


class SplitValidationError(Exception):
    """Base class for every recoverable split/expense input error."""
    pass


class MismatchError(SplitValidationError):
    """EXACT amounts or PERCENT percentages don't reconcile to the expected total."""

    def __init__(self, expected: Decimal, actual: Decimal, unit: str = "amount"):
        self.expected = expected
        self.actual = actual
        self.unit = unit
        super().__init__(
            f"Split {unit} mismatch: sum is {actual}, need {expected} "
            f"(difference {self.difference})"
        )

    @property
    def difference(self) -> Decimal:
        return self.expected - self.actual


class NoParticipantsError(SplitValidationError):
    def __init__(self, message: str = "Select at least one person to split with"):
        super().__init__(message)


class NonPositiveSharesError(SplitValidationError):
    def __init__(self, message: str = "At least one share is needed"):
        super().__init__(message)


class InvalidSplitInputError(SplitValidationError):
    """Unparseable or negative values, duplicate participants, bad totals."""
    pass


class ExpenseValidationError(SplitValidationError):
    """Draft expense is inconsistent with its group (payer, participants, title)."""
    pass
