from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from oweno.main import app
from oweno.models.expense import Expense, Member, Split, SplitType


@pytest.fixture
def test_client():
    """Fixture for FastAPI test client."""
    with TestClient(app) as client:
        yield client


@pytest.fixture
def members():
    """Three group members: Alice, Bob and Charlie."""
    return [
        Member(id="alice", name="Alice"),
        Member(id="bob", name="Bob"),
        Member(id="charlie", name="Charlie"),
    ]


@pytest.fixture
def make_expense():
    """Factory for expenses with explicit splits."""
    counter = {"n": 0}

    def _make(paid_by, splits, amount=None, category="Dining", **kwargs):
        counter["n"] += 1
        split_models = [Split(user_id=uid, amount=Decimal(str(amt))) for uid, amt in splits]
        total = Decimal(str(amount)) if amount is not None else sum(
            (s.amount for s in split_models), Decimal(0)
        )
        data = dict(
            id=f"exp-{counter['n']}",
            group_id="group-1",
            title=f"Expense {counter['n']}",
            amount=total,
            paid_by_id=paid_by,
            date=datetime(2024, 1, 1, tzinfo=timezone.utc) + timedelta(days=counter["n"]),
            category=category,
            split_type=SplitType.EXACT,
            splits=split_models,
        )
        data.update(kwargs)
        return Expense(**data)

    return _make
