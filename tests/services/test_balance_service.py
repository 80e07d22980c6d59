"""
Tests for balances and the settlement reducer.

Covers:
- Paid/owed bookkeeping and zero-sum
- Users seen only in expenses
- Settlements cancelling debt
- Greedy debt simplification
- Spend aggregates and summaries
"""

from decimal import Decimal

from oweno.models.expense import ExpenseKind, Member, SplitType
from oweno.models.ledger import Balance, Debt, GroupLedger
from oweno.services.balance_service import BalanceService
from oweno.services.split_service import SplitService


def as_dict(balances):
    return {b.user_id: b.net for b in balances}


def settlement(make_expense, debtor, creditor, amount):
    return make_expense(
        debtor, [(creditor, amount)],
        category="Settlement", kind=ExpenseKind.SETTLEMENT
    )


class TestCalculateBalances:
    def test_payer_credited_split_owners_debited(self, members, make_expense):
        # Alice pays 90, split three ways
        expense = make_expense("alice", [("alice", "30"), ("bob", "30"), ("charlie", "30")])

        balances = BalanceService.calculate_balances(members, [expense])

        assert as_dict(balances) == {
            "alice": Decimal("60.00"),
            "bob": Decimal("-30.00"),
            "charlie": Decimal("-30.00"),
        }

    def test_members_without_expenses_are_zero(self, members):
        balances = BalanceService.calculate_balances(members, [])
        assert [b.user_id for b in balances] == ["alice", "bob", "charlie"]
        assert all(b.net == 0 for b in balances)

    def test_empty_members_uses_expense_users(self, make_expense):
        expense = make_expense("alice", [("bob", "10")])
        balances = BalanceService.calculate_balances([], [expense])
        assert as_dict(balances) == {"alice": Decimal("10.00"), "bob": Decimal("-10.00")}

    def test_user_absent_from_members_included(self, make_expense):
        """B only appears as a split owner but still gets a balance."""
        expense = make_expense("alice", [("bob", "10")])

        balances = BalanceService.calculate_balances([Member(id="alice")], [expense])

        assert [b.user_id for b in balances] == ["alice", "bob"]
        assert as_dict(balances) == {"alice": Decimal("10.00"), "bob": Decimal("-10.00")}

    def test_balances_sum_to_zero(self, members, make_expense):
        expenses = []
        for payer, total in [("alice", "100.00"), ("bob", "33.33"), ("charlie", "0.07"), ("bob", "250.10")]:
            allocation = SplitService.allocate(total, SplitType.EQUAL, ["alice", "bob", "charlie"])
            expenses.append(make_expense(payer, [(s.user_id, s.amount) for s in allocation.splits]))
        expenses.append(make_expense("dave", [("alice", "12.34")]))

        balances = BalanceService.calculate_balances(members, expenses)

        assert sum((b.net for b in balances), Decimal(0)) == 0

    def test_settlement_cancels_debt(self, make_expense):
        """A pays 100 split equally; B then settles 50 with A."""
        pair = [Member(id="a"), Member(id="b")]
        dinner = make_expense("a", [("a", "50"), ("b", "50")])

        before = BalanceService.calculate_balances(pair, [dinner])
        assert as_dict(before) == {"a": Decimal("50.00"), "b": Decimal("-50.00")}

        after = BalanceService.calculate_balances(pair, [dinner, settlement(make_expense, "b", "a", "50")])
        assert as_dict(after) == {"a": Decimal("0.00"), "b": Decimal("0.00")}
        assert BalanceService.simplify_debts(after) == []

    def test_many_small_amounts_do_not_drift(self, make_expense):
        pair = [Member(id="a"), Member(id="b")]
        expenses = [make_expense("a", [("a", "0.05"), ("b", "0.05")]) for _ in range(30)]
        expenses.append(make_expense("b", [("a", "1.50")]))

        balances = BalanceService.calculate_balances(pair, expenses)

        assert as_dict(balances) == {"a": Decimal("0.00"), "b": Decimal("0.00")}


class TestSimplifyDebts:
    def test_sole_debtor_pays_largest_creditor_first(self):
        balances = [
            Balance(user_id="A", net=Decimal("60")),
            Balance(user_id="B", net=Decimal("40")),
            Balance(user_id="C", net=Decimal("-100")),
        ]

        debts = BalanceService.simplify_debts(balances)

        assert debts == [
            Debt(from_user_id="C", to_user_id="A", amount=Decimal("60.00")),
            Debt(from_user_id="C", to_user_id="B", amount=Decimal("40.00")),
        ]

    def test_largest_debtor_matched_first(self):
        balances = [
            Balance(user_id="A", net=Decimal("-10")),
            Balance(user_id="B", net=Decimal("-70")),
            Balance(user_id="C", net=Decimal("80")),
        ]

        debts = BalanceService.simplify_debts(balances)

        assert [(d.from_user_id, d.to_user_id, d.amount) for d in debts] == [
            ("B", "C", Decimal("70.00")),
            ("A", "C", Decimal("10.00")),
        ]

    def test_chain_collapses(self):
        """A owes B 10 and B owes C 10 -> A pays C directly."""
        balances = [
            Balance(user_id="A", net=Decimal("-10")),
            Balance(user_id="B", net=Decimal("0")),
            Balance(user_id="C", net=Decimal("10")),
        ]
        debts = BalanceService.simplify_debts(balances)
        assert [(d.from_user_id, d.to_user_id, d.amount) for d in debts] == [("A", "C", Decimal("10.00"))]

    def test_sub_cent_balances_ignored(self):
        balances = [
            Balance(user_id="A", net=Decimal("0.004")),
            Balance(user_id="B", net=Decimal("-0.004")),
        ]
        assert BalanceService.simplify_debts(balances) == []

    def test_empty(self):
        assert BalanceService.simplify_debts([]) == []

    def test_transfers_bring_everyone_to_zero(self):
        balances = [
            Balance(user_id="A", net=Decimal("25.50")),
            Balance(user_id="B", net=Decimal("-13.25")),
            Balance(user_id="C", net=Decimal("40.00")),
            Balance(user_id="D", net=Decimal("-52.25")),
        ]

        debts = BalanceService.simplify_debts(balances)

        remaining = {b.user_id: b.net for b in balances}
        for debt in debts:
            remaining[debt.from_user_id] += debt.amount
            remaining[debt.to_user_id] -= debt.amount
        assert all(v == 0 for v in remaining.values())
        assert len(debts) <= len(balances) - 1


class TestAggregates:
    def test_total_spend_excludes_settlements(self, make_expense):
        expenses = [
            make_expense("a", [("a", "30"), ("b", "30")]),
            settlement(make_expense, "b", "a", "30"),
        ]
        assert BalanceService.total_spend(expenses) == Decimal("60.00")

    def test_history_total_deducts_settlements(self, make_expense):
        expenses = [
            make_expense("a", [("a", "30"), ("b", "30")]),
            settlement(make_expense, "b", "a", "20"),
        ]
        assert BalanceService.history_total(expenses) == Decimal("40.00")

    def test_legacy_settlement_category_recognised(self, make_expense):
        legacy = make_expense("b", [("a", "20")], category="Settlement")
        assert legacy.kind == ExpenseKind.SETTLEMENT
        assert BalanceService.total_spend([legacy]) == Decimal("0.00")

    def test_summarize_user(self):
        balances = [
            Balance(user_id="A", net=Decimal("60")),
            Balance(user_id="B", net=Decimal("40")),
            Balance(user_id="C", net=Decimal("-100")),
        ]

        summary_c = BalanceService.summarize_user("C", balances)
        summary_a = BalanceService.summarize_user("A", balances)

        assert summary_c.to_settle == Decimal("100")
        assert summary_c.to_receive == 0
        assert [d.to_user_id for d in summary_c.debts] == ["A", "B"]
        assert summary_c.credits == []
        assert summary_a.to_receive == Decimal("60")
        assert [d.from_user_id for d in summary_a.credits] == ["C"]

    def test_summarize_unknown_user(self):
        summary = BalanceService.summarize_user("ghost", [])
        assert summary.net == 0
        assert summary.debts == [] and summary.credits == []

    def test_dashboard_nets_across_groups(self, make_expense):
        pair = [Member(id="a"), Member(id="b")]
        trip = GroupLedger(group_id="trip", members=pair, expenses=[
            make_expense("a", [("a", "50"), ("b", "50")], group_id="trip"),
        ])
        flat = GroupLedger(group_id="flat", members=pair, expenses=[
            make_expense("b", [("a", "20")], group_id="flat"),
        ])

        summary = BalanceService.dashboard_summary("a", [trip, flat])

        # +50 in one group, -20 in the other
        assert summary.total_net == Decimal("30.00")
        assert summary.to_receive == Decimal("30.00")
        assert summary.to_settle == Decimal("0.00")
        assert summary.debts == []
        assert summary.credits == [
            Debt(from_user_id="b", to_user_id="a", amount=Decimal("30.00"))
        ]

    def test_dashboard_offsetting_groups_are_settled(self, make_expense):
        """+10 in one group and -10 in another leaves nothing to receive or settle."""
        g1 = GroupLedger(group_id="g1", members=[Member(id="me"), Member(id="x")], expenses=[
            make_expense("me", [("x", "10")], group_id="g1"),
        ])
        g2 = GroupLedger(group_id="g2", members=[Member(id="me"), Member(id="y")], expenses=[
            make_expense("y", [("me", "10")], group_id="g2"),
        ])

        summary = BalanceService.dashboard_summary("me", [g1, g2])

        assert summary.total_net == 0
        assert summary.to_receive == 0
        assert summary.to_settle == 0
        assert summary.debts == [] and summary.credits == []
