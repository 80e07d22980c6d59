import logging
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

from oweno.models.expense import Expense, Member
from oweno.models.ledger import Balance, DashboardSummary, Debt, GroupLedger, UserSummary
from oweno.utils.money import from_cents, to_cents

logger = logging.getLogger(__name__)


class BalanceService:
    @staticmethod
    def calculate_balances(members: Iterable[Member], expenses: Iterable[Expense]) -> List[Balance]:
        """
        Computes every user's net position from the full expense history.

        Settlements go through the same paid/owed bookkeeping as any other
        expense. Users who only appear in expenses (e.g. removed members)
        still get a balance, listed after the members.
        """
        # Insertion order doubles as output order
        net: Dict[str, int] = {}
        for member in members:
            net.setdefault(member.id, 0)

        for expense in expenses:
            net[expense.paid_by_id] = net.get(expense.paid_by_id, 0) + to_cents(expense.amount)
            for split in expense.splits:
                net[split.user_id] = net.get(split.user_id, 0) - to_cents(split.amount)

        return [Balance(user_id=user_id, net=from_cents(cents)) for user_id, cents in net.items()]

    @staticmethod
    def simplify_debts(balances: Iterable[Balance]) -> List[Debt]:
        """
        Reduces net balances to a list of transfers.

        Greedy: the largest remaining debtor pays the largest remaining
        creditor until one side runs out. Not guaranteed to reach the
        theoretical minimum number of transfers.
        """
        creditors = []
        debtors = []

        for balance in balances:
            cents = to_cents(balance.net)
            if cents > 0:
                creditors.append([balance.user_id, cents])
            elif cents < 0:
                debtors.append([balance.user_id, -cents])  # Store positive debt amount

        creditors.sort(key=lambda x: x[1], reverse=True)
        debtors.sort(key=lambda x: x[1], reverse=True)

        debts: List[Debt] = []
        i = 0
        j = 0

        while i < len(debtors) and j < len(creditors):
            debtor = debtors[i]
            creditor = creditors[j]

            amount = min(debtor[1], creditor[1])
            debts.append(Debt(
                from_user_id=debtor[0],
                to_user_id=creditor[0],
                amount=from_cents(amount)
            ))

            debtor[1] -= amount
            creditor[1] -= amount

            if debtor[1] == 0:
                i += 1
            if creditor[1] == 0:
                j += 1

        logger.debug("Simplified %d debtors / %d creditors into %d transfers",
                     len(debtors), len(creditors), len(debts))
        return debts

    @staticmethod
    def total_spend(expenses: Iterable[Expense]) -> Decimal:
        """Sum of real spending; settlements are repayments, not spend."""
        cents = sum(to_cents(e.amount) for e in expenses if not e.is_settlement)
        return from_cents(cents)

    @staticmethod
    def history_total(expenses: Iterable[Expense]) -> Decimal:
        """Running history figure: expenses add, settlements subtract."""
        cents = 0
        for expense in expenses:
            if expense.is_settlement:
                cents -= to_cents(expense.amount)
            else:
                cents += to_cents(expense.amount)
        return from_cents(cents)

    @staticmethod
    def summarize_user(
        user_id: str,
        balances: List[Balance],
        debts: Optional[List[Debt]] = None
    ) -> UserSummary:
        if debts is None:
            debts = BalanceService.simplify_debts(balances)

        net = next((b.net for b in balances if b.user_id == user_id), Decimal("0.00"))
        zero = Decimal("0.00")
        return UserSummary(
            user_id=user_id,
            net=net,
            to_receive=net if net > 0 else zero,
            to_settle=-net if net < 0 else zero,
            debts=[d for d in debts if d.from_user_id == user_id],
            credits=[d for d in debts if d.to_user_id == user_id]
        )

    @staticmethod
    def dashboard_summary(user_id: str, groups: Iterable[GroupLedger]) -> DashboardSummary:
        """
        The user's position across every group at once.

        All groups' members and expenses are pooled into one balance
        computation, so a credit in one group offsets a debt in another.
        """
        members: List[Member] = []
        expenses: List[Expense] = []
        for group in groups:
            members.extend(group.members)
            expenses.extend(group.expenses)

        balances = BalanceService.calculate_balances(members, expenses)
        summary = BalanceService.summarize_user(user_id, balances)

        return DashboardSummary(
            user_id=user_id,
            total_net=summary.net,
            to_receive=summary.to_receive,
            to_settle=summary.to_settle,
            debts=summary.debts,
            credits=summary.credits
        )
