"""Monthly revenue/expense trend."""

from collections import defaultdict
from decimal import Decimal
from typing import Mapping

from ledgerkit.domain.entities import ZERO, AccountBalance, AccountType, MonthlyTrendBucket


class MonthlyTrendBuilder:
    """Buckets revenue and expense activity by calendar month."""

    def build(self, balances: Mapping[str, AccountBalance]) -> list[MonthlyTrendBucket]:
        """Build monthly buckets from account balances.

        Each transaction on a revenue account adds its absolute amount to the
        month's revenue (intäkter); each one on an expense account adds to its
        expenses (kostnader). Buckets are ordered by (year, month).
        """
        revenue: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)
        expenses: dict[tuple[int, int], Decimal] = defaultdict(lambda: ZERO)

        for balance in balances.values():
            account_type = balance.account.type
            if account_type not in (AccountType.REVENUE, AccountType.EXPENSE):
                continue
            for txn in balance.transactions:
                key = (txn.date.year, txn.date.month)
                if account_type == AccountType.REVENUE:
                    revenue[key] += abs(txn.amount)
                else:
                    expenses[key] += abs(txn.amount)

        return [
            MonthlyTrendBucket(
                year=year,
                month=month,
                revenue=revenue.get((year, month), ZERO),
                expenses=expenses.get((year, month), ZERO),
            )
            for year, month in sorted(set(revenue) | set(expenses))
        ]
