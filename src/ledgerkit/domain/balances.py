"""Balance aggregation domain service."""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from ledgerkit.domain.accounts import AccountRegistry
from ledgerkit.domain.entities import (
    ZERO,
    AccountBalance,
    AccountType,
    BalanceTotals,
    BalanceTransaction,
    DateRange,
    ExpenseCategory,
)
from ledgerkit.domain.journal import Journal


class BalanceAggregator:
    """Service computing account balances from the journal.

    Balances are debit minus credit internally. ``presented_balance`` on the
    result applies the per-type sign convention for display.
    """

    def __init__(self, journal: Journal, registry: AccountRegistry):
        """Initialize balance aggregator.

        Args:
            journal: Journal to read from
            registry: Chart of accounts
        """
        self.journal = journal
        self.registry = registry

    def account_balance(
        self, code: str, date_range: Optional[DateRange] = None
    ) -> AccountBalance:
        """Balance of one account, optionally restricted to a date range.

        Raises:
            UnknownAccountError: If the code is not registered
        """
        account = self.registry.get(code)
        balance = ZERO
        transactions: list[BalanceTransaction] = []

        for verification, row in self.journal.entries_for_account(code, date_range).rows():
            if row.account_code != code:
                continue
            balance += row.amount
            transactions.append(
                BalanceTransaction(
                    verification_id=verification.id,
                    date=verification.date,
                    description=row.description or verification.description,
                    amount=row.amount,
                )
            )

        return AccountBalance(account=account, balance=balance, transactions=tuple(transactions))

    def all_balances(self, date_range: Optional[DateRange] = None) -> dict[str, AccountBalance]:
        """Balances for every registered account, ordered by code.

        Idle accounts are present with a zero balance. Codes matched only by a
        prefix rule appear when they have activity.
        """
        sums: dict[str, Decimal] = defaultdict(lambda: ZERO)
        transactions: dict[str, list[BalanceTransaction]] = defaultdict(list)

        for verification, row in self.journal.entries(date_range).rows():
            sums[row.account_code] += row.amount
            transactions[row.account_code].append(
                BalanceTransaction(
                    verification_id=verification.id,
                    date=verification.date,
                    description=row.description or verification.description,
                    amount=row.amount,
                )
            )

        codes = {account.code for account in self.registry.accounts()} | set(sums)
        return {
            code: AccountBalance(
                account=self.registry.get(code),
                balance=sums.get(code, ZERO),
                transactions=tuple(transactions.get(code, ())),
            )
            for code in sorted(codes)
        }

    @staticmethod
    def type_total(
        balances: Mapping[str, AccountBalance], account_type: AccountType
    ) -> Decimal:
        """Sum of presented balances for one account type."""
        return sum(
            (b.presented_balance for b in balances.values() if b.account.type == account_type),
            ZERO,
        )

    @staticmethod
    def prefix_total(balances: Mapping[str, AccountBalance], prefixes: Iterable[str]) -> Decimal:
        """Sum of presented balances for codes starting with any prefix."""
        prefixes = tuple(prefixes)
        return sum(
            (b.presented_balance for code, b in balances.items() if code.startswith(prefixes)),
            ZERO,
        )

    def totals(self, balances: Mapping[str, AccountBalance]) -> BalanceTotals:
        """Aggregate balances into assets, liabilities, equity, revenue and expenses.

        Equity is assets minus liabilities, so it includes the result of the
        period that has not yet been closed to an equity account.
        """
        assets = self.type_total(balances, AccountType.ASSET)
        liabilities = self.type_total(balances, AccountType.LIABILITY)
        return BalanceTotals(
            assets=assets,
            liabilities=liabilities,
            equity=assets - liabilities,
            revenue=self.type_total(balances, AccountType.REVENUE),
            expenses=self.type_total(balances, AccountType.EXPENSE),
        )

    def expense_breakdown(self, balances: Mapping[str, AccountBalance]) -> list[ExpenseCategory]:
        """Expenses grouped by account group, largest first."""
        groups: dict[str, Decimal] = defaultdict(lambda: ZERO)
        for balance in balances.values():
            if balance.account.type != AccountType.EXPENSE or balance.balance == ZERO:
                continue
            groups[balance.account.group or "Övrigt"] += balance.presented_balance

        total = sum(groups.values(), ZERO)
        categories = [
            ExpenseCategory(
                group=group,
                amount=amount,
                percentage=int((amount / total * 100).to_integral_value()) if total > 0 else 0,
            )
            for group, amount in groups.items()
        ]
        return sorted(categories, key=lambda c: (-c.amount, c.group))
