"""Reporting query surface used by UI and reporting layers."""

from datetime import date
from typing import Callable, Optional

from ledgerkit.domain.accounts import AccountRegistry
from ledgerkit.domain.balances import BalanceAggregator
from ledgerkit.domain.entities import (
    AccountBalance,
    BalanceTotals,
    DateRange,
    ExpenseCategory,
    FinancialRatios,
    MonthlyTrendBucket,
    VatReport,
)
from ledgerkit.domain.journal import Journal
from ledgerkit.domain.ratios import FinancialRatioCalculator
from ledgerkit.domain.trends import MonthlyTrendBuilder
from ledgerkit.domain.vat import VatReportGenerator


class ReportingService:
    """Read-only queries over the journal."""

    def __init__(
        self,
        journal: Journal,
        registry: AccountRegistry,
        today: Callable[[], date] = date.today,
    ):
        """Initialize reporting service.

        Args:
            journal: Journal to report on
            registry: Chart of accounts
            today: Clock used for VAT deadline status
        """
        self.journal = journal
        self.registry = registry
        self.aggregator = BalanceAggregator(journal, registry)
        self.ratio_calculator = FinancialRatioCalculator()
        self.trend_builder = MonthlyTrendBuilder()
        self.vat_generator = VatReportGenerator(journal, today=today)

    def get_account_balance(
        self, code: str, date_range: Optional[DateRange] = None
    ) -> AccountBalance:
        return self.aggregator.account_balance(code, date_range)

    def get_all_balances(self, date_range: Optional[DateRange] = None) -> dict[str, AccountBalance]:
        return self.aggregator.all_balances(date_range)

    def get_balance_totals(self, date_range: Optional[DateRange] = None) -> BalanceTotals:
        return self.aggregator.totals(self.aggregator.all_balances(date_range))

    def get_financial_ratios(self, date_range: Optional[DateRange] = None) -> FinancialRatios:
        balances = self.aggregator.all_balances(date_range)
        return self.ratio_calculator.from_balances(balances, self.aggregator)

    def get_monthly_trend(self, date_range: Optional[DateRange] = None) -> list[MonthlyTrendBucket]:
        return self.trend_builder.build(self.aggregator.all_balances(date_range))

    def get_expense_breakdown(self, date_range: Optional[DateRange] = None) -> list[ExpenseCategory]:
        return self.aggregator.expense_breakdown(self.aggregator.all_balances(date_range))

    def get_vat_report(self, period: str) -> VatReport:
        """VAT report for a period such as 'Q3 2024'.

        Raises:
            InvalidPeriodError: If the period cannot be parsed
        """
        return self.vat_generator.generate(period)
