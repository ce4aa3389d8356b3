"""Financial ratio calculation (nyckeltal).

All ratios are pure functions of aggregated totals. A zero denominator
yields an undefined RatioValue instead of a number, because zero reads as a
meaningful figure for most of these ratios.
"""

from decimal import Decimal
from typing import Mapping

from ledgerkit.domain.accounts import CASH_PREFIXES, RECEIVABLE_PREFIXES
from ledgerkit.domain.balances import BalanceAggregator
from ledgerkit.domain.entities import (
    ZERO,
    AccountBalance,
    BalanceTotals,
    FinancialRatios,
    RatioValue,
)

HUNDRED = Decimal(100)


def _undefined(name: str) -> RatioValue:
    return RatioValue(name=name, value=None, degenerate=True)


class FinancialRatioCalculator:
    """Derives solidity, liquidity, debt-to-equity and profit margin."""

    def solidity(self, totals: BalanceTotals) -> RatioValue:
        """Soliditet: equity / assets * 100.

        With zero assets the asset total is taken as 1 and the result is
        flagged degenerate.
        """
        if totals.assets == ZERO:
            return RatioValue("solidity", totals.equity * HUNDRED, degenerate=True)
        return RatioValue("solidity", totals.equity / totals.assets * HUNDRED)

    def liquidity(
        self, totals: BalanceTotals, cash: Decimal, receivables: Decimal
    ) -> RatioValue:
        """Kassalikviditet: (cash + receivables) / liabilities * 100."""
        if totals.liabilities == ZERO:
            return _undefined("liquidity")
        return RatioValue("liquidity", (cash + receivables) / totals.liabilities * HUNDRED)

    def debt_to_equity(self, totals: BalanceTotals) -> RatioValue:
        """Skuldsättningsgrad: liabilities / equity."""
        if totals.equity == ZERO:
            return _undefined("debt_to_equity")
        return RatioValue("debt_to_equity", totals.liabilities / totals.equity)

    def profit_margin(self, totals: BalanceTotals) -> RatioValue:
        """Vinstmarginal: net income / revenue * 100."""
        if totals.revenue == ZERO:
            return _undefined("profit_margin")
        return RatioValue("profit_margin", totals.net_income / totals.revenue * HUNDRED)

    def calculate(
        self, totals: BalanceTotals, cash: Decimal = ZERO, receivables: Decimal = ZERO
    ) -> FinancialRatios:
        """Compute all four ratios from already aggregated totals."""
        return FinancialRatios(
            solidity=self.solidity(totals),
            liquidity=self.liquidity(totals, cash, receivables),
            debt_to_equity=self.debt_to_equity(totals),
            profit_margin=self.profit_margin(totals),
        )

    def from_balances(
        self, balances: Mapping[str, AccountBalance], aggregator: BalanceAggregator
    ) -> FinancialRatios:
        """Compute ratios from a balance snapshot (19xx cash, 15xx receivables)."""
        return self.calculate(
            aggregator.totals(balances),
            cash=aggregator.prefix_total(balances, CASH_PREFIXES),
            receivables=aggregator.prefix_total(balances, RECEIVABLE_PREFIXES),
        )
