"""Domain layer for ledgerkit."""

# Services are imported lazily: entities are loaded by the database layer,
# which the services themselves depend on.
_SERVICES = {
    "AccountRegistry": "ledgerkit.domain.accounts",
    "Journal": "ledgerkit.domain.journal",
    "BalanceAggregator": "ledgerkit.domain.balances",
    "FinancialRatioCalculator": "ledgerkit.domain.ratios",
    "MonthlyTrendBuilder": "ledgerkit.domain.trends",
    "VatReportGenerator": "ledgerkit.domain.vat",
    "ReportingService": "ledgerkit.domain.reporting",
}

__all__ = list(_SERVICES)


def __getattr__(name):
    if name in _SERVICES:
        import importlib

        return getattr(importlib.import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
