"""Domain model entities for ledgerkit.

These are pure data classes representing bookkeeping concepts, independent
of the storage schema. Verifications are immutable once created; balances,
ratios, trends and VAT reports are derived values recomputed on demand.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional

from ledgerkit.domain.errors import DegenerateRatioError, undefined_ratio
from ledgerkit.utils.date_parser import get_date_range

ZERO = Decimal(0)


def to_decimal(value: Any) -> Decimal:
    """Convert a number (or numeric string) to Decimal without float noise."""
    if isinstance(value, Decimal):
        return value
    if value is None or value == "":
        return ZERO
    return Decimal(str(value))


class AccountType(str, Enum):
    """Account classes of the BAS chart."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"

    @property
    def is_debit_normal(self) -> bool:
        """Assets and expenses carry a debit balance; the rest a credit balance."""
        return self in (AccountType.ASSET, AccountType.EXPENSE)


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    code: str
    name: str
    type: AccountType
    group: str


@dataclass(frozen=True)
class PrefixRule:
    """Classification rule for every code starting with ``prefix``."""

    prefix: str
    type: AccountType
    group: str
    name: str = ""


@dataclass(frozen=True)
class VerificationRow:
    """Single debit or credit line of a verification."""

    account_code: str
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: Optional[str] = None

    def __post_init__(self):
        object.__setattr__(self, "debit", to_decimal(self.debit))
        object.__setattr__(self, "credit", to_decimal(self.credit))

    @classmethod
    def debit_row(
        cls, account_code: str, amount: Any, description: Optional[str] = None
    ) -> "VerificationRow":
        return cls(account_code, to_decimal(amount), ZERO, description)

    @classmethod
    def credit_row(
        cls, account_code: str, amount: Any, description: Optional[str] = None
    ) -> "VerificationRow":
        return cls(account_code, ZERO, to_decimal(amount), description)

    @property
    def amount(self) -> Decimal:
        """Signed amount: positive for debit, negative for credit."""
        return self.debit - self.credit


@dataclass(frozen=True)
class Verification:
    """Balanced double-entry journal entry (verifikation)."""

    id: str
    date: date
    description: str
    rows: tuple[VerificationRow, ...]
    source_type: str = "manual"

    def __post_init__(self):
        # Detach from the caller's sequence so stored rows cannot change
        object.__setattr__(self, "rows", tuple(self.rows))

    @property
    def total_debit(self) -> Decimal:
        return sum((row.debit for row in self.rows), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((row.credit for row in self.rows), ZERO)

    @property
    def is_balanced(self) -> bool:
        """Check that debit equals credit."""
        return self.total_debit == self.total_credit

    def touches(self, account_code: str) -> bool:
        return any(row.account_code == account_code for row in self.rows)


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; a missing bound is open."""

    start: Optional[date] = None
    end: Optional[date] = None

    @classmethod
    def all_time(cls) -> "DateRange":
        return cls()

    @classmethod
    def for_period(cls, period: str) -> "DateRange":
        """Build a range from a named period such as 'this-month' or 'last-year'."""
        start, end = get_date_range(period)
        return cls(start, end)

    def contains(self, day: date) -> bool:
        if self.start is not None and day < self.start:
            return False
        if self.end is not None and day > self.end:
            return False
        return True


@dataclass(frozen=True)
class BalanceTransaction:
    """Contribution of one verification row to an account balance."""

    verification_id: str
    date: date
    description: str
    amount: Decimal


@dataclass(frozen=True)
class AccountBalance:
    """Derived balance of one account.

    ``balance`` is the canonical debit minus credit figure. Use
    ``presented_balance`` for the sign a human expects for the account type.
    """

    account: Account
    balance: Decimal = ZERO
    transactions: tuple[BalanceTransaction, ...] = ()

    @property
    def account_code(self) -> str:
        return self.account.code

    @property
    def presented_balance(self) -> Decimal:
        if self.account.type.is_debit_normal:
            return self.balance
        return -self.balance

    @property
    def transaction_count(self) -> int:
        return len(self.transactions)

    @property
    def last_transaction_date(self) -> Optional[date]:
        if not self.transactions:
            return None
        return max(txn.date for txn in self.transactions)


@dataclass(frozen=True)
class BalanceTotals:
    """Aggregated totals as human-facing magnitudes."""

    assets: Decimal = ZERO
    liabilities: Decimal = ZERO
    equity: Decimal = ZERO
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO

    @property
    def net_income(self) -> Decimal:
        return self.revenue - self.expenses


@dataclass(frozen=True)
class ExpenseCategory:
    """Expense total for one account group."""

    group: str
    amount: Decimal
    percentage: int


@dataclass(frozen=True)
class RatioValue:
    """Financial ratio that may be undefined.

    ``value`` is None when the denominator was zero. ``degenerate`` is set
    whenever the inputs forced a fallback, including the solidity case where
    a zero asset total is replaced by one.
    """

    name: str
    value: Optional[Decimal]
    degenerate: bool = False

    @property
    def is_defined(self) -> bool:
        return self.value is not None

    def require(self) -> Decimal:
        """Return the value, raising DegenerateRatioError if undefined."""
        if self.value is None:
            raise DegenerateRatioError(undefined_ratio(self.name))
        return self.value

    def format(self, suffix: str = "", places: int = 1) -> str:
        if self.value is None:
            return "n/a"
        return f"{self.value:.{places}f}{suffix}"


@dataclass(frozen=True)
class FinancialRatios:
    """Solidity, liquidity, debt-to-equity and profit margin."""

    solidity: RatioValue
    liquidity: RatioValue
    debt_to_equity: RatioValue
    profit_margin: RatioValue

    def __iter__(self):
        return iter((self.solidity, self.liquidity, self.debt_to_equity, self.profit_margin))

    def to_dict(self) -> dict[str, Optional[float]]:
        return {
            ratio.name: float(ratio.value) if ratio.value is not None else None
            for ratio in self
        }


SWEDISH_MONTHS = (
    "jan", "feb", "mar", "apr", "maj", "jun",
    "jul", "aug", "sep", "okt", "nov", "dec",
)


@dataclass(frozen=True)
class MonthlyTrendBucket:
    """Revenue and expenses for one calendar month."""

    year: int
    month: int
    revenue: Decimal = ZERO
    expenses: Decimal = ZERO

    @property
    def result(self) -> Decimal:
        return self.revenue - self.expenses

    @property
    def key(self) -> str:
        return f"{self.year:04d}-{self.month:02d}"

    @property
    def label(self) -> str:
        """Display label such as 'dec 2024'. Never use it for ordering."""
        return f"{SWEDISH_MONTHS[self.month - 1]} {self.year}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "month": self.label,
            "intäkter": float(self.revenue),
            "kostnader": float(self.expenses),
            "resultat": float(self.result),
        }


class VatStatus(str, Enum):
    """Filing status of a VAT period."""

    UPCOMING = "upcoming"
    SUBMITTED = "submitted"
    OVERDUE = "overdue"


@dataclass(frozen=True)
class VatRateLine:
    """Output VAT booked at one rate, with the taxable base it implies."""

    rate: Decimal
    output_vat: Decimal

    @property
    def taxable_base(self) -> Decimal:
        return (self.output_vat / self.rate).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class VatReport:
    """VAT declaration for one quarter (momsdeklaration)."""

    period: str
    due_date: date
    status: VatStatus
    ruta05: Decimal
    ruta10: Decimal
    ruta48: Decimal
    ruta49: Decimal
    rate_lines: tuple[VatRateLine, ...] = field(default=())

    @property
    def sales_vat(self) -> Decimal:
        return self.ruta10

    @property
    def input_vat(self) -> Decimal:
        return self.ruta48

    @property
    def net_vat(self) -> Decimal:
        return self.sales_vat - self.input_vat

    def to_dict(self, include_breakdown: bool = False) -> dict[str, Any]:
        """Render the report in the shape expected by report-rendering clients."""
        data: dict[str, Any] = {
            "period": self.period,
            "dueDate": self.due_date.isoformat(),
            "status": self.status.value,
            "ruta05": float(self.ruta05),
            "ruta10": float(self.ruta10),
            "ruta48": float(self.ruta48),
            "ruta49": float(self.ruta49),
            "salesVat": float(self.sales_vat),
            "inputVat": float(self.input_vat),
            "netVat": float(self.net_vat),
        }
        if include_breakdown:
            data["rateBreakdown"] = [
                {
                    "rate": float(line.rate),
                    "outputVat": float(line.output_vat),
                    "taxableBase": float(line.taxable_base),
                }
                for line in self.rate_lines
            ]
        return data
