"""VAT reporting - quarterly momsdeklaration (SKV 4700).

VAT accounts in the BAS chart:
- 261x: Output VAT 25 %
- 2620: Output VAT 12 %
- 2630: Output VAT 6 %
- 2640, 2641: Input VAT

Boxes (rutor) produced:
- Ruta 05: Taxable sales. Reconstructed as ruta 10 * 4, which assumes every
  sale carries 25 % VAT. The per-rate breakdown on the report is the hook
  for separate 12 % and 6 % boxes.
- Ruta 10: Output VAT
- Ruta 48: Input VAT
- Ruta 49: VAT to pay (positive) or to get back (negative)
"""

import re
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Callable, Optional

from ledgerkit.domain.entities import ZERO, VatRateLine, VatReport, VatStatus
from ledgerkit.domain.errors import InvalidPeriodError, invalid_period
from ledgerkit.domain.journal import Journal
from ledgerkit.utils.date_parser import quarter_range
from ledgerkit.utils.logging import get_logger

log = get_logger("ledgerkit.vat")

PERIOD_PATTERN = re.compile(r"^\s*[Qq]([1-4])\s+(\d{4})\s*$")

# Statutory filing deadlines: quarter -> (year offset, month, day)
VAT_DEADLINES = {
    1: (0, 5, 12),
    2: (0, 8, 17),
    3: (0, 11, 12),
    4: (1, 2, 12),
}

OUTPUT_VAT_RATES = {
    "25": Decimal("0.25"),
    "12": Decimal("0.12"),
    "6": Decimal("0.06"),
}
INPUT_VAT_ACCOUNTS = frozenset({"2640", "2641"})
SETTLEMENT_ACCOUNT = "2650"

# Inverse of the 25 % rate, used to approximate ruta 05
SALES_BASE_FACTOR = Decimal(4)


def output_vat_rate(code: str) -> Optional[str]:
    """Return the rate key for an output VAT account, None for other accounts."""
    if len(code) == 4 and code.startswith("261"):
        return "25"
    if code == "2620":
        return "12"
    if code == "2630":
        return "6"
    return None


def is_input_vat(code: str) -> bool:
    return code in INPUT_VAT_ACCOUNTS


@dataclass(frozen=True)
class VatPeriod:
    """Calendar quarter of a VAT declaration."""

    quarter: int
    year: int

    @classmethod
    def parse(cls, text: str) -> "VatPeriod":
        """Parse a period such as 'Q4 2024'.

        Raises:
            InvalidPeriodError: If the text is not 'Q<1-4> <YYYY>'
        """
        if not isinstance(text, str):
            raise InvalidPeriodError(invalid_period(text))
        match = PERIOD_PATTERN.match(text)
        if match is None:
            raise InvalidPeriodError(invalid_period(text))
        year = int(match.group(2))
        if year < 1 or year > 9998:
            raise InvalidPeriodError(invalid_period(text))
        return cls(quarter=int(match.group(1)), year=year)

    @property
    def key(self) -> str:
        return f"Q{self.quarter} {self.year}"

    @property
    def months(self) -> tuple[int, int]:
        """First and last month of the quarter, 0-indexed."""
        first = (self.quarter - 1) * 3
        return first, first + 2

    @property
    def start(self) -> date:
        return quarter_range(self.year, self.quarter)[0]

    @property
    def end(self) -> date:
        return quarter_range(self.year, self.quarter)[1]

    @property
    def deadline(self) -> date:
        """Last day to file and pay, fixed by the VAT act."""
        year_offset, month, day = VAT_DEADLINES[self.quarter]
        return date(self.year + year_offset, month, day)

    def __str__(self) -> str:
        return self.key


class VatReportGenerator:
    """Generates quarterly VAT reports from the journal."""

    def __init__(self, journal: Journal, today: Callable[[], date] = date.today):
        """Initialize VAT report generator.

        Args:
            journal: Journal to read from; its database records filed periods
            today: Clock used to decide whether a period is overdue
        """
        self.journal = journal
        self.today = today

    def _period(self, period) -> VatPeriod:
        if isinstance(period, VatPeriod):
            return period
        return VatPeriod.parse(period)

    def status_for(self, period) -> VatStatus:
        """Filing status, evaluated against the clock at query time."""
        period = self._period(period)
        if self.journal.db.is_vat_submitted(period.key):
            return VatStatus.SUBMITTED
        if self.today() > period.deadline:
            return VatStatus.OVERDUE
        return VatStatus.UPCOMING

    def mark_submitted(self, period) -> VatStatus:
        """Record that the declaration for a period has been filed."""
        period = self._period(period)
        self.journal.db.mark_vat_submitted(period.key)
        log.info("vat_period_submitted", period=period.key)
        return VatStatus.SUBMITTED

    def generate(self, period) -> VatReport:
        """Generate the VAT report for a quarter.

        Output VAT rows count as credit minus debit and input VAT rows as debit
        minus credit, so correcting entries reduce the boxes. Verifications that
        post to the settlement account 2650 move the quarter's VAT out of the
        VAT accounts and are skipped. A quarter without entries gives an
        all-zero report.

        Raises:
            InvalidPeriodError: If the period cannot be parsed
        """
        period = self._period(period)

        output_by_rate: dict[str, Decimal] = {rate: ZERO for rate in OUTPUT_VAT_RATES}
        ruta48 = ZERO

        for verification, row in self.journal.entries_in_range(period.start, period.end).rows():
            if verification.touches(SETTLEMENT_ACCOUNT):
                continue
            rate = output_vat_rate(row.account_code)
            if rate is not None:
                output_by_rate[rate] += row.credit - row.debit
            elif is_input_vat(row.account_code):
                ruta48 += row.debit - row.credit

        ruta10 = sum(output_by_rate.values(), ZERO)
        net_vat = ruta10 - ruta48

        report = VatReport(
            period=period.key,
            due_date=period.deadline,
            status=self.status_for(period),
            ruta05=ruta10 * SALES_BASE_FACTOR,
            ruta10=ruta10,
            ruta48=ruta48,
            ruta49=net_vat,
            rate_lines=tuple(
                VatRateLine(rate=OUTPUT_VAT_RATES[rate], output_vat=amount)
                for rate, amount in output_by_rate.items()
            ),
        )
        log.info(
            "vat_report_generated",
            period=report.period,
            status=report.status.value,
            ruta10=str(report.ruta10),
            ruta48=str(report.ruta48),
            ruta49=str(report.ruta49),
        )
        return report
