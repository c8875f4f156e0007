"""Parser for the fixed-width text output of ``hledger bal``.

A balance report looks like::

               €120.00  expenses:food:groceries
                €80.00  expenses:rent
    --------------------
               €200.00

Each account line is ``<amount> <account>``. Dash runs separate the body from
the trailing total, and a line holding a single glyph-prefixed amount is the
total for that currency.
"""

from app.core.errors import MalformedLine
from app.core.models import BalanceLine, BalanceReport, BalanceScope, ReportKind
from app.core.utils import get_logger
from app.parsers.amounts import is_currency_prefixed, parse_amount

logger = get_logger("ledger-exporter.parsers.balance")

SEPARATOR = "----"


class BalanceReportParser:
    """Turn one balance report into account lines and per-currency totals."""

    def __init__(self, kind: ReportKind) -> None:
        """Configure the parser for a balance report kind (expenses, assets or income)."""
        self.kind = kind
        self.prefix = kind.prefix
        self.scope = BalanceScope.CATEGORY if kind is ReportKind.EXPENSES else BalanceScope.ACCOUNT

    def parse(self, text: str) -> BalanceReport:
        """Parse the whole report, logging and skipping lines that do not parse."""
        lines: dict[tuple[str, str], BalanceLine] = {}
        totals: dict[str, BalanceLine] = {}
        for raw_line in text.splitlines():
            line = raw_line.strip()
            if not line or SEPARATOR in line:
                continue
            try:
                parsed = self.parse_line(line)
            except MalformedLine as exc:
                logger.warning(f"[{self.kind}] skipping line {line!r}: {exc}")
                continue
            if parsed.scope is BalanceScope.TOTAL:
                totals[parsed.amount.currency] = parsed
            else:
                lines[(parsed.label, parsed.amount.currency)] = parsed
        logger.info(f"[{self.kind}] parsed {len(lines)} lines and {len(totals)} totals")
        return BalanceReport(kind=self.kind, lines=tuple(lines.values()), totals=tuple(totals.values()))

    def parse_line(self, line: str) -> BalanceLine:
        """Parse a single non-separator line into an account or total record."""
        parts = line.split()
        if len(parts) == 1:
            if not is_currency_prefixed(parts[0]):
                raise MalformedLine("lone token is not a currency amount", line)
            return BalanceLine(scope=BalanceScope.TOTAL, amount=parse_amount(parts[0]))
        amount = parse_amount(parts[0])
        label = parts[1].removeprefix(self.prefix)
        return BalanceLine(scope=self.scope, label=label, amount=amount)
