"""Immutable metrics snapshot built once per refresh cycle.

A snapshot bundles the three balance reports, the monthly category totals and
the monthly payee totals parsed in one cycle, together with the time it was
captured. Month tags are derived from that single capture time, so every record
of a snapshot is classified against the same "now".
"""

from datetime import datetime, timedelta
from typing import NamedTuple

from pydantic import BaseModel, ConfigDict

from app.core.models import (
    BALANCE_KINDS,
    BalanceReport,
    MonthlyCategoryTotal,
    MonthlyPayeeTotal,
    MonthTag,
    ReportKind,
)
from app.core.utils import local_now

Labels = tuple[str, ...]


class MetricFamily(NamedTuple):
    """Name, help text and label names of one exposed gauge family."""

    name: str
    documentation: str
    labels: tuple[str, ...]


EXPENSES = MetricFamily("ledger_expenses", "Expenses per category and currency", ("category", "currency"))
ASSETS = MetricFamily("ledger_assets", "Assets per account and currency", ("account", "currency"))
INCOME = MetricFamily("ledger_income", "Income per account and currency", ("account", "currency"))
TOTAL_EXPENSES = MetricFamily("ledger_total_expenses", "Total expenses by currency", ("currency",))
TOTAL_ASSETS = MetricFamily("ledger_total_assets", "Total assets by currency", ("currency",))
TOTAL_INCOME = MetricFamily("ledger_total_income", "Total income by currency", ("currency",))
EXPENSES_MONTHLY = MetricFamily(
    "ledger_expenses_monthly",
    "Monthly expenses by category, currency, and month",
    ("category", "currency", "month", "month_tag"),
)
EXPENSE_BY_PAYEE = MetricFamily(
    "ledger_expense_by_payee",
    "Monthly aggregated expenses by normalized payee",
    ("payee", "currency", "month", "month_tag"),
)

BALANCE_FAMILIES: dict[ReportKind, tuple[MetricFamily, MetricFamily]] = {
    ReportKind.EXPENSES: (EXPENSES, TOTAL_EXPENSES),
    ReportKind.ASSETS: (ASSETS, TOTAL_ASSETS),
    ReportKind.INCOME: (INCOME, TOTAL_INCOME),
}

FAMILIES = (
    EXPENSES,
    ASSETS,
    INCOME,
    TOTAL_EXPENSES,
    TOTAL_ASSETS,
    TOTAL_INCOME,
    EXPENSES_MONTHLY,
    EXPENSE_BY_PAYEE,
)


def month_tag(month: str, now: datetime) -> MonthTag:
    """Classify a ``YYYY-MM`` month as the current month, the one before it, or neither."""
    if month == now.strftime("%Y-%m"):
        return MonthTag.CURRENT
    previous = now.replace(day=1) - timedelta(days=1)
    if month == previous.strftime("%Y-%m"):
        return MonthTag.PREVIOUS
    return MonthTag.NONE


class MetricsSnapshot(BaseModel):
    """Everything one refresh cycle produced; never mutated after construction."""

    model_config = ConfigDict(frozen=True)

    captured_at: datetime
    balances: tuple[BalanceReport, ...] = ()
    monthly_expenses: tuple[MonthlyCategoryTotal, ...] = ()
    payee_expenses: tuple[MonthlyPayeeTotal, ...] = ()
    failed_reports: tuple[ReportKind, ...] = ()

    @classmethod
    def empty(cls, captured_at: datetime | None = None) -> "MetricsSnapshot":
        """Return the snapshot served before the first cycle completes."""
        return cls(captured_at=captured_at or local_now())

    def balance(self, kind: ReportKind) -> BalanceReport:
        """Return the balance report of a kind, or an empty one when it is missing."""
        for report in self.balances:
            if report.kind == kind:
                return report
        return BalanceReport(kind=kind)

    def month_tag(self, month: str) -> MonthTag:
        """Classify a month against this snapshot's capture time."""
        return month_tag(month, self.captured_at)

    def families(self) -> dict[MetricFamily, dict[Labels, float]]:
        """Flatten the snapshot into label-tuple to value mappings for every family."""
        result: dict[MetricFamily, dict[Labels, float]] = {family: {} for family in FAMILIES}
        for kind in BALANCE_KINDS:
            lines_family, totals_family = BALANCE_FAMILIES[kind]
            report = self.balance(kind)
            for line in report.lines:
                result[lines_family][(line.label, line.amount.currency.value)] = line.amount.magnitude
            for total in report.totals:
                result[totals_family][(total.amount.currency.value,)] = total.amount.magnitude
        tags: dict[str, str] = {}
        for record in self.monthly_expenses:
            tag = tags.setdefault(record.month, self.month_tag(record.month).value)
            result[EXPENSES_MONTHLY][(record.category, record.currency.value, record.month, tag)] = record.amount
        for record in self.payee_expenses:
            tag = tags.setdefault(record.month, self.month_tag(record.month).value)
            result[EXPENSE_BY_PAYEE][(record.payee, record.currency.value, record.month, tag)] = record.amount
        return result
