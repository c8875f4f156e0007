"""Pydantic models for parsed ledger reports.

This module defines the typed records produced by the report parsers: currency-aware amounts, balance report lines and the monthly per-category and per-payee totals that feed the metrics snapshot.
"""

from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class Currency(StrEnum):
    """Currencies resolvable from an amount glyph; UNKNOWN keeps unmapped glyphs visible."""

    EUR = "EUR"
    USD = "USD"
    UNKNOWN = ""


CURRENCY_GLYPHS: dict[str, Currency] = {
    "€": Currency.EUR,
    "$": Currency.USD,
}


class ReportKind(StrEnum):
    """The reports requested from the report generator on every refresh cycle."""

    EXPENSES = "expenses"
    ASSETS = "assets"
    INCOME = "income"
    MONTHLY_REGISTER = "monthly-register"
    POSTINGS = "postings"

    @property
    def prefix(self) -> str:
        """Account prefix stripped from labels of this report (all register data is expenses)."""
        if self in BALANCE_KINDS:
            return f"{self.value}:"
        return f"{ReportKind.EXPENSES.value}:"


BALANCE_KINDS = (ReportKind.EXPENSES, ReportKind.ASSETS, ReportKind.INCOME)


class BalanceScope(StrEnum):
    """What a balance line describes."""

    CATEGORY = "category"
    ACCOUNT = "account"
    TOTAL = "total"


class MonthTag(StrEnum):
    """Position of a month relative to the snapshot capture time."""

    CURRENT = "current"
    PREVIOUS = "previous"
    NONE = ""


class AmountRecord(BaseModel):
    """A numeric magnitude with the currency resolved from its glyph."""

    model_config = ConfigDict(frozen=True)

    magnitude: float
    currency: Currency = Currency.UNKNOWN


class BalanceLine(BaseModel):
    """One line of a balance report; total lines carry an empty label."""

    model_config = ConfigDict(frozen=True)

    scope: BalanceScope
    label: str = ""
    amount: AmountRecord


class BalanceReport(BaseModel):
    """All account lines and per-currency totals of one balance report."""

    model_config = ConfigDict(frozen=True)

    kind: ReportKind
    lines: tuple[BalanceLine, ...] = ()
    totals: tuple[BalanceLine, ...] = ()


class MonthlyCategoryTotal(BaseModel):
    """Expenses of one category in one month, keyed by (category, currency, month)."""

    model_config = ConfigDict(frozen=True)

    category: str
    currency: Currency
    month: str
    amount: float


class MonthlyPayeeTotal(BaseModel):
    """Summed expense postings of one normalized payee in one month."""

    model_config = ConfigDict(frozen=True)

    payee: str
    currency: Currency
    month: str
    amount: float


class MetricSample(BaseModel):
    """One labelled value of a gauge family, as returned by the JSON snapshot view."""

    labels: dict[str, str]
    value: float


class SnapshotView(BaseModel):
    """JSON view of the published snapshot."""

    captured_at: str
    failed_reports: list[str]
    families: dict[str, list[MetricSample]]
