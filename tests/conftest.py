"""Shared fixtures: sample hledger outputs and a fake report generator.

No test runs the real hledger binary or touches the network; the refresh cycle
and the API are driven through ``FakeReportGenerator`` instead.
"""

from collections.abc import Callable, Sequence
from pathlib import Path

import pytest

from app.core.models import ReportKind
from app.core.settings import Settings
from app.services.report_service import ReportGenerator

BALANCE_EXPENSES = """\
             €120.00  expenses:food:groceries
              €80.50  expenses:rent
              $12.00  expenses:travel
                €abc  expenses:broken
--------------------
             €200.50
              $12.00
"""

BALANCE_ASSETS = """\
           €1,500.00  assets:bank:checking
              €50.00  assets:cash
--------------------
           €1,550.00
"""

BALANCE_INCOME = """\
          €-2,000.00  income:salary
--------------------
          €-2,000.00
"""

REGISTER_CSV = """\
"txnidx","date","code","description","account","amount","total"
"0","2024-03-01","","","expenses:rent","€900.00","€900.00"
"0","2024-04-01","","","expenses:food","€1,234.56","€2,134.56"
"0","2024-04-01","","","expenses:travel","",""
"short","row"
"0","2024-04-01","","","expenses:misc","€x",""
"""

POSTINGS_HEADER = (
    '"txnidx","date","date2","status","code","description","comment","account",'
    '"amount","commodity","credit","debit","posting-status","posting-comment"\n'
)

POSTINGS_CSV = POSTINGS_HEADER + """\
"1","2024-04-02","","","","Cafe (loyalty)","","expenses:food","€5.00","€","","€5.00","",""
"1","2024-04-02","","","","Cafe (loyalty)","","assets:bank","€-5.00","€","5.00","","",""
"2","2024-04-20","","","","  CAFE ","","expenses:food","€3.50","€","","3.50","",""
"3","2024-04-21","","","","Refund Shop","","expenses:food","€-5.00","€","","-5.00","",""
"4","2024-03-05","","","","Book Store (ref #1)","","expenses:books","$20.00","$","","20.00","",""
"5","04/22/2024","","","","Bad Date","","expenses:food","€1.00","€","","1.00","",""
"6","2024-04-22","","","","No Amount","","expenses:food","","€","","","",""
"""


class FakeReportGenerator(ReportGenerator):
    """Returns canned outputs per report kind; exceptions in the map are raised."""

    def __init__(self, outputs: dict[ReportKind, str | Exception]) -> None:
        """Store the canned outputs and start with an empty call log."""
        self.outputs = dict(outputs)
        self.calls: list[tuple[ReportKind, list[str]]] = []

    def generate_report(self, kind: ReportKind, args: Sequence[str]) -> str:
        """Record the call and return (or raise) the canned output."""
        self.calls.append((kind, list(args)))
        output = self.outputs[kind]
        if isinstance(output, Exception):
            raise output
        return output


def sample_outputs() -> dict[ReportKind, str | Exception]:
    """Return a fresh map of successful outputs for every report kind."""
    return {
        ReportKind.EXPENSES: BALANCE_EXPENSES,
        ReportKind.ASSETS: BALANCE_ASSETS,
        ReportKind.INCOME: BALANCE_INCOME,
        ReportKind.MONTHLY_REGISTER: REGISTER_CSV,
        ReportKind.POSTINGS: POSTINGS_CSV,
    }


@pytest.fixture
def fake_generator() -> Callable[..., FakeReportGenerator]:
    """Build fake generators, optionally overriding some report outputs."""

    def factory(**overrides: str | Exception) -> FakeReportGenerator:
        outputs = sample_outputs()
        for name, output in overrides.items():
            outputs[ReportKind[name.upper()]] = output
        return FakeReportGenerator(outputs)

    return factory


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary journal, with no remote source and no log file."""
    return Settings(
        ledger_token=None,
        ledger_url=None,
        ledger_path=str(tmp_path / "main.journal"),
        log_file="",
        refresh_interval_seconds=0.05,
        _env_file=None,
    )
