"""Parser for ``hledger reg expenses --monthly -O csv`` output."""

import csv
import io

import pandas as pd

from app.core.errors import MalformedLine, MalformedReport
from app.core.models import MonthlyCategoryTotal, ReportKind
from app.core.utils import get_logger
from app.parsers.amounts import parse_amount

logger = get_logger("ledger-exporter.parsers.register")

DATE_COLUMN = 1
ACCOUNT_COLUMN = 4
AMOUNT_COLUMN = 5
MIN_COLUMNS = 6
MONTH_LENGTH = 7


def read_csv_rows(text: str, kind: ReportKind) -> list[list[str]]:
    """Read every CSV row of a report, failing the report as a whole on broken CSV."""
    try:
        return list(csv.reader(io.StringIO(text)))
    except csv.Error as exc:
        msg = f"[{kind}] unreadable CSV output: {exc}"
        raise MalformedReport(msg) from exc


class MonthlyRegisterParser:
    """Turn the monthly register into one total per (category, currency, month)."""

    kind = ReportKind.MONTHLY_REGISTER

    def __init__(self, prefix: str = ReportKind.MONTHLY_REGISTER.prefix) -> None:
        """Configure the account prefix stripped from category labels."""
        self.prefix = prefix

    def parse(self, text: str) -> list[MonthlyCategoryTotal]:
        """Parse all data rows; the header, short rows and empty amounts are skipped."""
        records = []
        for index, row in enumerate(read_csv_rows(text, self.kind)):
            if index == 0 or len(row) < MIN_COLUMNS:
                continue
            try:
                record = self.parse_row(row)
            except MalformedLine as exc:
                logger.warning(f"[{self.kind}] skipping row {index}: {row} ({exc})")
                continue
            if record is not None:
                records.append(record)
        return self.deduplicate(records)

    def parse_row(self, row: list[str]) -> MonthlyCategoryTotal | None:
        """Parse one data row, returning None when it carries no amount."""
        amount_token = row[AMOUNT_COLUMN].strip()
        if not amount_token:
            return None
        month = row[DATE_COLUMN].strip()[:MONTH_LENGTH]
        if len(month) != MONTH_LENGTH:
            raise MalformedLine(f"date {row[DATE_COLUMN]!r} has no month prefix", ",".join(row))
        amount = parse_amount(amount_token)
        return MonthlyCategoryTotal(
            category=row[ACCOUNT_COLUMN].strip().removeprefix(self.prefix),
            currency=amount.currency,
            month=month,
            amount=amount.magnitude,
        )

    def deduplicate(self, records: list[MonthlyCategoryTotal]) -> list[MonthlyCategoryTotal]:
        """Keep the last record for each (category, currency, month) key."""
        if not records:
            return []
        frame = pd.DataFrame([record.model_dump() for record in records])
        frame = frame.drop_duplicates(subset=["category", "currency", "month"], keep="last")
        logger.info(f"[{self.kind}] parsed {len(frame)} monthly category totals from {len(records)} rows")
        return [MonthlyCategoryTotal(**row) for row in frame.to_dict(orient="records")]
