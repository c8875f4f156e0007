"""Parser for ``hledger print expenses -O csv`` posting exports.

Only postings to expense accounts with a strictly positive debit are spend
events. Refunds and reversals show up as non-positive amounts on expense
accounts and are filtered out on purpose, so payee totals only ever grow with
spending.
"""

from datetime import datetime

import pandas as pd

from app.core.errors import MalformedLine
from app.core.models import MonthlyPayeeTotal, ReportKind
from app.core.utils import get_logger
from app.parsers.amounts import parse_number_or_amount, resolve_currency
from app.parsers.payees import normalize_payee
from app.parsers.register import read_csv_rows

logger = get_logger("ledger-exporter.parsers.transactions")

DATE_COLUMN = 1
DESCRIPTION_COLUMN = 5
ACCOUNT_COLUMN = 7
COMMODITY_COLUMN = 9
DEBIT_COLUMN = 11
MIN_COLUMNS = 12


class TransactionLedgerParser:
    """Sum expense postings per normalized payee and month."""

    kind = ReportKind.POSTINGS

    def __init__(self, prefix: str = ReportKind.POSTINGS.prefix) -> None:
        """Configure the account prefix a posting must carry to count as an expense."""
        self.prefix = prefix

    def parse(self, text: str) -> list[MonthlyPayeeTotal]:
        """Parse the export and aggregate matching postings in one pass."""
        postings = []
        for index, row in enumerate(read_csv_rows(text, self.kind)):
            if index == 0 or len(row) < MIN_COLUMNS:
                continue
            try:
                posting = self.parse_row(row)
            except MalformedLine as exc:
                logger.warning(f"[{self.kind}] skipping row {index}: {row} ({exc})")
                continue
            if posting is not None:
                postings.append(posting)
        return self.aggregate(postings)

    def parse_row(self, row: list[str]) -> dict | None:
        """Extract one spend event from a row, or None when the row is not one."""
        account = row[ACCOUNT_COLUMN].strip()
        if not account.startswith(self.prefix):
            return None
        date_text = row[DATE_COLUMN].strip()
        amount_text = row[DEBIT_COLUMN].strip()
        if not amount_text:
            return None
        try:
            posted = datetime.strptime(date_text, "%Y-%m-%d")  # noqa: DTZ007
        except ValueError as exc:
            raise MalformedLine(f"invalid date {date_text!r}", ",".join(row)) from exc
        amount = parse_number_or_amount(amount_text)
        if amount.magnitude <= 0:
            return None
        currency = resolve_currency(row[COMMODITY_COLUMN])
        if not row[COMMODITY_COLUMN].strip():
            currency = amount.currency
        return {
            "payee": normalize_payee(row[DESCRIPTION_COLUMN]),
            "month": posted.strftime("%Y-%m"),
            "currency": currency,
            "amount": amount.magnitude,
        }

    def aggregate(self, postings: list[dict]) -> list[MonthlyPayeeTotal]:
        """Sum postings per (payee, month); a payee keeps the last currency seen for it."""
        if not postings:
            return []
        frame = pd.DataFrame(postings)
        currencies = frame.groupby("payee", sort=False)["currency"].last()
        sums = frame.groupby(["payee", "month"], sort=False)["amount"].sum()
        totals = [
            MonthlyPayeeTotal(payee=payee, currency=currencies[payee], month=month, amount=float(amount))
            for (payee, month), amount in sums.items()
            if amount != 0
        ]
        logger.info(f"[{self.kind}] aggregated {len(postings)} postings into {len(totals)} payee totals")
        return totals
