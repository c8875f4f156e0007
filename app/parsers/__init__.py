"""Parsers package: turns hledger balance, register and posting reports into typed records."""

from .amounts import parse_amount, parse_number  # noqa: F401
from .balance import BalanceReportParser  # noqa: F401
from .payees import normalize_payee  # noqa: F401
from .register import MonthlyRegisterParser  # noqa: F401
from .transactions import TransactionLedgerParser  # noqa: F401
