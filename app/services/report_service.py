"""Report generation through the ``hledger`` command line tool.

This module defines the abstract report generator interface used by the refresh cycle and its subprocess-backed implementation, plus the argument lists for every report the exporter needs.
"""

import os
import subprocess
from abc import ABC, abstractmethod
from collections.abc import Sequence

from app.core.errors import ReportGenerationFailure
from app.core.models import ReportKind
from app.core.settings import Settings
from app.core.utils import get_logger

logger = get_logger("ledger-exporter.reports")


def report_args(kind: ReportKind, depth: int = 5) -> list[str]:
    """Return the hledger arguments (after ``-f <file>``) that produce a report."""
    if kind is ReportKind.MONTHLY_REGISTER:
        return ["-s", "reg", "expenses", "--monthly", "--output-format", "csv"]
    if kind is ReportKind.POSTINGS:
        return ["print", "expenses", "--output-format", "csv"]
    return ["-s", "bal", kind.value, "--depth", str(depth), "--no-elide"]


class ReportGenerator(ABC):
    """Abstract base class for anything that can produce report text."""

    @abstractmethod
    def generate_report(self, kind: ReportKind, args: Sequence[str]) -> str:
        """Return the report output, raising ReportGenerationFailure on failure."""


class HledgerReportGenerator(ReportGenerator):
    """Runs hledger against the local journal with a bounded runtime."""

    def __init__(self, settings: Settings) -> None:
        """Initialize the generator from the executable, journal path and timeout settings."""
        self.binary = settings.hledger_bin
        self.ledger_path = settings.ledger_path
        self.timeout = settings.report_timeout_seconds

    def generate_report(self, kind: ReportKind, args: Sequence[str]) -> str:
        """Run hledger and return its stdout."""
        command = [self.binary, "-f", self.ledger_path, *args]
        logger.info(f"[{kind}] running {' '.join(command)}")
        env = {**os.environ, "LEDGER_FILE": self.ledger_path}
        try:
            result = subprocess.run(  # noqa: S603
                command,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self.timeout,
                env=env,
                check=False,
            )
        except FileNotFoundError as exc:
            raise ReportGenerationFailure(kind, f"{self.binary} not found") from exc
        except subprocess.TimeoutExpired as exc:
            raise ReportGenerationFailure(kind, f"timed out after {self.timeout}s") from exc
        if result.returncode != 0:
            raise ReportGenerationFailure(
                kind, f"exit status {result.returncode}", returncode=result.returncode, output=result.stderr
            )
        if not result.stdout.strip():
            raise ReportGenerationFailure(kind, "no output", returncode=0, output=result.stderr)
        if result.stderr.strip():
            logger.warning(f"[{kind}] hledger stderr: {result.stderr.strip()}")
        return result.stdout
