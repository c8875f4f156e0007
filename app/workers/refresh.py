"""Background refresh: fetch the journal, run every report, publish one new snapshot."""

import threading
import time
from collections.abc import Callable
from datetime import datetime

from app.core.errors import FetchFailure, MalformedReport, ReportGenerationFailure
from app.core.models import BALANCE_KINDS, BalanceReport, ReportKind
from app.core.settings import Settings
from app.core.utils import get_logger, local_now
from app.metrics.snapshot import MetricsSnapshot
from app.metrics.store import SnapshotStore
from app.parsers.balance import BalanceReportParser
from app.parsers.register import MonthlyRegisterParser
from app.parsers.transactions import TransactionLedgerParser
from app.services.journal_service import JournalService
from app.services.report_service import ReportGenerator, report_args

logger = get_logger("ledger-exporter.worker")


class RefreshCycle:
    """Runs one complete collection pass and publishes its snapshot."""

    def __init__(
        self,
        store: SnapshotStore,
        generator: ReportGenerator,
        journal: JournalService | None = None,
        *,
        balance_depth: int = 5,
        retain_on_failure: bool = True,
        clock: Callable[[], datetime] = local_now,
    ) -> None:
        """Wire the cycle to its store, report generator and optional journal fetcher."""
        self.store = store
        self.generator = generator
        self.journal = journal
        self.balance_depth = balance_depth
        self.retain_on_failure = retain_on_failure
        self.clock = clock
        self.balance_parsers = {kind: BalanceReportParser(kind) for kind in BALANCE_KINDS}
        self.register_parser = MonthlyRegisterParser()
        self.transaction_parser = TransactionLedgerParser()

    @classmethod
    def from_settings(
        cls, settings: Settings, store: SnapshotStore, generator: ReportGenerator
    ) -> "RefreshCycle":
        """Build a cycle using the journal and report options from settings."""
        return cls(
            store,
            generator,
            JournalService(settings),
            balance_depth=settings.balance_depth,
            retain_on_failure=settings.retain_on_failure,
        )

    def run(self) -> MetricsSnapshot:
        """Fetch, parse every report, then publish the new snapshot in a single swap."""
        started = time.monotonic()
        captured_at = self.clock()
        logger.info(f"Refresh cycle started at {captured_at.isoformat()}")
        self.fetch_journal()
        previous = self.store.current()
        failed: list[ReportKind] = []

        balances = []
        for kind in BALANCE_KINDS:
            report = self.collect(kind, self.balance_parsers[kind].parse, failed)
            if report is None:
                report = previous.balance(kind) if self.retain_on_failure else BalanceReport(kind=kind)
            balances.append(report)

        monthly = self.collect(ReportKind.MONTHLY_REGISTER, self.register_parser.parse, failed)
        if monthly is None:
            monthly = previous.monthly_expenses if self.retain_on_failure else ()

        payees = self.collect(ReportKind.POSTINGS, self.transaction_parser.parse, failed)
        if payees is None:
            payees = previous.payee_expenses if self.retain_on_failure else ()

        snapshot = MetricsSnapshot(
            captured_at=captured_at,
            balances=tuple(balances),
            monthly_expenses=tuple(monthly),
            payee_expenses=tuple(payees),
            failed_reports=tuple(failed),
        )
        self.store.publish(snapshot)
        elapsed = time.monotonic() - started
        if failed:
            logger.warning(f"Refresh cycle published with failed reports {[str(kind) for kind in failed]}")
        logger.info(f"Refresh cycle finished in {elapsed:.2f}s")
        return snapshot

    def fetch_journal(self) -> None:
        """Refresh the local journal; failures leave the stale copy in place."""
        if self.journal is None:
            return
        try:
            self.journal.fetch()
        except FetchFailure:
            logger.exception("Error fetching journal, continuing with local copy")

    def collect(self, kind: ReportKind, parse: Callable[[str], object], failed: list[ReportKind]) -> object | None:
        """Generate and parse one report, returning None if either step failed.

        Any error is confined to this report so the rest of the cycle still publishes.
        """
        try:
            text = self.generator.generate_report(kind, report_args(kind, self.balance_depth))
            return parse(text)
        except ReportGenerationFailure as exc:
            logger.error(f"{exc}\n{exc.output}")  # noqa: TRY400
        except MalformedReport as exc:
            logger.error(f"[{kind}] {exc}")  # noqa: TRY400
        except Exception:
            logger.exception(f"[{kind}] unexpected error while collecting report")
        failed.append(kind)
        return None


class RefreshScheduler:
    """Runs a refresh cycle eagerly, then on a fixed delay from a single background thread."""

    def __init__(self, cycle: Callable[[], object], interval: float) -> None:
        """Initialize the scheduler with the cycle callable and the delay between cycles."""
        self.cycle = cycle
        self.interval = interval
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        """Whether the background thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    def start(self, *, eager: bool = True) -> None:
        """Run the first cycle in the caller's thread, then start the loop."""
        if self.running:
            return
        self._stop.clear()
        if eager:
            self.run_once()
        self._thread = threading.Thread(target=self._loop, name="ledger-refresh", daemon=True)
        self._thread.start()
        logger.info(f"Refresh loop started, interval {self.interval}s")

    def stop(self, timeout: float | None = None) -> None:
        """Signal the loop to exit and wait for the current cycle to finish."""
        self._stop.set()
        if self._thread is None:
            return
        self._thread.join(timeout)
        if self._thread.is_alive():
            logger.warning(f"Refresh loop still finishing a cycle after {timeout}s")
            return
        self._thread = None
        logger.info("Refresh loop stopped")

    def run_once(self) -> None:
        """Run a single cycle, logging instead of propagating unexpected errors."""
        try:
            self.cycle()
        except Exception:
            logger.exception("Refresh cycle crashed")

    def _loop(self) -> None:
        while not self._stop.wait(self.interval):
            self.run_once()
