"""Tests for journal retrieval and hledger report generation."""

import subprocess
from pathlib import Path

import httpx
import pytest

from app.core.errors import FetchFailure, ReportGenerationFailure
from app.core.models import ReportKind
from app.core.settings import Settings
from app.services import report_service
from app.services.journal_service import JournalService
from app.services.report_service import HledgerReportGenerator, report_args

JOURNAL = "2024-04-02 Cafe\n    expenses:food  €5.00\n    assets:cash\n".encode()
URL = "https://git.example/api/v1/repos/me/ledger/raw/main.journal"


def _configured(settings: Settings) -> Settings:
    return settings.model_copy(update={"ledger_token": "secret", "ledger_url": URL})


def test_fetch_writes_journal_with_token(settings: Settings) -> None:
    """The document is requested with the token header and written to ledger_path."""
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=JOURNAL)

    service = JournalService(_configured(settings), client=httpx.Client(transport=httpx.MockTransport(handler)))
    if service.fetch() is not True:
        msg = "Expected fetch() to report a download"
        raise AssertionError(msg)
    if seen[0].headers["Authorization"] != "token secret":
        msg = f"Unexpected auth header {seen[0].headers['Authorization']}"
        raise AssertionError(msg)
    if Path(settings.ledger_path).read_bytes() != JOURNAL:
        msg = "Journal content was not persisted"
        raise AssertionError(msg)


def test_fetch_without_credentials_reuses_local_copy(settings: Settings) -> None:
    """Missing token or URL skips the download and leaves the local file alone."""
    Path(settings.ledger_path).write_bytes(JOURNAL)
    if JournalService(settings).fetch() is not False:
        msg = "Expected fetch() to skip without credentials"
        raise AssertionError(msg)
    if Path(settings.ledger_path).read_bytes() != JOURNAL:
        msg = "Local journal should be untouched"
        raise AssertionError(msg)


def test_fetch_error_keeps_stale_journal(settings: Settings) -> None:
    """A failed download raises FetchFailure and keeps the previous local copy."""
    Path(settings.ledger_path).write_bytes(JOURNAL)

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("unreachable", request=request)

    service = JournalService(_configured(settings), client=httpx.Client(transport=httpx.MockTransport(handler)))
    with pytest.raises(FetchFailure):
        service.fetch()
    if Path(settings.ledger_path).read_bytes() != JOURNAL:
        msg = "Stale journal should survive a failed fetch"
        raise AssertionError(msg)


@pytest.mark.parametrize(
    ("kind", "expected"),
    [
        (ReportKind.EXPENSES, ["-s", "bal", "expenses", "--depth", "5", "--no-elide"]),
        (ReportKind.MONTHLY_REGISTER, ["-s", "reg", "expenses", "--monthly", "--output-format", "csv"]),
        (ReportKind.POSTINGS, ["print", "expenses", "--output-format", "csv"]),
    ],
)
def test_report_args(kind: ReportKind, expected: list[str]) -> None:
    """Each report kind maps to its hledger invocation."""
    if report_args(kind) != expected:
        msg = f"Unexpected args for {kind}: {report_args(kind)}"
        raise AssertionError(msg)


def _fake_run(result: subprocess.CompletedProcess | Exception, calls: list[dict]) -> object:
    def run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        calls.append({"command": command, **kwargs})
        if isinstance(result, Exception):
            raise result
        return result

    return run


def test_generator_returns_stdout(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    """A successful run returns stdout and runs against the configured journal."""
    calls: list[dict] = []
    done = subprocess.CompletedProcess([], 0, stdout="€1.00  expenses:x\n", stderr="")
    monkeypatch.setattr(report_service.subprocess, "run", _fake_run(done, calls))
    output = HledgerReportGenerator(settings).generate_report(ReportKind.EXPENSES, ["bal"])
    if output != "€1.00  expenses:x\n":
        msg = f"Unexpected output {output!r}"
        raise AssertionError(msg)
    call = calls[0]
    if call["command"] != ["hledger", "-f", settings.ledger_path, "bal"]:
        msg = f"Unexpected command {call['command']}"
        raise AssertionError(msg)
    if call["env"]["LEDGER_FILE"] != settings.ledger_path or call["timeout"] != settings.report_timeout_seconds:
        msg = f"Unexpected subprocess options {call}"
        raise AssertionError(msg)


@pytest.mark.parametrize(
    "result",
    [
        subprocess.CompletedProcess([], 1, stdout="", stderr="hledger: parse error"),
        subprocess.CompletedProcess([], 0, stdout="   \n", stderr=""),
        subprocess.TimeoutExpired(["hledger"], 60),
        FileNotFoundError("hledger"),
    ],
)
def test_generator_failures(
    settings: Settings, monkeypatch: pytest.MonkeyPatch, result: subprocess.CompletedProcess | Exception
) -> None:
    """Non-zero exits, empty output, timeouts and a missing binary all fail the report."""
    monkeypatch.setattr(report_service.subprocess, "run", _fake_run(result, []))
    with pytest.raises(ReportGenerationFailure) as excinfo:
        HledgerReportGenerator(settings).generate_report(ReportKind.ASSETS, ["bal"])
    if excinfo.value.kind != ReportKind.ASSETS:
        msg = f"Expected the failure to name the report, got {excinfo.value.kind}"
        raise AssertionError(msg)


def test_generator_replaces_undecodable_bytes(settings: Settings, monkeypatch: pytest.MonkeyPatch) -> None:
    """Non UTF-8 bytes in hledger output are replaced instead of failing the decode."""
    raw = b'"1","2024-04-02","","","","caf\xe9","","expenses:food","\xe25.00"\n'

    def run(command: list[str], **kwargs: object) -> subprocess.CompletedProcess:
        stdout = raw.decode(kwargs["encoding"], kwargs["errors"])
        return subprocess.CompletedProcess(command, 0, stdout=stdout, stderr="")

    monkeypatch.setattr(report_service.subprocess, "run", run)
    output = HledgerReportGenerator(settings).generate_report(ReportKind.POSTINGS, ["print"])
    if "caf�" not in output:
        msg = f"Expected the undecodable byte to be replaced, got {output!r}"
        raise AssertionError(msg)
