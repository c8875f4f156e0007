"""Exception types raised while fetching, generating and parsing ledger reports."""


class LedgerExporterError(Exception):
    """Base class for all exporter errors."""


class MalformedLine(LedgerExporterError, ValueError):
    """A single report line or CSV row could not be parsed."""

    def __init__(self, message: str, line: str = "") -> None:
        """Store the offending line alongside the message."""
        super().__init__(message)
        self.line = line


class MalformedAmount(MalformedLine):
    """An amount token did not contain a parseable number."""

    def __init__(self, token: str) -> None:
        """Build the error for the given amount token."""
        super().__init__(f"Could not parse amount {token!r}", token)
        self.token = token


class MalformedReport(LedgerExporterError):
    """A whole report could not be read (for example broken CSV quoting)."""


class FetchFailure(LedgerExporterError):
    """The remote ledger document could not be retrieved or persisted."""


class ReportGenerationFailure(LedgerExporterError):
    """The report generator exited abnormally or produced no output."""

    def __init__(self, kind: str, message: str, returncode: int | None = None, output: str = "") -> None:
        """Record which report failed, its exit status and the tool's diagnostic output."""
        super().__init__(f"Report '{kind}' failed: {message}")
        self.kind = kind
        self.returncode = returncode
        self.output = output
