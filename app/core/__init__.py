"""Core package: provides models, errors, settings, and shared utilities."""

from .errors import LedgerExporterError  # noqa: F401
from .models import AmountRecord, Currency, ReportKind  # noqa: F401
from .settings import Settings  # noqa: F401
from .utils import get_logger  # noqa: F401
