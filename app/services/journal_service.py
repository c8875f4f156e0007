"""JournalService retrieves the remote ledger document and persists it locally."""

from pathlib import Path

import httpx

from app.core.errors import FetchFailure
from app.core.settings import Settings
from app.core.utils import ensure_dir, get_logger

logger = get_logger("ledger-exporter.fetch")


class JournalService:
    """Service that downloads the journal with a token and writes it to ``ledger_path``."""

    def __init__(self, settings: Settings, client: httpx.Client | None = None) -> None:
        """Initialize JournalService with settings and an optional preconfigured HTTP client."""
        self.token = settings.ledger_token
        self.url = settings.ledger_url
        self.path = Path(settings.ledger_path)
        self.timeout = settings.fetch_timeout_seconds
        self.client = client

    @property
    def configured(self) -> bool:
        """Whether both the token and the URL are available."""
        return bool(self.token and self.url)

    def fetch(self) -> bool:
        """Download the journal; return False when unconfigured and the local copy is reused."""
        if not self.configured:
            logger.warning(f"Ledger token or URL missing, reusing local journal at {self.path}")
            return False
        logger.info(f"Fetching journal from {self.url}")
        data = self.download()
        self.save(data)
        logger.info(f"Saved {len(data)} bytes to {self.path}")
        return True

    def download(self) -> bytes:
        """Perform the authenticated GET and return the raw document."""
        headers = {"Authorization": f"token {self.token}"}
        try:
            if self.client is not None:
                response = self.client.get(self.url, headers=headers, timeout=self.timeout)
            else:
                response = httpx.get(self.url, headers=headers, timeout=self.timeout)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            msg = f"Could not fetch journal from {self.url}: {exc}"
            raise FetchFailure(msg) from exc
        return response.content

    def save(self, data: bytes) -> None:
        """Overwrite the local journal, replacing it in one step."""
        try:
            ensure_dir(self.path.parent)
            tmp_path = self.path.with_name(f".{self.path.name}.tmp")
            tmp_path.write_bytes(data)
            tmp_path.replace(self.path)
        except OSError as exc:
            msg = f"Could not write journal to {self.path}: {exc}"
            raise FetchFailure(msg) from exc
