"""Scan service: the create/list/get contract consumed by outer layers."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from siteprobe.config import ScanSettings, load_settings
from siteprobe.db.models import ScanRecord
from siteprobe.exceptions import ScanNotFound

from .orchestrator import ProbeOrchestrator
from .target import resolve_target

if TYPE_CHECKING:
    from siteprobe.modules.store import ScanStore

logger = logging.getLogger(__name__)


class ScanService:
    """Validates input, runs the engine and hands results to the store."""

    def __init__(self, store: ScanStore, settings: ScanSettings | None = None):
        self.store = store
        self.settings = settings or load_settings()

    async def create_scan(self, url: str) -> ScanRecord:
        """Scan a URL and persist the result.

        Raises ``ScanInputError`` (status 400) before anything is stored when
        the URL is malformed, unsupported or unresolvable.
        """
        target = await resolve_target(url)
        result = await ProbeOrchestrator(self.settings).run(target)
        record = self.store.create(result)
        logger.info("Scan %s stored for %s", record.id, record.url)
        return record

    def list_scans(self) -> list[ScanRecord]:
        return self.store.list()

    def get_scan(self, scan_id: int) -> ScanRecord:
        record = self.store.get(scan_id)
        if record is None:
            raise ScanNotFound(f"Scan {scan_id} not found")
        return record
