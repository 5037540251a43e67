"""ScanStore: the persistence boundary for scan results."""

import logging
from pathlib import Path

from sqlalchemy import select
from sqlalchemy.orm import sessionmaker

from siteprobe.db.init import init_db
from siteprobe.db.models import ScanRecord
from siteprobe.modules.scanner.models import ScanResult

logger = logging.getLogger(__name__)


class ScanStore:
    """Stores immutable scan results in SQLite."""

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.engine = init_db(self.db_path)
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def create(self, result: ScanResult) -> ScanRecord:
        """Persist a scan result and return the stored record."""
        data = result.to_dict()
        record = ScanRecord(
            url=data["url"],
            target_ip=data["targetIp"],
            server=data["server"],
            is_scrapable=data["isScrapable"],
            ddos_protected=data["ddosProtected"],
            headers=data["headers"],
            recommendations=data["recommendations"],
            findings=data["findings"],
        )
        with self.session_factory() as session:
            session.add(record)
            session.commit()
        logger.debug("Stored scan %s for %s", record.id, record.url)
        return record

    def get(self, scan_id: int) -> ScanRecord | None:
        """Return a stored scan by id."""
        with self.session_factory() as session:
            return session.get(ScanRecord, scan_id)

    def list(self) -> list[ScanRecord]:
        """All stored scans, newest first."""
        with self.session_factory() as session:
            stmt = select(ScanRecord).order_by(ScanRecord.created_at.desc(), ScanRecord.id.desc())
            return list(session.scalars(stmt))

    def dispose(self) -> None:
        self.engine.dispose()


def record_to_result(record: ScanRecord) -> ScanResult:
    """Rebuild the immutable result from a stored record."""
    return ScanResult.from_dict(record.to_dict())
