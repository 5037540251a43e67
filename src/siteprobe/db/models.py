"""Database models for siteprobe using SQLAlchemy."""

from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, Column, DateTime, Integer, String, Text
from sqlalchemy.orm import declarative_base


def _utc_now() -> datetime:
    return datetime.now(UTC)


Base = declarative_base()


class ScanRecord(Base):
    """A persisted scan result. Rows are written once and never updated."""

    __tablename__ = "scans"

    id = Column(Integer, primary_key=True)
    url = Column(Text, nullable=False)
    target_ip = Column(String, nullable=True)
    server = Column(String, default="Unknown")
    is_scrapable = Column(Boolean, nullable=False, default=True)
    ddos_protected = Column(Boolean, nullable=False, default=False)
    headers = Column(JSON, nullable=False, default=dict)
    recommendations = Column(JSON, nullable=False, default=list)
    findings = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utc_now)

    def to_dict(self) -> dict:
        """Persisted shape: the scan result fields plus id and creation time."""
        return {
            "id": self.id,
            "url": self.url,
            "targetIp": self.target_ip,
            "server": self.server,
            "isScrapable": self.is_scrapable,
            "ddosProtected": self.ddos_protected,
            "headers": self.headers,
            "recommendations": self.recommendations,
            "findings": self.findings,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
