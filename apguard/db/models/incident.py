import enum

from sqlalchemy import Column, Integer, String, DateTime, Enum, func
from apguard.db.base import Base


class IncidentClassification(str, enum.Enum):
    EVIL_TWIN = "Suspected Evil Twin"
    ROGUE = "Rogue AP"
    UNKNOWN = "Unknown"


class IncidentRecord(Base):
    __tablename__ = "incidents"

    id = Column(Integer, primary_key=True, index=True)
    essid = Column(String(255), nullable=False)
    bssid = Column(String(32), nullable=False, index=True)
    reporter_email = Column(String(255), nullable=False, comment="'unknown', если отправитель не авторизован")
    reporter_id = Column(Integer, nullable=True)
    classification = Column(
        Enum(
            IncidentClassification,
            values_callable=lambda e: [m.value for m in e],
            native_enum=False,
            length=64,
        ),
        nullable=False,
    )
    detected_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
