from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import relationship
from apguard.db.base import Base


class APObservation(Base):
    """
    Последний снимок пары (essid, bssid). История не хранится:
    каждое новое наблюдение перезаписывает строку.
    """
    __tablename__ = "access_point_service"
    __table_args__ = (
        UniqueConstraint("essid", "bssid", name="uq_access_point_service_essid_bssid"),
    )

    apid = Column(Integer, primary_key=True, index=True)
    essid = Column(String(255), nullable=False, index=True)
    bssid = Column(String(32), nullable=False, index=True)
    signals = Column(Integer, nullable=False, comment="Уровень сигнала (dBm)")
    channel = Column(Integer, nullable=False, default=0)
    frequency = Column(Integer, nullable=False, default=0, comment="Частота (MHz)")
    security = Column(String(64), nullable=False, default="")
    hwid = Column(Integer, ForeignKey("access_point_hw.hwid"), nullable=False)
    log_time = Column(DateTime(timezone=True), nullable=False)

    hardware = relationship("HardwareRecord", back_populates="observations")
