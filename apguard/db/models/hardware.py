from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from apguard.db.base import Base


class HardwareRecord(Base):
    __tablename__ = "access_point_hw"

    hwid = Column(Integer, primary_key=True, index=True)
    bssid = Column(String(32), unique=True, nullable=False, comment="MAC-адрес радиомодуля")
    equipment_code = Column(String(64), nullable=False, default="", comment="Инвентарный номер")
    equipment_name = Column(String(255), nullable=False, default="")
    location = Column(String(255), nullable=False, default="")
    ieee_standard = Column(String(32), nullable=False, default="", comment="802.11 a/b/g/n/ac/ax")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    observations = relationship("APObservation", back_populates="hardware")
