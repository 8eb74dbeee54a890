from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from apguard.db.models.incident import IncidentClassification


class AccessPointOut(BaseModel):
    apid: int = Field(..., description="Первичный ключ наблюдения")
    bssid: str = Field(..., description="MAC-адрес (BSSID)")
    essid: str = Field(..., description="Имя сети")
    signals: int
    channel: int
    frequency: int
    security: str
    log_time: datetime
    hwid: int
    equipment_code: str
    equipment_name: str
    location: str
    ieee_standard: str


class AccessPointRegister(BaseModel):
    bssid: str = Field(..., min_length=1, description="MAC-адрес (BSSID)")
    essid: str = Field(..., min_length=1, description="Имя сети")
    signals: int = Field(0, le=0, description="Уровень сигнала (dBm)")
    channel: Optional[int] = None
    frequency: Optional[int] = None
    security: Optional[str] = None
    hwid: Optional[int] = None
    equipment_code: Optional[str] = None
    equipment_name: Optional[str] = None
    location: Optional[str] = None
    ieee_standard: Optional[str] = None


class IncidentOut(BaseModel):
    id: int
    essid: str
    bssid: str
    reporter_email: str
    reporter_id: Optional[int] = None
    classification: IncidentClassification
    detected_at: datetime

    class Config:
        from_attributes = True


class HardwareOut(BaseModel):
    hwid: int
    bssid: str
    equipment_code: str
    equipment_name: str
    location: str
    ieee_standard: str
    created_at: datetime

    class Config:
        from_attributes = True


class VendorOut(BaseModel):
    bssid: str
    vendor: Optional[str] = Field(None, description="Производитель по OUI, если зарегистрирован")
