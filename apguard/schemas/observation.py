from datetime import datetime
from typing import Any, List, Optional

from pydantic import AliasChoices, BaseModel, Field


class ReporterIdentity(BaseModel):
    email: str = Field(..., description="E-mail отправителя скана", examples=["sensor-01@example.com"])
    user_id: Optional[int] = Field(None, description="ID пользователя, если есть")


class HardwareMetadata(BaseModel):
    """
    Метаданные радиомодуля. Отсутствующие поля при создании записи
    заменяются пустыми строками, при обновлении не трогаются.
    """
    hwid: Optional[int] = Field(None, description="Идентификатор оборудования, если задан сенсором")
    equipment_code: Optional[str] = Field(None, description="Инвентарный номер")
    equipment_name: Optional[str] = Field(None, description="Отображаемое имя")
    location: Optional[str] = Field(None, description="Физическое расположение")
    ieee_standard: Optional[str] = Field(None, description="Стандарт 802.11")

    def supplied(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, exclude_none=True, exclude={"hwid"})


class ObservationIn(BaseModel):
    """
    Одно наблюдение из пакета сенсора. Все поля необязательны на уровне
    схемы: наличие essid/bssid/signals проверяет оркестратор, чтобы
    битое наблюдение пропускалось, а не роняло весь пакет.
    """
    essid: Optional[str] = Field(None, examples=["CorpWiFi"])
    bssid: Optional[str] = Field(None, examples=["AA:BB:CC:DD:EE:FF"])
    signals: Optional[int] = Field(None, examples=[-45])
    channel: Optional[int] = Field(None, validation_alias=AliasChoices("channel", "chanel"), examples=[6])
    frequency: Optional[int] = Field(None, examples=[2437])
    security: Optional[str] = Field(None, validation_alias=AliasChoices("security", "secue"), examples=["WPA2-PSK"])
    log_time: Optional[datetime] = None
    hwid: Optional[int] = None
    asset_code: Optional[str] = Field(None, validation_alias=AliasChoices("asset_code", "assetCode"))
    device_name: Optional[str] = Field(None, validation_alias=AliasChoices("device_name", "deviceName"))
    location: Optional[str] = None
    standard: Optional[str] = None
    reporter: Optional[ReporterIdentity] = None

    model_config = {"extra": "ignore"}

    def hardware_metadata(self) -> HardwareMetadata:
        values = {
            "hwid": self.hwid,
            "equipment_code": self.asset_code,
            "equipment_name": self.device_name,
            "location": self.location,
            "ieee_standard": self.standard,
        }
        return HardwareMetadata(**{k: v for k, v in values.items() if v is not None})


class ServiceLogsIn(BaseModel):
    # Any: битое наблюдение (null, строка) пропускается оркестратором, а не отклоняет пакет
    logs: List[Any] = Field(..., description="Наблюдения сенсора в порядке сканирования")
    reporter: Optional[ReporterIdentity] = None


class IngestResult(BaseModel):
    accepted: int = 0
    skipped: int = 0
    incidents_raised: List[int] = Field(default_factory=list, description="ID созданных инцидентов")


class Ack(BaseModel):
    essid: str
    bssid: str
    hwid: int
    log_time: datetime
