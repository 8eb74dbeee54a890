from datetime import datetime, timezone

from apguard.db.models.hardware import HardwareRecord
from apguard.schemas.observation import Ack
from apguard.services.gateway import PersistenceGateway


class ObservationRecorder:
    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def record(
        self,
        network_name: str,
        hardware_address: str,
        signal: int,
        channel: int | None,
        frequency: int | None,
        security: str | None,
        hardware_ref: HardwareRecord,
        timestamp: datetime | None = None,
    ) -> Ack:
        """
        Перезаписывает снимок пары (essid, bssid). Вызывать только после
        того, как запись оборудования уже существует.
        """
        log_time = timestamp or datetime.now(timezone.utc)
        await self.gateway.upsert_observation(
            network_name,
            hardware_address,
            {
                "signals": signal,
                "channel": channel or 0,
                "frequency": frequency or 0,
                "security": security or "",
                "hwid": hardware_ref.hwid,
                "log_time": log_time,
            },
        )
        return Ack(essid=network_name, bssid=hardware_address, hwid=hardware_ref.hwid, log_time=log_time)
