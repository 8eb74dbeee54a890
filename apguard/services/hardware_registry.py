import logging

from apguard.db.models.hardware import HardwareRecord
from apguard.exceptions import NotFoundError
from apguard.schemas.observation import HardwareMetadata
from apguard.services.gateway import PersistenceGateway

logger = logging.getLogger(__name__)


class HardwareRegistry:
    """
    Единственная точка доступа к записям оборудования.
    На один BSSID всегда ровно одна запись, hwid после создания не меняется.
    """

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def resolve(self, hardware_address: str) -> HardwareRecord | None:
        return await self.gateway.find_hardware_by_address(hardware_address)

    async def get(self, hardware_address: str) -> HardwareRecord:
        hw = await self.resolve(hardware_address)
        if hw is None:
            raise NotFoundError(f"Hardware with BSSID={hardware_address} not found")
        return hw

    async def upsert(self, hardware_address: str, metadata: HardwareMetadata | None = None) -> HardwareRecord:
        return await self.gateway.upsert_hardware(hardware_address, metadata or HardwareMetadata())

    async def ensure(self, hardware_address: str, metadata: HardwareMetadata | None = None) -> HardwareRecord:
        """
        Найти или создать запись оборудования для BSSID.
        Если наблюдение несёт метаданные, запись обновляется в любом случае.
        """
        metadata = metadata or HardwareMetadata()
        if not metadata.supplied():
            hw = await self.resolve(hardware_address)
            if hw is not None:
                return hw
            logger.info("New hardware for BSSID %s", hardware_address)
        return await self.upsert(hardware_address, metadata)
