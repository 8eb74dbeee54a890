from dataclasses import dataclass

from apguard.services.gateway import PersistenceGateway


@dataclass(frozen=True)
class NoveltySnapshot:
    network_name: str
    hardware_address: str
    is_new_hardware: bool
    name_seen_elsewhere: bool


class NoveltyChecker:
    """
    Оба предиката читают таблицу наблюдений, поэтому считать их нужно
    до записи текущего наблюдения: иначе только что записанный BSSID
    уже не будет "новым".
    """

    def __init__(self, gateway: PersistenceGateway):
        self.gateway = gateway

    async def is_new_hardware(self, hardware_address: str) -> bool:
        return not await self.gateway.hardware_address_exists(hardware_address)

    async def name_seen_elsewhere(self, network_name: str, hardware_address: str) -> bool:
        return await self.gateway.network_name_bound_to_other_address(network_name, hardware_address)

    async def snapshot(self, network_name: str, hardware_address: str) -> NoveltySnapshot:
        return NoveltySnapshot(
            network_name=network_name,
            hardware_address=hardware_address,
            is_new_hardware=await self.is_new_hardware(hardware_address),
            name_seen_elsewhere=await self.name_seen_elsewhere(network_name, hardware_address),
        )
