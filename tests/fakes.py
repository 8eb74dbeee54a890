import asyncio
from datetime import datetime, timezone
from typing import Any

from apguard.db.models.ap_observation import APObservation
from apguard.db.models.hardware import HardwareRecord
from apguard.db.models.incident import IncidentClassification, IncidentRecord
from apguard.exceptions import StorageError
from apguard.services.gateway import HARDWARE_FIELDS, OBSERVATION_FIELDS
from apguard.schemas.observation import HardwareMetadata, ReporterIdentity


class InMemoryGateway:
    """
    Фейковое хранилище для юнит-тестов пайплайна.
    fail_on: имена операций, которые должны упасть с StorageError.
    """

    def __init__(self):
        self.hardware: dict[str, HardwareRecord] = {}
        self.observations: dict[tuple[str, str], APObservation] = {}
        self.incidents: list[IncidentRecord] = []
        self.fail_on: set[str] = set()
        self.calls: list[tuple[str, str | None]] = []
        self._next_hwid = 1

    async def _enter(self, op: str, address: str | None = None) -> None:
        self.calls.append((op, address))
        # Отдаём управление циклу, чтобы параллельные пакеты могли перемешаться
        await asyncio.sleep(0)
        if op in self.fail_on:
            raise StorageError(f"{op} failed: injected")

    async def find_hardware_by_address(self, address: str) -> HardwareRecord | None:
        await self._enter("find_hardware_by_address", address)
        return self.hardware.get(address)

    async def upsert_hardware(self, address: str, metadata: HardwareMetadata) -> HardwareRecord:
        await self._enter("upsert_hardware", address)
        hw = self.hardware.get(address)
        if hw is None:
            values = dict.fromkeys(HARDWARE_FIELDS, "")
            values.update(metadata.supplied())
            hwid = metadata.hwid if metadata.hwid is not None else self._next_hwid
            self._next_hwid = max(self._next_hwid, hwid) + 1
            hw = HardwareRecord(hwid=hwid, bssid=address, **values)
            self.hardware[address] = hw
        else:
            for k, v in metadata.supplied().items():
                setattr(hw, k, v)
        return hw

    async def upsert_observation(self, network_name: str, address: str, fields: dict[str, Any]) -> None:
        await self._enter("upsert_observation", address)
        if fields["hwid"] not in {hw.hwid for hw in self.hardware.values()}:
            raise StorageError("upsert_observation failed: unknown hwid")
        values = {k: fields[k] for k in OBSERVATION_FIELDS if k in fields}
        key = (network_name, address)
        obs = self.observations.get(key)
        if obs is None:
            self.observations[key] = APObservation(
                apid=len(self.observations) + 1, essid=network_name, bssid=address, **values
            )
        else:
            for k, v in values.items():
                setattr(obs, k, v)

    async def hardware_address_exists(self, address: str) -> bool:
        await self._enter("hardware_address_exists", address)
        return any(bssid == address for _, bssid in self.observations)

    async def network_name_bound_to_other_address(self, name: str, address: str) -> bool:
        await self._enter("network_name_bound_to_other_address", address)
        return any(essid == name and bssid != address for essid, bssid in self.observations)

    async def append_incident(
        self,
        name: str,
        address: str,
        reporter: ReporterIdentity,
        classification: IncidentClassification,
    ) -> int:
        await self._enter("append_incident", address)
        incident = IncidentRecord(
            id=len(self.incidents) + 1,
            essid=name,
            bssid=address,
            reporter_email=reporter.email,
            reporter_id=reporter.user_id,
            classification=classification,
            detected_at=datetime.now(timezone.utc),
        )
        self.incidents.append(incident)
        return incident.id

    async def latest_observation(self, address: str) -> tuple[APObservation, HardwareRecord] | None:
        await self._enter("latest_observation", address)
        rows = [obs for (_, bssid), obs in self.observations.items() if bssid == address]
        if not rows:
            return None
        obs = max(rows, key=lambda o: o.log_time)
        return obs, self.hardware[address]

    async def list_incidents(self, address: str, name: str) -> list[IncidentRecord]:
        await self._enter("list_incidents", address)
        return [i for i in self.incidents if i.bssid == address and i.essid == name]
