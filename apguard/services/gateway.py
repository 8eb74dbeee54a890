import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from apguard.db.models.ap_observation import APObservation
from apguard.db.models.hardware import HardwareRecord
from apguard.db.models.incident import IncidentClassification, IncidentRecord
from apguard.exceptions import StorageError
from apguard.schemas.observation import HardwareMetadata, ReporterIdentity

logger = logging.getLogger(__name__)

HARDWARE_FIELDS = ("equipment_code", "equipment_name", "location", "ieee_standard")
OBSERVATION_FIELDS = ("signals", "channel", "frequency", "security", "hwid", "log_time")
STORAGE_FAILURES = (SQLAlchemyError, OSError, asyncio.TimeoutError)


class PersistenceGateway(Protocol):
    """
    Хранилище, с которым работает пайплайн. Любая ошибка хранилища
    поднимается как StorageError.
    """

    async def find_hardware_by_address(self, address: str) -> HardwareRecord | None: ...

    async def upsert_hardware(self, address: str, metadata: HardwareMetadata) -> HardwareRecord: ...

    async def upsert_observation(self, network_name: str, address: str, fields: dict[str, Any]) -> None: ...

    async def hardware_address_exists(self, address: str) -> bool: ...

    async def network_name_bound_to_other_address(self, name: str, address: str) -> bool: ...

    async def append_incident(
        self,
        name: str,
        address: str,
        reporter: ReporterIdentity,
        classification: IncidentClassification,
    ) -> int: ...

    async def latest_observation(self, address: str) -> tuple[APObservation, HardwareRecord] | None: ...

    async def list_incidents(self, address: str, name: str) -> list[IncidentRecord]: ...


class SqlAlchemyGateway:
    """
    Реализация поверх AsyncSession. Каждая запись коммитится сразу:
    уже обработанные наблюдения остаются в БД, даже если пакет упал дальше.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _storage_errors(self, action: str):
        # OSError: БД недоступна (ConnectionRefusedError и т.п.)
        try:
            yield
        except STORAGE_FAILURES as e:
            logger.error("Storage failure during %s: %r", action, e)
            try:
                await self.db.rollback()
            except STORAGE_FAILURES as rollback_error:
                logger.error("Rollback after %s failed: %r", action, rollback_error)
            raise StorageError(f"{action} failed: {e!r}") from e

    async def find_hardware_by_address(self, address: str) -> HardwareRecord | None:
        async with self._storage_errors("find_hardware_by_address"):
            result = await self.db.execute(
                select(HardwareRecord).where(HardwareRecord.bssid == address)
            )
            return result.scalars().first()

    async def upsert_hardware(self, address: str, metadata: HardwareMetadata) -> HardwareRecord:
        async with self._storage_errors("upsert_hardware"):
            result = await self.db.execute(
                select(HardwareRecord).where(HardwareRecord.bssid == address)
            )
            hw = result.scalars().first()
            if hw is None:
                values = dict.fromkeys(HARDWARE_FIELDS, "")
                values.update(metadata.supplied())
                hw = HardwareRecord(bssid=address, **values)
                # hwid задаётся только при создании, дальше не меняется
                if metadata.hwid is not None:
                    hw.hwid = metadata.hwid
                self.db.add(hw)
            else:
                for k, v in metadata.supplied().items():
                    setattr(hw, k, v)
            await self.db.commit()
            await self.db.refresh(hw)
            return hw

    async def upsert_observation(self, network_name: str, address: str, fields: dict[str, Any]) -> None:
        values = {k: fields[k] for k in OBSERVATION_FIELDS if k in fields}
        async with self._storage_errors("upsert_observation"):
            result = await self.db.execute(
                select(APObservation).where(
                    APObservation.essid == network_name,
                    APObservation.bssid == address,
                )
            )
            obs = result.scalars().first()
            if obs is None:
                self.db.add(APObservation(essid=network_name, bssid=address, **values))
            else:
                for k, v in values.items():
                    setattr(obs, k, v)
            await self.db.commit()

    async def hardware_address_exists(self, address: str) -> bool:
        async with self._storage_errors("hardware_address_exists"):
            result = await self.db.execute(
                select(APObservation.apid).where(APObservation.bssid == address).limit(1)
            )
            return result.first() is not None

    async def network_name_bound_to_other_address(self, name: str, address: str) -> bool:
        async with self._storage_errors("network_name_bound_to_other_address"):
            result = await self.db.execute(
                select(APObservation.apid)
                .where(APObservation.essid == name, APObservation.bssid != address)
                .limit(1)
            )
            return result.first() is not None

    async def append_incident(
        self,
        name: str,
        address: str,
        reporter: ReporterIdentity,
        classification: IncidentClassification,
    ) -> int:
        async with self._storage_errors("append_incident"):
            incident = IncidentRecord(
                essid=name,
                bssid=address,
                reporter_email=reporter.email,
                reporter_id=reporter.user_id,
                classification=classification,
            )
            self.db.add(incident)
            await self.db.flush()
            incident_id = incident.id
            await self.db.commit()
            return incident_id

    async def latest_observation(self, address: str) -> tuple[APObservation, HardwareRecord] | None:
        async with self._storage_errors("latest_observation"):
            result = await self.db.execute(
                select(APObservation, HardwareRecord)
                .join(HardwareRecord, APObservation.hwid == HardwareRecord.hwid)
                .where(APObservation.bssid == address)
                .order_by(APObservation.log_time.desc())
                .limit(1)
            )
            row = result.first()
            return (row[0], row[1]) if row else None

    async def list_incidents(self, address: str, name: str) -> list[IncidentRecord]:
        async with self._storage_errors("list_incidents"):
            result = await self.db.execute(
                select(IncidentRecord)
                .where(IncidentRecord.bssid == address, IncidentRecord.essid == name)
                .order_by(IncidentRecord.detected_at.desc())
            )
            return list(result.scalars().all())
