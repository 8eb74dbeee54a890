import asyncio
import logging
import weakref
from contextlib import AsyncExitStack, asynccontextmanager
from typing import Any, Iterable

import pydantic

from apguard.exceptions import ValidationError
from apguard.schemas.observation import IngestResult, ObservationIn, ReporterIdentity
from apguard.services.classifier import IncidentClassifier
from apguard.services.gateway import PersistenceGateway
from apguard.services.hardware_registry import HardwareRegistry
from apguard.services.novelty import NoveltyChecker
from apguard.services.observation_recorder import ObservationRecorder

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("essid", "bssid", "signals")


class KeyedLocks:
    """
    asyncio.Lock на каждый ключ (ESSID, BSSID). Неиспользуемые блокировки собирает GC.
    """

    def __init__(self):
        self._locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()

    def get(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[key] = lock
        return lock

    @asynccontextmanager
    async def hold(self, *keys: str):
        # Порядок захвата фиксирован, чтобы два пакета не ждали друг друга
        async with AsyncExitStack() as stack:
            for key in sorted(set(keys)):
                await stack.enter_async_context(self.get(key))
            yield


# Общие на процесс: два параллельных пакета с одним ESSID или BSSID
# не должны одновременно читать состояние "до записи"
observation_locks = KeyedLocks()


def validate_observation(item: Any) -> ObservationIn:
    if isinstance(item, ObservationIn):
        obs = item
    else:
        try:
            obs = ObservationIn.model_validate(item)
        except pydantic.ValidationError as e:
            raise ValidationError(f"Malformed observation: {e.errors()}") from e
    stripped = {
        name: getattr(obs, name).strip()
        for name in ("essid", "bssid")
        if getattr(obs, name) is not None
    }
    obs = obs.model_copy(update=stripped)
    missing = [name for name in REQUIRED_FIELDS if getattr(obs, name) in (None, "")]
    if missing:
        raise ValidationError(f"Missing required fields: {', '.join(missing)}", missing=missing)
    return obs


class IngestionOrchestrator:
    """
    Прогоняет пакет наблюдений через пайплайн по одному, в порядке прихода:
    валидация -> снимок новизны -> оборудование -> наблюдение -> классификация.

    Ошибка валидации пропускает одно наблюдение. StorageError прерывает весь
    пакет; то, что уже записано, остаётся, повторная отправка безопасна.
    """

    def __init__(self, gateway: PersistenceGateway, locks: KeyedLocks | None = None):
        self.registry = HardwareRegistry(gateway)
        self.recorder = ObservationRecorder(gateway)
        self.novelty = NoveltyChecker(gateway)
        self.classifier = IncidentClassifier(gateway)
        self.locks = locks or observation_locks

    async def ingest_batch(
        self,
        observations: Iterable[Any],
        reporter: ReporterIdentity | None = None,
    ) -> IngestResult:
        result = IngestResult()
        for index, item in enumerate(observations):
            try:
                obs = validate_observation(item)
            except ValidationError as e:
                logger.warning("Skipping observation #%d: %s", index, e)
                result.skipped += 1
                continue

            incident_id = await self.ingest_one(obs, obs.reporter or reporter)
            result.accepted += 1
            if incident_id is not None:
                result.incidents_raised.append(incident_id)

        logger.info(
            "Batch ingested: accepted=%d skipped=%d incidents=%d",
            result.accepted, result.skipped, len(result.incidents_raised),
        )
        return result

    async def ingest_one(self, obs: ObservationIn, reporter: ReporterIdentity | None = None) -> int | None:
        async with self.locks.hold(f"essid:{obs.essid}", f"bssid:{obs.bssid}"):
            snapshot = await self.novelty.snapshot(obs.essid, obs.bssid)
            hw = await self.registry.ensure(obs.bssid, obs.hardware_metadata())
            await self.recorder.record(
                obs.essid,
                obs.bssid,
                obs.signals,
                obs.channel,
                obs.frequency,
                obs.security,
                hw,
                obs.log_time,
            )
            return await self.classifier.evaluate(snapshot, reporter)
