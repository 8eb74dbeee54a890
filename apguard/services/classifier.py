import logging

from apguard.core.config import settings
from apguard.db.models.incident import IncidentClassification
from apguard.schemas.observation import ReporterIdentity
from apguard.services.gateway import PersistenceGateway
from apguard.services.novelty import NoveltySnapshot

logger = logging.getLogger(__name__)


class IncidentClassifier:
    def __init__(self, gateway: PersistenceGateway, unknown_reporter: str | None = None):
        self.gateway = gateway
        self.unknown_reporter = unknown_reporter or settings.UNKNOWN_REPORTER

    def classify(self, snapshot: NoveltySnapshot) -> IncidentClassification | None:
        """
        Новый BSSID, вещающий ESSID, который уже видели с другим BSSID,
        считается подозрением на Evil Twin. Всё остальное здесь не инцидент.
        """
        if snapshot.is_new_hardware and snapshot.name_seen_elsewhere:
            return IncidentClassification.EVIL_TWIN
        return None

    def reporter_or_unknown(self, reporter: ReporterIdentity | None) -> ReporterIdentity:
        if reporter is None:
            return ReporterIdentity(email=self.unknown_reporter, user_id=None)
        return reporter

    async def raise_incident(
        self,
        network_name: str,
        hardware_address: str,
        reporter: ReporterIdentity | None = None,
        classification: IncidentClassification = IncidentClassification.EVIL_TWIN,
    ) -> int:
        reporter = self.reporter_or_unknown(reporter)
        incident_id = await self.gateway.append_incident(network_name, hardware_address, reporter, classification)
        logger.warning(
            "%s detected: ESSID %r with new BSSID %s (incident %s, reporter %s)",
            classification.value, network_name, hardware_address, incident_id, reporter.email,
        )
        return incident_id

    async def evaluate(
        self,
        snapshot: NoveltySnapshot,
        reporter: ReporterIdentity | None = None,
    ) -> int | None:
        classification = self.classify(snapshot)
        if classification is None:
            return None
        return await self.raise_incident(
            snapshot.network_name, snapshot.hardware_address, reporter, classification
        )
