import logging

from fastapi import APIRouter, Depends, HTTPException, status

from apguard.api.deps import get_orchestrator
from apguard.core.config import settings
from apguard.exceptions import StorageError
from apguard.schemas.observation import IngestResult, ServiceLogsIn
from apguard.services.ingestion import IngestionOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter(prefix=settings.API_PREFIX)


@router.post(
    "/service-logs",
    response_model=IngestResult,
    status_code=status.HTTP_201_CREATED,
    summary="Принять пакет наблюдений сенсора",
    description="Сохраняет наблюдения и проверяет каждое на Evil Twin. Наблюдения без essid/bssid/signals пропускаются.",
    responses={
        503: {"description": "Storage failure, batch can be resubmitted"}
    }
)
async def ingest_service_logs(
    payload: ServiceLogsIn,
    orchestrator: IngestionOrchestrator = Depends(get_orchestrator),
):
    try:
        return await orchestrator.ingest_batch(payload.logs, reporter=payload.reporter)
    except StorageError as e:
        logger.error("Batch of %d observations failed: %s", len(payload.logs), e)
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Storage unavailable, resubmit the batch",
        )
