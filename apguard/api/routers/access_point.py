from fastapi import APIRouter, Depends, HTTPException, Query, status
from netaddr import AddrFormatError
from typing import List

from apguard.api.deps import get_gateway
from apguard.core.config import settings
from apguard.exceptions import NotFoundError, StorageError
from apguard.schemas.access_point import AccessPointOut, AccessPointRegister, HardwareOut, IncidentOut, VendorOut
from apguard.schemas.observation import Ack, HardwareMetadata
from apguard.services.gateway import SqlAlchemyGateway
from apguard.services.hardware_registry import HardwareRegistry
from apguard.services.observation_recorder import ObservationRecorder
from apguard.services.vendor import lookup_vendor

router = APIRouter(prefix=settings.API_PREFIX, tags=["AccessPoint"])


@router.get(
    "/access-point",
    response_model=AccessPointOut,
    summary="Точка доступа по BSSID",
    description="Последнее наблюдение BSSID вместе с данными оборудования."
)
async def get_access_point(
    bssid: str = Query(..., min_length=1, description="MAC-адрес (BSSID)"),
    gateway: SqlAlchemyGateway = Depends(get_gateway),
):
    try:
        row = await gateway.latest_observation(bssid)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if row is None:
        raise HTTPException(status_code=404, detail="No Access Point found for this BSSID")
    obs, hw = row
    return AccessPointOut(
        apid=obs.apid,
        bssid=obs.bssid,
        essid=obs.essid,
        signals=obs.signals,
        channel=obs.channel,
        frequency=obs.frequency,
        security=obs.security,
        log_time=obs.log_time,
        hwid=hw.hwid,
        equipment_code=hw.equipment_code,
        equipment_name=hw.equipment_name,
        location=hw.location,
        ieee_standard=hw.ieee_standard,
    )


@router.post(
    "/access-point",
    response_model=Ack,
    status_code=201,
    summary="Зарегистрировать точку доступа вручную",
    description="Обновляет или создаёт запись оборудования, затем сохраняет наблюдение. Проверка на Evil Twin не выполняется."
)
async def register_access_point(
    data: AccessPointRegister,
    gateway: SqlAlchemyGateway = Depends(get_gateway),
):
    metadata = HardwareMetadata(**data.model_dump(
        include={"hwid", "equipment_code", "equipment_name", "location", "ieee_standard"},
        exclude_none=True,
    ))
    try:
        hw = await HardwareRegistry(gateway).upsert(data.bssid, metadata)
        return await ObservationRecorder(gateway).record(
            data.essid, data.bssid, data.signals, data.channel, data.frequency, data.security, hw,
        )
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get(
    "/check-access-point",
    response_model=List[IncidentOut],
    summary="Инциденты по паре BSSID/ESSID",
    responses={
        404: {"description": "No attacks detected"}
    }
)
async def check_access_point(
    bssid: str = Query(..., min_length=1),
    essid: str = Query(..., min_length=1),
    gateway: SqlAlchemyGateway = Depends(get_gateway),
):
    try:
        incidents = await gateway.list_incidents(bssid, essid)
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))
    if not incidents:
        raise HTTPException(status_code=404, detail="No attacks detected")
    return incidents


@router.get(
    "/hardware",
    response_model=HardwareOut,
    summary="Оборудование по BSSID",
    description="Запись оборудования из реестра, без данных наблюдений."
)
async def get_hardware(
    bssid: str = Query(..., min_length=1, description="MAC-адрес (BSSID)"),
    gateway: SqlAlchemyGateway = Depends(get_gateway),
):
    try:
        return await HardwareRegistry(gateway).get(bssid)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StorageError as e:
        raise HTTPException(status_code=503, detail=str(e))


@router.get(
    "/vendor-from-bssid",
    response_model=VendorOut,
    summary="Производитель по BSSID",
    description="Определяет производителя по OUI-префиксу MAC-адреса. vendor = null, если префикс не зарегистрирован."
)
async def vendor_from_bssid(
    bssid: str = Query(..., min_length=1, description="MAC-адрес (BSSID)"),
):
    try:
        vendor = lookup_vendor(bssid)
    except AddrFormatError:
        raise HTTPException(status_code=422, detail=f"Некорректный BSSID: {bssid}")
    return VendorOut(bssid=bssid, vendor=vendor)
