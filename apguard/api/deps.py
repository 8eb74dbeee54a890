# apguard/api/deps.py

from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from apguard.db.session import AsyncSessionLocal
from apguard.services.gateway import SqlAlchemyGateway
from apguard.services.ingestion import IngestionOrchestrator


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    Зависимость FastAPI, возвращающая асинхронную сессию SQLAlchemy.
    Сессия автоматически открывается при входе в контекст и закрывается по выходу.
    """
    async with AsyncSessionLocal() as session:
        yield session


def get_gateway(db: AsyncSession = Depends(get_db_session)) -> SqlAlchemyGateway:
    return SqlAlchemyGateway(db)


def get_orchestrator(gateway: SqlAlchemyGateway = Depends(get_gateway)) -> IngestionOrchestrator:
    return IngestionOrchestrator(gateway)
