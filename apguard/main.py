from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from apguard.core.config import settings
from apguard.core.logging_config import setup_logging
from apguard.db.base import Base
from apguard.db.session import async_engine

from apguard.api.routers.health import router as health_router
from apguard.api.routers.service_logs import router as service_logs_router
from apguard.api.routers.access_point import router as access_point_router

setup_logging()

app = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    debug=settings.DEBUG,
)

# CORS: сенсоры и панель ходят с разных хостов
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

@app.on_event("startup")
async def on_startup():
    async with async_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

# Подключаем роутеры
app.include_router(health_router, tags=["health"])
app.include_router(service_logs_router, tags=["ingestion"])
app.include_router(access_point_router, tags=["access_points"])
