import os
import tempfile

# Настройки читаются при импорте apguard, поэтому окружение задаём заранее
_tmp_dir = tempfile.mkdtemp(prefix="apguard-tests-")
os.environ.setdefault("DATABASE_URL", f"sqlite+aiosqlite:///{os.path.join(_tmp_dir, 'apguard.db')}")
os.environ.setdefault("LOG_DIR", os.path.join(_tmp_dir, "logs"))
os.environ.setdefault("ENV", "testing")

import pytest
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker

from apguard.db.base import Base
from tests.fakes import InMemoryGateway


@pytest.fixture
def gateway():
    return InMemoryGateway()


@pytest.fixture
async def db_session(tmp_path):
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    Session = sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)
    async with Session() as session:
        yield session
    await engine.dispose()
