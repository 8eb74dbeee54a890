from sqlalchemy.orm import declarative_base

Base = declarative_base()

# Импорт моделей, чтобы таблицы создавались автоматически
from apguard.db.models import (
    hardware,
    ap_observation,
    incident,
)
