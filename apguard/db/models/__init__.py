# Пакет моделей базы данных
# Здесь импортируются все модели, чтобы Alembic мог их обнаружить
from .hardware import HardwareRecord
from .ap_observation import APObservation
from .incident import IncidentRecord, IncidentClassification
