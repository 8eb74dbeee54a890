from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    # Окружение: production, development, testing
    ENV: str = Field(
        "production",
        description="Application environment",
    )
    DEBUG: bool = Field(
        False,
        description="Turn on debug mode (reload, detailed errors)",
    )

    # Подключение к БД (в проде - postgresql+asyncpg://...)
    DATABASE_URL: str = Field(
        "sqlite+aiosqlite:///./apguard.db",
        description="SQLAlchemy async database URL",
    )

    # Общие параметры API
    API_PREFIX: str = Field(
        "/v1",
        description="Base prefix for all API routes",
    )
    APP_NAME: str = Field(
        "AP Guard",
        description="Application name for docs/title",
    )

    # Логи
    LOG_LEVEL: str = Field(
        "INFO",
        description="Logging level",
    )
    LOG_DIR: str = Field(
        "logs",
        description="Directory for log files",
    )
    LOG_FILENAME: str = Field(
        "apguard.log",
        description="Log file name",
    )

    # Инциденты без авторизованного источника
    UNKNOWN_REPORTER: str = Field(
        "unknown",
        description="Reporter e-mail stored when a scan has no authenticated sender",
    )

    model_config = {
        "env_file": ".env",
        "case_sensitive": True,
    }


settings = Settings()
