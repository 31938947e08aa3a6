"""
Конфигурация клиента админ-панели.
"""

import logging
from pathlib import Path
from pydantic_settings import BaseSettings


# Определяем корень проекта (где лежит .env)
PROJECT_ROOT = Path(__file__).parent.parent
ENV_FILE = PROJECT_ROOT / ".env"

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Настройки клиента."""
    
    # Приложение
    APP_NAME: str = "tukuaplikasi.com Admin"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    
    # Backend API маркетплейса
    API_URL: str = "http://localhost:8081/api"
    
    # Хранилище токена администратора
    TOKEN_DB_PATH: Path = PROJECT_ROOT / "data" / "admin_session.db"
    
    # Размер страницы списков по умолчанию
    ITEMS_PER_PAGE: int = 10
    
    class Config:
        env_file = str(ENV_FILE)
        env_file_encoding = "utf-8"


# Глобальный экземпляр настроек
settings = Settings()

logger.debug(f"[CONFIG] Loading from: {ENV_FILE} (exists: {ENV_FILE.exists()})")
logger.debug(f"[CONFIG] API_URL: {settings.API_URL}")
