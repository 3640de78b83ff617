# config/settings.py - настройки реестра сертификатов

"""
Настройки приложения, загружаемые из переменных окружения.
"""

import logging
from pathlib import Path
from typing import List, Optional
from pydantic import Field, validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Настройки приложения."""

    # Настройки базы данных
    database_url: Optional[str] = Field(default=None, description="Полный URL подключения к БД")
    db_host: str = Field(default="localhost", description="Хост базы данных")
    db_port: int = Field(default=5432, description="Порт базы данных")
    db_name: str = Field(default="gemcert", description="Имя базы данных")
    db_user: str = Field(default="gemcert", description="Пользователь базы данных")
    db_password: str = Field(default="", description="Пароль базы данных")
    db_timeout: float = Field(default=5.0, description="Ограничение времени операции с БД, сек")

    # Настройки хранилища фотографий
    objects_path: Path = Field(default=Path("./objects"), description="Путь к хранилищу объектов")

    # Настройки API
    api_key: Optional[str] = Field(default=None, description="Ключ для регистрации сертификатов")
    cors_origins: str = Field(default="*", description="Разрешенные источники CORS через запятую")

    # Резервный набор образцов
    seed_fallback: bool = Field(default=True, description="Искать среди встроенных образцов")

    # Настройки логирования
    log_level: str = Field(default="INFO", description="Уровень логирования")
    log_file: Path = Field(default=Path("./logs/gemcert.log"), description="Путь к файлу логов")

    debug: bool = Field(default=False, description="Режим отладки")

    @property
    def sqlalchemy_url(self) -> str:
        """Возвращает URL подключения к базе данных."""
        if self.database_url:
            return self.database_url
        return f"postgresql://{self.db_user}:{self.db_password}@{self.db_host}:{self.db_port}/{self.db_name}"

    @property
    def cors_origins_list(self) -> List[str]:
        """Возвращает список разрешенных источников CORS."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @validator('log_level')
    def validate_log_level(cls, v):
        """Валидация уровня логирования."""
        level = v.upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Неизвестный уровень логирования: {v}")
        return level

    @validator('db_timeout')
    def validate_db_timeout(cls, v):
        """Таймаут должен быть положительным."""
        if v <= 0:
            raise ValueError("DB_TIMEOUT должен быть больше нуля")
        return v

    def create_directories(self):
        """Создает необходимые директории."""
        self.objects_path.mkdir(parents=True, exist_ok=True)
        self.log_file.parent.mkdir(parents=True, exist_ok=True)

    class Config:
        """Конфигурация настроек."""
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"  # Игнорировать дополнительные поля из .env


# Настройки загружаются при первом обращении
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Возвращает объект настроек."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def load_settings_from_file(env_file: str = ".env") -> Settings:
    """
    Загружает настройки из указанного файла и делает их текущими.

    Args:
        env_file: Путь к файлу с переменными окружения

    Returns:
        Settings: Объект настроек
    """
    global _settings
    _settings = Settings(_env_file=env_file)
    return _settings


def setup_logging(settings: Settings = None):
    """Настройка логирования: файл и консоль."""
    settings = settings or get_settings()
    settings.log_file.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=getattr(logging, settings.log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(settings.log_file, encoding='utf-8'),
            logging.StreamHandler()
        ]
    )
