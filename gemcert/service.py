"""
Основная бизнес-логика реестра: регистрация и поиск сертификатов.
"""

import logging
from datetime import datetime
from typing import Dict, List, Optional

from config.settings import get_settings
from .database import CertificateRepository, get_certificate_repo
from .exceptions import *
from .models import Certificate, CertificateDraft
from .resolver import CertificateResolver
from .seed import SeedSet, empty_seed_set
from .validators import DraftValidator

# Настройка логирования
logger = logging.getLogger(__name__)


class CertificateService:
    """Сервис для работы с сертификатами."""

    def __init__(self, repository: CertificateRepository = None, seed_set: SeedSet = None):
        """
        Инициализация сервиса.

        Args:
            repository: Репозиторий БД (по умолчанию глобальный)
            seed_set: Набор образцов (по умолчанию встроенный)
        """
        self.repository = repository if repository is not None else get_certificate_repo()
        self.seed_set = seed_set if seed_set is not None else SeedSet()
        self.resolver = CertificateResolver(self.repository, self.seed_set)
        self.validator = DraftValidator()

    def register_certificate(self, draft: CertificateDraft) -> Certificate:
        """
        Регистрирует новый сертификат.

        Предварительная проверка уникальности лишь отсекает очевидные дубликаты,
        окончательное решение принимает уникальный индекс БД.

        Args:
            draft: Черновик сертификата

        Returns:
            Certificate: Зарегистрированный сертификат

        Raises:
            MissingFieldError: Не заполнены обязательные поля
            DuplicateCertificateError: Номер уже используется
            StoreUnavailableError: БД недоступна
            InternalError: Непредвиденная ошибка
        """
        logger.info(f"Регистрация сертификата {draft.certificate_number}")

        try:
            draft = self.validator.validate(draft)

            if self.resolver.resolve_exists(draft.certificate_number):
                logger.warning(f"Номер {draft.certificate_number} уже используется")
                raise DuplicateCertificateError(draft.certificate_number)

            try:
                certificate = self.repository.create(draft)
            except DuplicateKeyError:
                # Параллельный запрос успел записать тот же номер
                logger.warning(f"Номер {draft.certificate_number} занят параллельной регистрацией")
                raise DuplicateCertificateError(draft.certificate_number)

            logger.info(f"Сертификат {certificate.certificate_number} зарегистрирован (id={certificate.id})")
            return certificate

        except (ValidationError, DuplicateCertificateError, StoreUnavailableError):
            raise
        except Exception as e:
            logger.exception(f"Ошибка регистрации сертификата {draft.certificate_number}: {e}")
            raise InternalError("Не удалось зарегистрировать сертификат") from e

    def lookup_certificate(self, certificate_number: str) -> Optional[Certificate]:
        """
        Находит сертификат по номеру.

        Args:
            certificate_number: Номер сертификата

        Returns:
            Optional[Certificate]: Сертификат или None если не найден
        """
        logger.info(f"Поиск сертификата {certificate_number}")

        try:
            certificate = self.resolver.resolve_get(certificate_number)
        except ValidationError:
            raise
        except Exception as e:
            logger.exception(f"Ошибка поиска сертификата {certificate_number}: {e}")
            raise InternalError("Не удалось выполнить поиск сертификата") from e

        if certificate is None:
            logger.info(f"Сертификат {certificate_number} не найден")
        return certificate

    def certificate_exists(self, certificate_number: str) -> bool:
        """Проверяет, занят ли номер в реестре."""
        return self.resolver.resolve_exists(certificate_number)

    def list_certificates(self) -> List[Certificate]:
        """
        Возвращает все сертификаты реестра.

        Returns:
            List[Certificate]: Записи БД и образцы
        """
        try:
            return self.resolver.resolve_all()
        except Exception as e:
            logger.exception(f"Ошибка получения списка сертификатов: {e}")
            raise InternalError("Не удалось получить список сертификатов") from e

    def get_statistics(self) -> Dict:
        """
        Получает статистику реестра.

        Returns:
            Dict: Статистика
        """
        logger.info("Получение статистики сертификатов")

        try:
            total = self.repository.count()
            available = True
        except DatabaseError as e:
            logger.warning(f"Не удалось посчитать сертификаты в БД: {e}")
            total = None
            available = False

        return {
            "database": {
                "total_certificates": total,
                "available": available
            },
            "sample_certificates": len(self.seed_set),
            "last_updated": datetime.now().isoformat()
        }


# Глобальный экземпляр сервиса создается при первом обращении
_certificate_service: Optional[CertificateService] = None


def get_certificate_service() -> CertificateService:
    """Возвращает экземпляр сервиса сертификатов."""
    global _certificate_service
    if _certificate_service is None:
        settings = get_settings()
        seed_set = SeedSet() if settings.seed_fallback else empty_seed_set()
        _certificate_service = CertificateService(seed_set=seed_set)
    return _certificate_service
