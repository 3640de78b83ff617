"""
Единое представление реестра поверх БД и встроенного набора образцов.
"""

import logging
from typing import List, Optional

from .database import CertificateRepository
from .exceptions import StoreUnavailableError
from .models import Certificate
from .seed import SeedSet

logger = logging.getLogger(__name__)


class CertificateResolver:
    """Двухуровневый поиск: сначала БД, затем образцы."""

    def __init__(self, repository: CertificateRepository, seed_set: SeedSet):
        """
        Args:
            repository: Репозиторий сертификатов в БД
            seed_set: Набор образцов
        """
        self.repository = repository
        self.seed_set = seed_set

    def resolve_get(self, certificate_number: str) -> Optional[Certificate]:
        """
        Находит сертификат по номеру.

        Если БД вернула запись, она и возвращается. Если БД недоступна или
        записи нет, поиск продолжается в образцах.

        Args:
            certificate_number: Номер сертификата (регистр и URL-кодирование не важны)

        Returns:
            Optional[Certificate]: Сертификат или None если не найден нигде
        """
        try:
            certificate = self.repository.get(certificate_number)
        except StoreUnavailableError as e:
            logger.warning(f"БД недоступна, поиск {certificate_number} среди образцов: {e}")
            certificate = None

        if certificate is not None:
            return certificate

        return self.seed_set.find(certificate_number)

    def resolve_exists(self, certificate_number: str) -> bool:
        """
        Проверяет, занят ли номер в БД или в образцах.

        Оба источника проверяются всегда. Если БД недоступна, а в образцах
        номера нет, ответа нет и StoreUnavailableError пробрасывается дальше.

        Raises:
            StoreUnavailableError: Если БД недоступна и номер не найден в образцах
        """
        try:
            in_store = self.repository.exists(certificate_number)
        except StoreUnavailableError:
            if self.seed_set.exists(certificate_number):
                return True
            raise

        return in_store or self.seed_set.exists(certificate_number)

    def resolve_all(self) -> List[Certificate]:
        """
        Все сертификаты: записи БД (новые первыми), затем образцы,
        номера которых не перекрыты записями БД.
        """
        try:
            stored = self.repository.list_all()
        except StoreUnavailableError as e:
            logger.warning(f"БД недоступна, список содержит только образцы: {e}")
            stored = []

        stored_keys = {certificate.number_key for certificate in stored}
        samples = [sample for sample in self.seed_set.all() if sample.number_key not in stored_keys]
        return stored + samples
