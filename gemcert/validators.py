"""
Модуль валидации черновиков сертификатов.
"""

from typing import List, Optional

from .exceptions import MissingFieldError
from .models import CertificateDraft, DESCRIPTIVE_FIELDS


class DraftValidator:
    """Проверка обязательных полей черновика."""

    def __init__(self):
        # Порядок важен: в таком порядке поля попадают в сообщение об ошибке
        self.required_fields = ('certificate_number',) + DESCRIPTIVE_FIELDS

    def missing_fields(self, draft: CertificateDraft) -> List[str]:
        """
        Находит незаполненные обязательные поля.

        Args:
            draft: Черновик сертификата

        Returns:
            List[str]: Имена полей в JSON-нотации (пустой список если все в порядке)
        """
        missing = []
        for field_name in self.required_fields:
            value = getattr(draft, field_name)
            if self._is_blank(value):
                missing.append(self._json_name(field_name))
        return missing

    def validate(self, draft: CertificateDraft) -> CertificateDraft:
        """
        Валидирует черновик и подставляет значения по умолчанию.

        Raises:
            MissingFieldError: Если не заполнены обязательные поля
        """
        missing = self.missing_fields(draft)
        if missing:
            raise MissingFieldError(missing)
        return draft.with_defaults()

    @staticmethod
    def _is_blank(value: Optional[str]) -> bool:
        return value is None or not str(value).strip()

    @staticmethod
    def _json_name(field_name: str) -> str:
        field = CertificateDraft.model_fields[field_name]
        return field.alias or field_name
