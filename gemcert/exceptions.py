"""
Кастомные исключения для реестра геммологических сертификатов.
"""
from typing import Iterable


class CertificateError(Exception):
    """Базовое исключение для всех ошибок реестра."""
    pass


class ValidationError(CertificateError):
    """Ошибка валидации входных данных."""
    pass


class MissingFieldError(ValidationError):
    """Не заполнены обязательные поля."""

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Не заполнены обязательные поля: {', '.join(self.fields)}")


class DuplicateCertificateError(CertificateError):
    """Сертификат с таким номером уже зарегистрирован."""

    def __init__(self, certificate_number: str):
        self.certificate_number = certificate_number
        super().__init__(
            f"Номер сертификата {certificate_number} уже используется. "
            f"Укажите другой номер."
        )


class DatabaseError(CertificateError):
    """Ошибка работы с базой данных."""
    pass


class StoreUnavailableError(DatabaseError):
    """База данных недоступна или не ответила за отведенное время."""
    pass


class DuplicateKeyError(DatabaseError):
    """Нарушение уникальности номера на уровне БД."""
    pass


class InternalError(CertificateError):
    """Непредвиденная внутренняя ошибка."""
    pass


class StorageError(CertificateError):
    """Ошибка работы с хранилищем объектов."""
    pass


class ObjectNotFoundError(StorageError):
    """Объект не найден в хранилище."""
    pass
