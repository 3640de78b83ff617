"""
Нормализация номеров сертификатов для сравнения.

Номер хранится и отдается клиенту в исходном написании, а для сравнения
используется ключ: номер без URL-кодирования, приведенный к casefold.
"""
from typing import Optional
from urllib.parse import unquote

from .exceptions import MissingFieldError

CERTIFICATE_NUMBER_FIELD = "certificateNumber"


def decode_certificate_number(value: Optional[str]) -> str:
    """
    Снимает URL-кодирование с номера сертификата.

    Args:
        value: Номер в том виде, в каком он пришел (например, из сегмента пути)

    Returns:
        str: Декодированный номер

    Raises:
        MissingFieldError: Если номер пустой
    """
    if value is None or not str(value).strip():
        raise MissingFieldError([CERTIFICATE_NUMBER_FIELD])

    decoded = unquote(str(value))
    if not decoded.strip():
        raise MissingFieldError([CERTIFICATE_NUMBER_FIELD])
    return decoded


def normalize_certificate_number(value: Optional[str]) -> str:
    """
    Возвращает канонический ключ номера сертификата.

    Args:
        value: Номер сертификата

    Returns:
        str: Ключ для сравнения и индексации
    """
    return decode_certificate_number(value).casefold()
