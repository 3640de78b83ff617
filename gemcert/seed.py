"""
Встроенный набор образцов сертификатов.

Образцы доступны независимо от БД и используются как резервный источник
при поиске. В набор ничего не записывается.
"""

from typing import Dict, Iterable, List, Optional

from .models import Certificate
from .normalizer import normalize_certificate_number

SAMPLE_CERTIFICATES = (
    Certificate(
        certificate_number="GIE-2024-001234",
        gemstone_type="Natural Diamond",
        carat_weight="1.25",
        color="D",
        clarity="VVS1",
        cut="Excellent",
        polish="Excellent",
        symmetry="Excellent",
        fluorescence="None",
        measurements="6.85 x 6.91 x 4.24 mm",
        origin="Natural",
        issue_date="2024-01-15",
        image_url="/diamond-sample.jpg"
    ),
    Certificate(
        certificate_number="GIE-2024-001235",
        gemstone_type="Ruby",
        carat_weight="2.15",
        color="Pigeon Blood Red",
        clarity="VS1",
        cut="Oval",
        polish="Very Good",
        symmetry="Very Good",
        fluorescence="None",
        measurements="8.12 x 6.45 x 4.21 mm",
        origin="Burma (Myanmar)",
        issue_date="2024-01-20",
        image_url="/ruby-sample.jpg"
    ),
    Certificate(
        certificate_number="GIE-2024-001236",
        gemstone_type="Sapphire",
        carat_weight="3.45",
        color="Royal Blue",
        clarity="VVS2",
        cut="Cushion",
        polish="Excellent",
        symmetry="Very Good",
        fluorescence="None",
        measurements="9.15 x 8.92 x 5.78 mm",
        origin="Kashmir",
        issue_date="2024-02-01",
        image_url="/sapphire-sample.jpg"
    ),
)


class SeedSet:
    """Неизменяемый набор образцов с поиском по нормализованному ключу."""

    def __init__(self, records: Iterable[Certificate] = SAMPLE_CERTIFICATES):
        self._records: List[Certificate] = list(records)
        self._by_key: Dict[str, Certificate] = {}
        for record in self._records:
            # Первый образец с данным ключом побеждает
            self._by_key.setdefault(record.number_key, record)

    def find(self, certificate_number: str) -> Optional[Certificate]:
        """Ищет образец по номеру без учета регистра."""
        return self._by_key.get(normalize_certificate_number(certificate_number))

    def exists(self, certificate_number: str) -> bool:
        return self.find(certificate_number) is not None

    def all(self) -> List[Certificate]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


def empty_seed_set() -> SeedSet:
    """Пустой набор, когда резервные образцы отключены в настройках."""
    return SeedSet(records=())
