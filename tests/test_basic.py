"""
Базовые тесты нормализации номеров, моделей и валидации черновиков.
"""

import pytest
from datetime import date, datetime

from gemcert.exceptions import MissingFieldError
from gemcert.models import Certificate, CertificateDraft
from gemcert.normalizer import decode_certificate_number, normalize_certificate_number
from gemcert.seed import SAMPLE_CERTIFICATES, SeedSet
from gemcert.validators import DraftValidator
from conftest import draft_data


class TestNormalizer:
    """Тесты нормализации номеров сертификатов."""

    def test_case_folding(self):
        """Номера в разном регистре дают один ключ."""
        assert normalize_certificate_number("GIE-2024-009999") == normalize_certificate_number("gie-2024-009999")
        assert normalize_certificate_number("GIE-2024-009999") == "gie-2024-009999"

    def test_url_decoding(self):
        """Процентное кодирование снимается до сравнения."""
        assert normalize_certificate_number("LAB%2F2024%20A") == "lab/2024 a"
        assert decode_certificate_number("LAB%2F2024%20A") == "LAB/2024 A"

    def test_display_value_is_not_changed(self):
        """Декодирование сохраняет исходный регистр."""
        assert decode_certificate_number("Gie-2024-ABC") == "Gie-2024-ABC"

    def test_empty_number(self):
        """Пустой номер - ошибка валидации, а не ключ."""
        for value in [None, "", "   ", "%20"]:
            with pytest.raises(MissingFieldError) as exc_info:
                normalize_certificate_number(value)
            assert exc_info.value.fields == ["certificateNumber"]


class TestDraftValidator:
    """Тесты валидатора черновиков."""

    def test_valid_draft(self):
        """Полный черновик проходит валидацию."""
        validator = DraftValidator()
        draft = CertificateDraft(**draft_data())

        assert validator.missing_fields(draft) == []
        assert validator.validate(draft).certificate_number == "GIE-2024-009999"

    def test_missing_fields_are_listed(self):
        """Все незаполненные поля перечисляются в JSON-нотации."""
        validator = DraftValidator()
        draft = CertificateDraft(**draft_data(gemstoneType=None, origin="  "))

        with pytest.raises(MissingFieldError) as exc_info:
            validator.validate(draft)

        assert exc_info.value.fields == ["gemstoneType", "origin"]

    def test_missing_certificate_number(self):
        """Номер сертификата обязателен."""
        validator = DraftValidator()
        draft = CertificateDraft(**draft_data(certificate_number=""))

        assert validator.missing_fields(draft) == ["certificateNumber"]

    def test_issue_date_defaults_to_today(self):
        """Без даты выдачи подставляется текущая дата."""
        validator = DraftValidator()
        data = draft_data()
        del data["issueDate"]

        draft = validator.validate(CertificateDraft(**data))

        assert draft.issue_date == date.today().isoformat()

    def test_image_url_is_optional(self):
        """Фото не обязательно."""
        validator = DraftValidator()
        draft = CertificateDraft(**draft_data(imageUrl=None))

        assert validator.missing_fields(draft) == []


class TestModels:
    """Тесты моделей."""

    def test_numeric_carat_weight(self):
        """Числовой вес приводится к строке."""
        draft = CertificateDraft(**draft_data(caratWeight=1.25))
        assert draft.carat_weight == "1.25"

    def test_system_fields_are_ignored_in_draft(self):
        """id и createdAt из запроса игнорируются."""
        draft = CertificateDraft(**draft_data(id=42, createdAt="2020-01-01T00:00:00"))
        assert not hasattr(draft, "id")
        assert not hasattr(draft, "created_at")

    def test_to_dict_uses_camel_case(self):
        """Сериализация в JSON-нотации."""
        certificate = Certificate(
            id=7,
            created_at=datetime(2024, 3, 1, 12, 0),
            **draft_data()
        )

        data = certificate.to_dict()
        assert data["certificateNumber"] == "GIE-2024-009999"
        assert data["gemstoneType"] == "Natural Diamond"
        assert data["createdAt"] == "2024-03-01T12:00:00"
        assert data["imageUrl"] is None
        assert certificate.number_key == "gie-2024-009999"
        assert not certificate.is_sample


class TestSeedSet:
    """Тесты набора образцов."""

    def test_samples(self):
        """Встроенные образцы доступны без БД."""
        seed_set = SeedSet()

        assert len(seed_set) == 3
        assert [sample.certificate_number for sample in seed_set.all()] == [
            "GIE-2024-001234", "GIE-2024-001235", "GIE-2024-001236"
        ]
        assert all(sample.is_sample for sample in SAMPLE_CERTIFICATES)

    def test_find_is_case_insensitive(self):
        """Поиск образца без учета регистра и кодирования."""
        seed_set = SeedSet()

        assert seed_set.find("gie-2024-001235").gemstone_type == "Ruby"
        assert seed_set.find("GIE%2D2024%2D001236").gemstone_type == "Sapphire"
        assert seed_set.find("GIE-2024-000000") is None
        assert seed_set.exists("Gie-2024-001234")
