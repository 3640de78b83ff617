"""
Общие фикстуры для тестов
"""
import pytest

from gemcert.database import CertificateRepository, DatabaseManager
from gemcert.models import CertificateDraft
from gemcert.seed import SeedSet
from gemcert.service import CertificateService
from gemcert.storage import ObjectStorage


def draft_data(certificate_number="GIE-2024-009999", **overrides):
    """Данные черновика в JSON-нотации"""
    data = {
        "certificateNumber": certificate_number,
        "gemstoneType": "Natural Diamond",
        "caratWeight": "1.01",
        "color": "E",
        "clarity": "VS2",
        "cut": "Excellent",
        "polish": "Excellent",
        "symmetry": "Very Good",
        "fluorescence": "Faint",
        "measurements": "6.41 x 6.45 x 3.98 mm",
        "origin": "Natural",
        "issueDate": "2024-03-01"
    }
    data.update(overrides)
    return data


@pytest.fixture
def make_draft():
    """Фабрика черновиков"""
    def _make(certificate_number="GIE-2024-009999", **overrides):
        return CertificateDraft(**draft_data(certificate_number, **overrides))
    return _make


@pytest.fixture
def db_manager():
    """БД SQLite в памяти с созданными таблицами"""
    manager = DatabaseManager("sqlite://", timeout=1.0)
    manager.create_tables()
    yield manager
    manager.engine.dispose()


@pytest.fixture
def repository(db_manager):
    """Репозиторий поверх БД в памяти"""
    return CertificateRepository(db_manager)


@pytest.fixture
def unavailable_repository(tmp_path):
    """Репозиторий, БД которого недоступна (каталога не существует)"""
    manager = DatabaseManager(f"sqlite:///{tmp_path / 'missing' / 'registry.db'}", timeout=0.1)
    yield CertificateRepository(manager)
    manager.engine.dispose()


@pytest.fixture
def seed_set():
    """Встроенный набор образцов"""
    return SeedSet()


@pytest.fixture
def service(repository, seed_set):
    """Сервис поверх БД в памяти"""
    return CertificateService(repository, seed_set)


@pytest.fixture
def object_storage(tmp_path):
    """Временное хранилище объектов"""
    return ObjectStorage(str(tmp_path / "objects"))
