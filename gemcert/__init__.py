"""
Основной модуль бизнес-логики реестра геммологических сертификатов.
"""

from .service import CertificateService, get_certificate_service
from .models import Certificate, CertificateDraft
from .normalizer import normalize_certificate_number
from .resolver import CertificateResolver
from .seed import SeedSet, SAMPLE_CERTIFICATES
from .database import DatabaseManager, CertificateRepository, get_db_manager, get_certificate_repo
from .storage import ObjectStorage

__version__ = "1.0.0"

__all__ = [
    'CertificateService',
    'get_certificate_service',
    'Certificate',
    'CertificateDraft',
    'normalize_certificate_number',
    'CertificateResolver',
    'SeedSet',
    'SAMPLE_CERTIFICATES',
    'DatabaseManager',
    'CertificateRepository',
    'get_db_manager',
    'get_certificate_repo',
    'ObjectStorage'
]
