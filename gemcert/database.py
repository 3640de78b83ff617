"""
Модели SQLAlchemy и репозиторий сертификатов.
"""

import logging
from contextlib import contextmanager
from typing import Iterable, List, Optional

from sqlalchemy import (
    create_engine, Column, String, Integer, DateTime, Text, Index, text
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import (
    DisconnectionError, IntegrityError, InterfaceError, OperationalError,
    ProgrammingError, SQLAlchemyError, TimeoutError as PoolTimeoutError
)
from sqlalchemy.orm import declarative_base, sessionmaker, Session
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

from config.settings import get_settings
from .exceptions import DatabaseError, DuplicateKeyError, StoreUnavailableError
from .models import Certificate as CertificateModel, CertificateDraft
from .normalizer import decode_certificate_number, normalize_certificate_number

logger = logging.getLogger(__name__)

# Базовый класс для моделей
Base = declarative_base()

# Ошибки, означающие что БД не дала авторитетного ответа
UNAVAILABLE_ERRORS = (OperationalError, InterfaceError, DisconnectionError, PoolTimeoutError)


class Certificate(Base):
    """Модель сертификата."""

    __tablename__ = "certificates"

    id = Column(Integer, primary_key=True, autoincrement=True)
    # Регистр номера сохраняется как есть, уникальность без учета регистра
    # обеспечивает индекс по number_key
    # Длина номера не ограничена: casefold может удлинить ключ (ß -> ss)
    certificate_number = Column(Text, unique=True, nullable=False)
    number_key = Column(Text, nullable=False)

    gemstone_type = Column(String(255), nullable=False)
    carat_weight = Column(String(50), nullable=False)
    color = Column(String(100), nullable=False)
    clarity = Column(String(50), nullable=False)
    cut = Column(String(100), nullable=False)
    polish = Column(String(50), nullable=False)
    symmetry = Column(String(50), nullable=False)
    fluorescence = Column(String(50), nullable=False)
    measurements = Column(String(255), nullable=False)
    origin = Column(String(255), nullable=False)
    issue_date = Column(String(50), nullable=False)
    image_url = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index('uq_certificates_number_key', 'number_key', unique=True),
        Index('idx_certificates_created_at', 'created_at'),
    )

    def __repr__(self):
        return f"<Certificate(id={self.id}, number={self.certificate_number})>"


def _engine_options(database_url: str, timeout: float) -> dict:
    """Параметры движка с ограничением времени на каждую операцию."""
    url = make_url(database_url)
    backend = url.get_backend_name()
    options = {"pool_pre_ping": True, "echo": False}

    if backend == "sqlite":
        options["connect_args"] = {"timeout": timeout, "check_same_thread": False}
        if url.database in (None, "", ":memory:"):
            # Одно соединение на весь процесс, иначе каждая сессия видит свою пустую БД
            options["poolclass"] = StaticPool
        return options

    options["pool_recycle"] = 3600
    options["pool_timeout"] = timeout
    if backend == "postgresql":
        options["connect_args"] = {
            "connect_timeout": max(1, int(timeout)),
            "options": f"-c statement_timeout={int(timeout * 1000)}"
        }
    return options


def _is_missing_schema(error: SQLAlchemyError) -> bool:
    """Проверяет, что ошибка вызвана отсутствием таблицы."""
    orig = getattr(error, "orig", None)
    if getattr(orig, "pgcode", None) == "42P01":
        return True
    message = str(orig if orig is not None else error).lower()
    return "does not exist" in message or "no such table" in message


def _is_unique_violation(error: IntegrityError) -> bool:
    """Проверяет, что IntegrityError вызван нарушением уникальности."""
    orig = getattr(error, "orig", None)
    if getattr(orig, "pgcode", None) == "23505":
        return True
    message = str(orig if orig is not None else error).lower()
    return "unique" in message or "duplicate" in message


class DatabaseManager:
    """Менеджер для работы с базой данных."""

    def __init__(self, database_url: str = None, timeout: float = None):
        """
        Инициализация менеджера БД.

        Args:
            database_url: URL подключения к БД
            timeout: Ограничение времени операции в секундах
        """
        if database_url is None or timeout is None:
            settings = get_settings()
            database_url = database_url or settings.sqlalchemy_url
            timeout = timeout if timeout is not None else settings.db_timeout

        self.database_url = database_url
        self.timeout = timeout
        self.engine = create_engine(database_url, **_engine_options(database_url, timeout))
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)
        self._schema_ready = False

    def create_tables(self):
        """Создает все таблицы в базе данных."""
        Base.metadata.create_all(bind=self.engine)
        self._schema_ready = True
        logger.info("Таблицы базы данных созданы успешно")

    def drop_tables(self):
        """Удаляет все таблицы из базы данных."""
        Base.metadata.drop_all(bind=self.engine)
        self._schema_ready = False
        logger.info("Таблицы базы данных удалены")

    def ensure_schema(self):
        """
        Создает таблицы, если они еще не были созданы этим менеджером.

        Если при старте БД была недоступна, попытка повторяется при каждом
        обращении к хранилищу, пока не завершится успешно.
        """
        if not self._schema_ready:
            self.create_tables()

    def invalidate_schema(self):
        """Помечает схему как требующую повторного создания."""
        self._schema_ready = False

    def get_session(self) -> Session:
        """Возвращает новую сессию для работы с БД."""
        return self.SessionLocal()

    def health_check(self) -> bool:
        """Проверяет подключение к базе данных."""
        try:
            with self.get_session() as session:
                session.execute(text("SELECT 1"))
                return True
        except SQLAlchemyError as e:
            logger.error(f"Ошибка подключения к БД: {e}")
            return False


class CertificateRepository:
    """Репозиторий для работы с сертификатами."""

    def __init__(self, db_manager: DatabaseManager):
        """
        Инициализация репозитория.

        Args:
            db_manager: Менеджер базы данных
        """
        self.db_manager = db_manager

    @contextmanager
    def _store_errors(self, action: str):
        """Переводит ошибки SQLAlchemy в исключения реестра."""
        try:
            self.db_manager.ensure_schema()
            yield
        except UNAVAILABLE_ERRORS as e:
            logger.warning(f"БД недоступна во время {action}: {e}")
            if _is_missing_schema(e):
                self.db_manager.invalidate_schema()
            raise StoreUnavailableError(f"База данных недоступна: {e}") from e
        except ProgrammingError as e:
            if not _is_missing_schema(e):
                logger.error(f"Ошибка БД во время {action}: {e}")
                raise DatabaseError(f"Ошибка {action}: {e}") from e
            logger.warning(f"Таблицы БД отсутствуют во время {action}: {e}")
            self.db_manager.invalidate_schema()
            raise StoreUnavailableError(f"Схема базы данных не готова: {e}") from e
        except SQLAlchemyError as e:
            logger.error(f"Ошибка БД во время {action}: {e}")
            raise DatabaseError(f"Ошибка {action}: {e}") from e

    def exists(self, certificate_number: str) -> bool:
        """
        Проверяет наличие сертификата без учета регистра.

        Args:
            certificate_number: Номер сертификата

        Returns:
            bool: True если номер уже есть в БД
        """
        key = normalize_certificate_number(certificate_number)
        with self._store_errors("проверки номера"):
            with self.db_manager.get_session() as session:
                row = session.query(Certificate.id).filter(
                    Certificate.number_key == key
                ).first()
                return row is not None

    def get(self, certificate_number: str) -> Optional[CertificateModel]:
        """
        Получает сертификат по номеру.

        Сначала ищет точное совпадение, затем без учета регистра. Если в данных
        оказались дубликаты, возвращается самый свежий.

        Args:
            certificate_number: Номер сертификата

        Returns:
            Optional[CertificateModel]: Сертификат или None
        """
        decoded = decode_certificate_number(certificate_number)
        key = normalize_certificate_number(certificate_number)

        with self._store_errors("получения сертификата"):
            with self.db_manager.get_session() as session:
                certificate = self._newest_first(
                    session.query(Certificate).filter(Certificate.certificate_number == decoded)
                ).first()

                if certificate is None:
                    certificate = self._newest_first(
                        session.query(Certificate).filter(Certificate.number_key == key)
                    ).first()

                return self._to_model(certificate) if certificate else None

    def create(self, draft: CertificateDraft) -> CertificateModel:
        """
        Создает новый сертификат.

        Args:
            draft: Провалидированный черновик

        Returns:
            CertificateModel: Созданный сертификат с id и created_at

        Raises:
            DuplicateKeyError: Если номер уже занят (с учетом регистра или без)
        """
        with self._store_errors("создания сертификата"):
            with self.db_manager.get_session() as session:
                certificate = Certificate(
                    certificate_number=draft.certificate_number,
                    number_key=normalize_certificate_number(draft.certificate_number),
                    gemstone_type=draft.gemstone_type,
                    carat_weight=draft.carat_weight,
                    color=draft.color,
                    clarity=draft.clarity,
                    cut=draft.cut,
                    polish=draft.polish,
                    symmetry=draft.symmetry,
                    fluorescence=draft.fluorescence,
                    measurements=draft.measurements,
                    origin=draft.origin,
                    issue_date=draft.issue_date,
                    image_url=draft.image_url
                )
                session.add(certificate)

                try:
                    session.commit()
                except IntegrityError as e:
                    session.rollback()
                    if _is_unique_violation(e):
                        raise DuplicateKeyError(
                            f"Сертификат с номером {draft.certificate_number} уже существует"
                        ) from e
                    raise DatabaseError(f"Ошибка сохранения сертификата: {e}") from e

                session.refresh(certificate)
                return self._to_model(certificate)

    def list_all(self) -> List[CertificateModel]:
        """Возвращает все сертификаты, новые первыми."""
        with self._store_errors("получения списка сертификатов"):
            with self.db_manager.get_session() as session:
                rows = self._newest_first(session.query(Certificate)).all()
                return [self._to_model(row) for row in rows]

    def count(self) -> int:
        """Количество сертификатов в БД."""
        with self._store_errors("подсчета сертификатов"):
            with self.db_manager.get_session() as session:
                return session.query(Certificate).count()

    def import_records(self, records: Iterable[CertificateModel]) -> int:
        """
        Переносит готовые записи (образцы) в БД, пропуская занятые номера.

        Args:
            records: Записи для переноса

        Returns:
            int: Количество добавленных записей
        """
        inserted = 0
        for record in records:
            if self.exists(record.certificate_number):
                continue
            draft = CertificateDraft(**record.dict(exclude={"id", "created_at"}))
            try:
                self.create(draft)
            except DuplicateKeyError:
                continue
            inserted += 1

        logger.info(f"Перенесено образцов в БД: {inserted}")
        return inserted

    @staticmethod
    def _newest_first(query):
        return query.order_by(Certificate.created_at.desc(), Certificate.id.desc())

    @staticmethod
    def _to_model(db_certificate: Certificate) -> CertificateModel:
        """
        Конвертирует объект БД в Pydantic модель.

        Args:
            db_certificate: Объект сертификата из БД

        Returns:
            CertificateModel: Pydantic модель сертификата
        """
        return CertificateModel(
            id=db_certificate.id,
            certificate_number=db_certificate.certificate_number,
            gemstone_type=db_certificate.gemstone_type,
            carat_weight=db_certificate.carat_weight,
            color=db_certificate.color,
            clarity=db_certificate.clarity,
            cut=db_certificate.cut,
            polish=db_certificate.polish,
            symmetry=db_certificate.symmetry,
            fluorescence=db_certificate.fluorescence,
            measurements=db_certificate.measurements,
            origin=db_certificate.origin,
            issue_date=db_certificate.issue_date,
            image_url=db_certificate.image_url,
            created_at=db_certificate.created_at
        )


# Глобальные менеджер БД и репозиторий создаются при первом обращении
_db_manager: Optional[DatabaseManager] = None
_certificate_repo: Optional[CertificateRepository] = None


def get_db_manager() -> DatabaseManager:
    """Возвращает менеджер БД."""
    global _db_manager
    if _db_manager is None:
        _db_manager = DatabaseManager()
    return _db_manager


def get_certificate_repo() -> CertificateRepository:
    """Возвращает репозиторий сертификатов."""
    global _certificate_repo
    if _certificate_repo is None:
        _certificate_repo = CertificateRepository(get_db_manager())
    return _certificate_repo
