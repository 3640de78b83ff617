"""
API для работы с реестром сертификатов
"""
import logging
import mimetypes
from typing import List, Optional

from fastapi import FastAPI, HTTPException, Depends, Request, Response
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from .exceptions import (
    DuplicateCertificateError, MissingFieldError, ObjectNotFoundError,
    StorageError, StoreUnavailableError
)
from .models import Certificate, CertificateDraft
from .service import CertificateService
from .storage import ObjectStorage


def _error(status_code: int, kind: str, message: str) -> HTTPException:
    """Ошибка API с типом из таксономии реестра"""
    return HTTPException(status_code=status_code, detail={"error": kind, "message": message})


class CertificateAPI:
    """API для работы с сертификатами"""

    def __init__(
            self,
            service: CertificateService,
            object_storage: ObjectStorage,
            api_key: Optional[str] = None
    ):
        self.service = service
        self.object_storage = object_storage
        self.api_key = api_key
        self.logger = logging.getLogger(__name__)

        self.app = FastAPI(
            title="Gemstone Certificate Registry API",
            description="API реестра геммологических сертификатов",
            version="1.0.0"
        )

        self._setup_routes()

    def _verify_api_key(
            self,
            credentials: Optional[HTTPAuthorizationCredentials] = Depends(HTTPBearer(auto_error=False))
    ) -> bool:
        """Проверка API ключа (если он задан)"""
        if not self.api_key:
            return True
        if credentials is None or credentials.credentials != self.api_key:
            raise HTTPException(status_code=401, detail="Invalid API key")
        return True

    def _setup_routes(self):
        """Настройка маршрутов API"""

        @self.app.get("/api/certificates", response_model=List[Certificate])
        def list_certificates():
            """Список всех сертификатов"""
            try:
                return self.service.list_certificates()
            except Exception as e:
                self.logger.error(f"Ошибка получения списка сертификатов: {e}")
                raise _error(500, "InternalError", "Ошибка получения сертификатов")

        @self.app.post("/api/certificates", response_model=Certificate, status_code=201)
        def register_certificate(
                draft: CertificateDraft,
                authorized: bool = Depends(self._verify_api_key)
        ):
            """Регистрация нового сертификата"""
            try:
                return self.service.register_certificate(draft)

            except MissingFieldError as e:
                self.logger.warning(f"Ошибка валидации: {e}")
                raise _error(400, "MissingField", str(e))
            except DuplicateCertificateError as e:
                raise _error(409, "DuplicateCertificate", str(e))
            except StoreUnavailableError as e:
                self.logger.error(f"БД недоступна: {e}")
                raise _error(503, "StoreUnavailable", "База данных временно недоступна")
            except Exception as e:
                self.logger.error(f"Неожиданная ошибка: {e}")
                raise _error(500, "InternalError", "Внутренняя ошибка сервера")

        @self.app.get("/api/certificates/lookup/{certificate_number:path}", response_model=Certificate)
        def lookup_certificate(certificate_number: str):
            """Поиск сертификата по номеру"""
            try:
                certificate = self.service.lookup_certificate(certificate_number)
            except MissingFieldError as e:
                raise _error(400, "MissingField", str(e))
            except Exception as e:
                self.logger.error(f"Ошибка поиска сертификата: {e}")
                raise _error(500, "InternalError", "Ошибка поиска сертификата")

            if certificate is None:
                raise _error(404, "NotFound", f"Сертификат с номером {certificate_number} не найден")
            return certificate

        @self.app.post("/api/objects/upload")
        def get_upload_url(authorized: bool = Depends(self._verify_api_key)):
            """Адрес для загрузки фотографии"""
            return {"uploadURL": self.object_storage.get_upload_target()}

        @self.app.put("/objects/uploads/{object_id}")
        async def upload_object(
                object_id: str,
                request: Request,
                authorized: bool = Depends(self._verify_api_key)
        ):
            """Загрузка фотографии"""
            data = await request.body()
            try:
                object_path = self.object_storage.save_object(object_id, data)
            except StorageError as e:
                self.logger.error(f"Ошибка сохранения фотографии: {e}")
                raise _error(400, "StorageError", str(e))
            return {"objectPath": object_path}

        @self.app.get("/objects/{object_path:path}")
        def fetch_object(object_path: str):
            """Выдача сохраненной фотографии"""
            full_path = f"/objects/{object_path}"
            try:
                content = self.object_storage.fetch_object(full_path)
            except ObjectNotFoundError:
                raise _error(404, "NotFound", "Объект не найден")
            except StorageError as e:
                self.logger.error(f"Ошибка чтения фотографии: {e}")
                raise _error(500, "InternalError", "Ошибка чтения объекта")

            media_type = mimetypes.guess_type(object_path)[0] or "application/octet-stream"
            return Response(content=content, media_type=media_type)
