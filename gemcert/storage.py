"""
Модуль для работы с хранилищем фотографий сертификатов
"""
import os
import uuid
from pathlib import Path
from urllib.parse import urlparse

from .exceptions import ObjectNotFoundError, StorageError

OBJECTS_PREFIX = "/objects/"
UPLOADS_DIR = "uploads"


class ObjectStorage:
    """Класс для работы с локальным хранилищем объектов"""

    def __init__(self, base_path: str = "objects"):
        self.base_path = Path(base_path).resolve()
        (self.base_path / UPLOADS_DIR).mkdir(parents=True, exist_ok=True)

    def get_upload_target(self) -> str:
        """
        Выдает адрес для загрузки нового объекта

        Returns:
            URL вида /objects/uploads/<uuid>
        """
        return f"{OBJECTS_PREFIX}{UPLOADS_DIR}/{uuid.uuid4()}"

    def resolve_stored_path(self, upload_url: str) -> str:
        """
        Приводит адрес загрузки к пути объекта, который сохраняется в imageUrl

        Args:
            upload_url: Полный или относительный адрес загрузки

        Returns:
            Путь объекта; сторонние адреса возвращаются без изменений
        """
        path = urlparse(upload_url).path
        if not path.startswith(OBJECTS_PREFIX):
            return upload_url
        return OBJECTS_PREFIX + path[len(OBJECTS_PREFIX):].strip("/")

    def save_object(self, object_id: str, data: bytes) -> str:
        """
        Сохранение загруженного объекта

        Args:
            object_id: Идентификатор из адреса загрузки
            data: Содержимое файла

        Returns:
            Путь сохраненного объекта
        """
        object_path = f"{OBJECTS_PREFIX}{UPLOADS_DIR}/{object_id}"
        file_path = self._file_path(object_path)
        if file_path is None:
            raise StorageError(f"Недопустимый идентификатор объекта: {object_id}")

        try:
            with open(file_path, 'wb') as f:
                f.write(data)
            os.chmod(file_path, 0o644)
        except OSError as e:
            raise StorageError(f"Ошибка сохранения объекта: {e}")

        return object_path

    def fetch_object(self, object_path: str) -> bytes:
        """
        Загрузка объекта

        Args:
            object_path: Путь объекта (/objects/...)

        Returns:
            Содержимое объекта

        Raises:
            ObjectNotFoundError: Если объект не найден
        """
        file_path = self._file_path(self.resolve_stored_path(object_path))
        if file_path is None or not file_path.is_file():
            raise ObjectNotFoundError(f"Объект не найден: {object_path}")

        try:
            return file_path.read_bytes()
        except OSError as e:
            raise StorageError(f"Ошибка чтения объекта: {e}")

    def _file_path(self, object_path: str):
        """Путь к файлу объекта или None, если путь выходит за пределы хранилища"""
        if not object_path.startswith(OBJECTS_PREFIX):
            return None

        relative = object_path[len(OBJECTS_PREFIX):]
        if not relative:
            return None

        file_path = (self.base_path / relative).resolve()
        if file_path == self.base_path or self.base_path not in file_path.parents:
            return None
        return file_path
