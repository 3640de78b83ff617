"""
Тесты для хранилища фотографий
"""
import pytest

from gemcert.exceptions import ObjectNotFoundError, StorageError


class TestObjectStorage:
    """Тесты для ObjectStorage"""

    def test_upload_target(self, object_storage):
        """Каждый адрес загрузки уникален"""
        first = object_storage.get_upload_target()
        second = object_storage.get_upload_target()

        assert first.startswith("/objects/uploads/")
        assert first != second

    def test_resolve_stored_path(self, object_storage):
        """Полный адрес загрузки приводится к пути объекта"""
        assert object_storage.resolve_stored_path(
            "https://registry.example.com/objects/uploads/abc?sig=1"
        ) == "/objects/uploads/abc"
        assert object_storage.resolve_stored_path("/objects/uploads/abc/") == "/objects/uploads/abc"

    def test_foreign_url_unchanged(self, object_storage):
        """Сторонние адреса не изменяются"""
        url = "https://cdn.example.com/photos/ruby.jpg"
        assert object_storage.resolve_stored_path(url) == url

    def test_save_and_fetch(self, object_storage):
        """Сохраненный объект читается по пути"""
        object_path = object_storage.save_object("photo-1", b"image-bytes")

        assert object_path == "/objects/uploads/photo-1"
        assert object_storage.fetch_object(object_path) == b"image-bytes"

    def test_fetch_missing(self, object_storage):
        """Несуществующий объект"""
        with pytest.raises(ObjectNotFoundError):
            object_storage.fetch_object("/objects/uploads/missing")

        with pytest.raises(ObjectNotFoundError):
            object_storage.fetch_object("https://cdn.example.com/photos/ruby.jpg")

    def test_path_traversal(self, object_storage, tmp_path):
        """Пути за пределами хранилища отклоняются"""
        (tmp_path / "secret.txt").write_text("secret")

        with pytest.raises(ObjectNotFoundError):
            object_storage.fetch_object("/objects/../secret.txt")

        with pytest.raises(StorageError):
            object_storage.save_object("../../secret.txt", b"overwrite")

        assert (tmp_path / "secret.txt").read_text() == "secret"
