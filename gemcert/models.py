"""
Pydantic модели для валидации и сериализации геммологических сертификатов.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field, validator

from .normalizer import normalize_certificate_number

DESCRIPTIVE_FIELDS = (
    'gemstone_type', 'carat_weight', 'color', 'clarity', 'cut',
    'polish', 'symmetry', 'fluorescence', 'measurements', 'origin'
)


class CertificateDraft(BaseModel):
    """Модель запроса на регистрацию сертификата.

    Все поля необязательны на уровне разбора: отсутствие обязательных полей
    проверяет DraftValidator, чтобы вернуть MissingFieldError, а не ошибку схемы.
    """
    certificate_number: Optional[str] = Field(None, alias="certificateNumber", description="Номер сертификата")
    gemstone_type: Optional[str] = Field(None, alias="gemstoneType", description="Тип камня")
    carat_weight: Optional[str] = Field(None, alias="caratWeight", description="Вес в каратах")
    color: Optional[str] = Field(None, description="Цвет")
    clarity: Optional[str] = Field(None, description="Чистота")
    cut: Optional[str] = Field(None, description="Огранка")
    polish: Optional[str] = Field(None, description="Полировка")
    symmetry: Optional[str] = Field(None, description="Симметрия")
    fluorescence: Optional[str] = Field(None, description="Флуоресценция")
    measurements: Optional[str] = Field(None, description="Размеры")
    origin: Optional[str] = Field(None, description="Происхождение")
    issue_date: Optional[str] = Field(None, alias="issueDate", description="Дата выдачи")
    image_url: Optional[str] = Field(None, alias="imageUrl", description="Ссылка на фото")

    @validator(
        'certificate_number', 'gemstone_type', 'carat_weight', 'color', 'clarity', 'cut',
        'polish', 'symmetry', 'fluorescence', 'measurements', 'origin', 'issue_date',
        pre=True
    )
    def coerce_to_string(cls, v):
        """Числа (например, вес 1.25) и даты приводятся к строке."""
        if isinstance(v, bool):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        if isinstance(v, date):
            return v.isoformat()
        return v

    def with_defaults(self) -> "CertificateDraft":
        """Возвращает копию черновика с датой выдачи по умолчанию."""
        if self.issue_date and self.issue_date.strip():
            return self
        return self.copy(update={"issue_date": date.today().isoformat()})

    class Config:
        """Конфигурация модели."""
        populate_by_name = True
        extra = "ignore"
        json_schema_extra = {
            "example": {
                "certificateNumber": "GIE-2024-009999",
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
        }


class Certificate(BaseModel):
    """Модель зарегистрированного сертификата."""
    id: Optional[int] = None
    certificate_number: str = Field(..., alias="certificateNumber", description="Номер сертификата")
    gemstone_type: str = Field(..., alias="gemstoneType")
    carat_weight: str = Field(..., alias="caratWeight")
    color: str
    clarity: str
    cut: str
    polish: str
    symmetry: str
    fluorescence: str
    measurements: str
    origin: str
    issue_date: str = Field(..., alias="issueDate")
    image_url: Optional[str] = Field(None, alias="imageUrl")
    created_at: Optional[datetime] = Field(None, alias="createdAt", description="Дата регистрации")

    @property
    def number_key(self) -> str:
        """Нормализованный ключ номера."""
        return normalize_certificate_number(self.certificate_number)

    @property
    def is_sample(self) -> bool:
        """Образец из встроенного набора (в БД не хранится)."""
        return self.id is None

    def to_dict(self) -> dict:
        """Конвертирует объект в словарь для JSON сериализации."""
        return {
            "id": self.id,
            "certificateNumber": self.certificate_number,
            "gemstoneType": self.gemstone_type,
            "caratWeight": self.carat_weight,
            "color": self.color,
            "clarity": self.clarity,
            "cut": self.cut,
            "polish": self.polish,
            "symmetry": self.symmetry,
            "fluorescence": self.fluorescence,
            "measurements": self.measurements,
            "origin": self.origin,
            "issueDate": self.issue_date,
            "imageUrl": self.image_url,
            "createdAt": self.created_at.isoformat() if self.created_at else None
        }

    class Config:
        """Конфигурация модели."""
        populate_by_name = True
        from_attributes = True
