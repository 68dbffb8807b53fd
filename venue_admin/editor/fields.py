# venue_admin/editor/fields.py
import enum
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterator, List, Optional, Sequence

from venue_admin.core.config import settings
from venue_admin.services.media_service import UploadConstraints
from .chips import ChipEditor

EMAIL_RE = re.compile(r'^[\w\.\+-]+@[\w\.-]+\.\w+$')
TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off", ""}


class FieldError(ValueError):
    pass


class FieldType(str, enum.Enum):
    STRING = "string"
    TEXT = "text"
    EMAIL = "email"
    URL = "url"
    INTEGER = "integer"
    DECIMAL = "decimal"
    BOOLEAN = "boolean"
    DATE = "date"
    DATETIME = "datetime"
    TIME = "time"
    TAGS = "tags"
    IMAGE = "image"


@dataclass
class FieldSpec:
    name: str
    type: FieldType
    required: bool = False
    label: Optional[str] = None
    default: Any = None
    max_length: Optional[int] = None
    min_value: Optional[Any] = None
    upload: Optional[UploadConstraints] = None
    placeholder: Optional[str] = None

    @property
    def title(self) -> str:
        return self.label or self.name.replace("_", " ").capitalize()

    def clean(self, value: Any) -> Any:
        """Coerce a raw form/JSON value to the column type and check required-ness"""
        value = self.coerce(value)
        if self.required and value in (None, "", []):
            raise FieldError(f"{self.title} is required")
        return value

    def coerce(self, value: Any) -> Any:
        t = self.type
        if t == FieldType.TAGS:
            return ChipEditor(ChipEditor.parse(value)).items
        if t == FieldType.BOOLEAN:
            return self._to_bool(value)

        if isinstance(value, str):
            value = value.strip()
        if value is None or value == "":
            return None

        if t in (FieldType.STRING, FieldType.TEXT, FieldType.EMAIL, FieldType.URL, FieldType.IMAGE):
            if isinstance(value, (dict, list, tuple)):
                raise FieldError(f"{self.title} must be text")
            value = str(value)
            if self.max_length and len(value) > self.max_length:
                raise FieldError(f"{self.title} must be at most {self.max_length} characters")
            if t == FieldType.EMAIL and not EMAIL_RE.match(value):
                raise FieldError(f"{self.title} must be a valid email address")
            if t == FieldType.URL and not value.startswith(("http://", "https://")):
                raise FieldError(f"{self.title} must start with http:// or https://")
            return value

        if t == FieldType.INTEGER:
            if isinstance(value, bool):
                raise FieldError(f"{self.title} must be a whole number")
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise FieldError(f"{self.title} must be a whole number")
            return self._check_min(number)

        if t == FieldType.DECIMAL:
            if isinstance(value, bool):
                raise FieldError(f"{self.title} must be a number")
            try:
                number = Decimal(str(value))
            except InvalidOperation:
                raise FieldError(f"{self.title} must be a number")
            if not number.is_finite():
                raise FieldError(f"{self.title} must be a number")
            return self._check_min(number)

        if t == FieldType.DATETIME:
            if not isinstance(value, datetime):
                try:
                    value = datetime.fromisoformat(str(value))
                except ValueError:
                    raise FieldError(f"{self.title} must be a date and time (YYYY-MM-DDTHH:MM)")
            # datetime-local inputs carry no offset; stored as UTC
            if value.tzinfo is None:
                value = value.replace(tzinfo=timezone.utc)
            return value

        if t == FieldType.DATE:
            if isinstance(value, date):
                return value
            try:
                return date.fromisoformat(str(value))
            except ValueError:
                raise FieldError(f"{self.title} must be a date (YYYY-MM-DD)")

        if t == FieldType.TIME:
            if isinstance(value, time):
                return value
            try:
                return time.fromisoformat(str(value))
            except ValueError:
                raise FieldError(f"{self.title} must be a time (HH:MM)")

        raise FieldError(f"Unsupported field type {t}")

    def _to_bool(self, value: Any) -> bool:
        if value is None:
            return bool(self.default)
        if isinstance(value, bool):
            return value
        if isinstance(value, (int, float)):
            return bool(value)
        text = str(value).strip().lower()
        if text in TRUE_VALUES:
            return True
        if text in FALSE_VALUES:
            return False
        raise FieldError(f"{self.title} must be true or false")

    def _check_min(self, number):
        if self.min_value is not None and number < self.min_value:
            raise FieldError(f"{self.title} must be at least {self.min_value}")
        return number


class EntitySchema:
    """Field schema of one entity form, assembled with chained builder calls:

        EntitySchema("clubs").string("name", required=True).image("logo_url", folder="clubs")
    """

    def __init__(self, name: str, label: Optional[str] = None):
        self.name = name
        self.label = label or name.replace("_", " ").title()
        self.fields: Dict[str, FieldSpec] = {}

    def add(self, spec: FieldSpec) -> "EntitySchema":
        if spec.name in self.fields:
            raise ValueError(f"Field {spec.name} already defined on {self.name}")
        self.fields[spec.name] = spec
        return self

    def string(self, name: str, *, required: bool = False, max_length: int = 255, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.STRING, required=required, max_length=max_length, label=label))

    def text(self, name: str, *, required: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.TEXT, required=required, label=label))

    def email(self, name: str, *, required: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.EMAIL, required=required, max_length=255, label=label))

    def url(self, name: str, *, required: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.URL, required=required, max_length=1024, label=label))

    def integer(self, name: str, *, required: bool = False, min_value: Optional[int] = None, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.INTEGER, required=required, min_value=min_value, label=label))

    def decimal(self, name: str, *, required: bool = False, min_value: Optional[Decimal] = None, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.DECIMAL, required=required, min_value=min_value, label=label))

    def boolean(self, name: str, *, default: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.BOOLEAN, default=default, label=label))

    def date(self, name: str, *, required: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.DATE, required=required, label=label))

    def datetime(self, name: str, *, required: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.DATETIME, required=required, label=label))

    def time(self, name: str, *, required: bool = False, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.TIME, required=required, label=label))

    def tags(self, name: str, *, label: Optional[str] = None) -> "EntitySchema":
        return self.add(FieldSpec(name, FieldType.TAGS, default=[], label=label))

    def image(
        self,
        name: str,
        *,
        folder: str,
        bucket: Optional[str] = None,
        max_size_in_mb: Optional[float] = None,
        allowed_types: Optional[Sequence[str]] = None,
        placeholder: Optional[str] = None,
        label: Optional[str] = None,
    ) -> "EntitySchema":
        upload = UploadConstraints(
            bucket=bucket or settings.minio.MINIO_BUCKET_NAME,
            folder=folder,
            max_size_in_mb=max_size_in_mb or settings.uploads.UPLOAD_MAX_SIZE_MB,
            allowed_types=tuple(allowed_types or settings.uploads.UPLOAD_ALLOWED_TYPES),
        )
        return self.add(FieldSpec(
            name,
            FieldType.IMAGE,
            max_length=1024,
            upload=upload,
            placeholder=placeholder or "Upload an image or enter URL",
            label=label,
        ))

    def __getitem__(self, name: str) -> FieldSpec:
        return self.fields[name]

    def __contains__(self, name: object) -> bool:
        return name in self.fields

    def __iter__(self) -> Iterator[FieldSpec]:
        return iter(self.fields.values())

    def of_type(self, field_type: FieldType) -> List[FieldSpec]:
        return [f for f in self if f.type == field_type]

    @property
    def image_fields(self) -> List[FieldSpec]:
        return self.of_type(FieldType.IMAGE)

    @property
    def tag_fields(self) -> List[FieldSpec]:
        return self.of_type(FieldType.TAGS)
