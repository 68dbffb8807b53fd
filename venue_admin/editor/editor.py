# venue_admin/editor/editor.py
from functools import partial
from typing import Any, Dict, List, Mapping, Optional, Tuple

from venue_admin.core.exceptions import ValidationError
from venue_admin.services.attachment_manager import MediaAttachmentManager, Notifier
from venue_admin.services.media_service import MediaService
from .chips import ChipEditor
from .fields import EntitySchema, FieldError, FieldSpec, FieldType


def read_field(record: Any, name: str) -> Any:
    if record is None:
        return None
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


class EntityEditor:
    """Local edit state of one entity form.

    Scalar fields live in `values`, tag fields in a ChipEditor each and image
    fields in a MediaAttachmentManager each. Nothing is written to the
    database here: the service takes `changes()` and `image_replacements()`
    and persists them.
    """

    def __init__(
        self,
        schema: EntitySchema,
        record: Any = None,
        *,
        media: MediaService,
        notifier: Optional[Notifier] = None,
    ):
        self.schema = schema
        self.is_new = record is None
        self.initial: Dict[str, Any] = {}
        self.values: Dict[str, Any] = {}
        self.chips: Dict[str, ChipEditor] = {}
        self.attachments: Dict[str, MediaAttachmentManager] = {}

        for spec in schema:
            current = read_field(record, spec.name)
            if current is None and self.is_new:
                current = list(spec.default) if isinstance(spec.default, list) else spec.default
            self.initial[spec.name] = current

            if spec.type == FieldType.TAGS:
                self.chips[spec.name] = ChipEditor(current or [])
            elif spec.type == FieldType.IMAGE:
                self.values[spec.name] = current or ""
                self.attachments[spec.name] = MediaAttachmentManager.for_constraints(
                    media,
                    spec.upload,
                    value=current or "",
                    on_change=partial(self._on_image_change, spec.name),
                    placeholder=spec.placeholder,
                    notifier=notifier,
                )
            else:
                self.values[spec.name] = current

    def _on_image_change(self, name: str, url: str) -> None:
        self.values[name] = url

    def _spec(self, name: str) -> FieldSpec:
        if name not in self.schema:
            raise ValidationError(f"Unknown field: {name}", errors={name: "Unknown field"})
        return self.schema[name]

    def chip(self, name: str) -> ChipEditor:
        self._spec(name)
        return self.chips[name]

    def attachment(self, name: str) -> MediaAttachmentManager:
        spec = self._spec(name)
        if spec.type != FieldType.IMAGE:
            raise ValidationError(f"{spec.title} is not an image field", errors={name: "Not an image field"})
        return self.attachments[name]

    def set(self, name: str, value: Any) -> None:
        spec = self._spec(name)
        if spec.type == FieldType.TAGS:
            if isinstance(value, (list, tuple)):
                valid = all(isinstance(v, str) for v in value)
            else:
                valid = value is None or isinstance(value, str)
            if not valid:
                raise ValidationError(f"Invalid value for {spec.title}", errors={name: f"{spec.title} must be a list of strings"})
            self.chips[name].replace(value)
        elif spec.type == FieldType.IMAGE:
            if not (value is None or isinstance(value, str)):
                raise ValidationError(f"Invalid value for {spec.title}", errors={name: f"{spec.title} must be an image URL"})
            attachment = self.attachments[name]
            if not attachment.set_by_url(value) and attachment.value:
                attachment.remove()
        else:
            self.values[name] = value

    def update(self, payload: Mapping[str, Any]) -> None:
        for name, value in payload.items():
            self.set(name, value)

    def _raw(self, spec: FieldSpec) -> Any:
        if spec.type == FieldType.TAGS:
            return self.chips[spec.name].items
        return self.values.get(spec.name)

    def validate(self) -> Dict[str, Any]:
        """Clean every field; all field errors are reported at once"""
        cleaned: Dict[str, Any] = {}
        errors: Dict[str, str] = {}
        for spec in self.schema:
            try:
                cleaned[spec.name] = spec.clean(self._raw(spec))
            except FieldError as e:
                errors[spec.name] = str(e)
        if errors:
            raise ValidationError("Please fix the highlighted fields", errors=errors)
        return cleaned

    def changes(self) -> Dict[str, Any]:
        cleaned = self.validate()
        if self.is_new:
            return cleaned
        return {
            name: value for name, value in cleaned.items()
            if value != self._initial_clean(self.schema[name])
        }

    def _initial_clean(self, spec: FieldSpec) -> Any:
        try:
            return spec.coerce(self.initial.get(spec.name))
        except FieldError:
            return self.initial.get(spec.name)

    def image_replacements(self) -> List[Tuple[str, str, str]]:
        """(field, previous url, current url) for image fields whose value moved"""
        out = []
        for spec in self.schema.image_fields:
            previous = self.initial.get(spec.name) or ""
            current = self.values.get(spec.name) or ""
            if previous != current:
                out.append((spec.name, previous, current))
        return out
