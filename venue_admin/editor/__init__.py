# venue_admin/editor/__init__.py
from .chips import ChipEditor
from .fields import EntitySchema, FieldError, FieldSpec, FieldType
from .editor import EntityEditor

__all__ = [
    "ChipEditor",
    "EntitySchema", "FieldError", "FieldSpec", "FieldType",
    "EntityEditor",
]
