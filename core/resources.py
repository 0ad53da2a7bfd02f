# =============================================================================
# core/resources.py - Editable Resource Definitions
# =============================================================================
# One ResourceSpec per table the admin panel edits. A spec tells the generic
# ResourceEditor everything that differs between tables:
# - table name and how rows are ordered / filtered when loaded
# - the field schema (kind, required, default, which rows a field applies to)
# - which field, if any, may be filled by uploading an image
# - whether rows may be created or deleted
#
# Field kinds convert between the stored row and the admin form:
#
#   kind    stored value        form value
#   ------  ------------------  ---------------------------
#   TEXT    str | None          str ("" for None)
#   IMAGE   str | None          str (URL; a file may replace it on submit)
#   LINES   list[str] | None    newline-delimited str
#   LIST    list[str] | None    list[str] edited item by item
#   BOOL    bool                bool
#   INT     int                 int | None (None = not filled in)
# =============================================================================

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from core.models.content import CONTENT_BLOCK_IDS
from lib.backend import Filter, Order
from lib.utils import blank_to_none, join_lines, split_lines


class FieldKind(str, Enum):
    TEXT = "text"
    IMAGE = "image"
    LINES = "lines"
    LIST = "list"
    BOOL = "bool"
    INT = "int"


_TRUE_STRINGS = {"true", "1", "yes", "on"}


@dataclass(frozen=True)
class FieldSpec:
    """Schema of one editable column."""

    name: str
    kind: FieldKind = FieldKind.TEXT
    required: bool = False
    default: Any = None
    # Row ids this field applies to; None means every row
    only_for: tuple[str, ...] | None = None

    def applies_to(self, row_id: str | None) -> bool:
        return self.only_for is None or row_id in self.only_for

    def blank(self) -> Any:
        """Form value of an empty draft."""
        if self.kind == FieldKind.LIST:
            return []
        if self.kind == FieldKind.BOOL:
            return bool(self.default) if self.default is not None else False
        if self.kind == FieldKind.INT:
            return self.default
        return ""

    def to_form(self, value: Any) -> Any:
        """Stored value -> form value."""
        if self.kind == FieldKind.LINES:
            return join_lines(value)
        if self.kind == FieldKind.LIST:
            return list(value or [])
        if self.kind in (FieldKind.BOOL, FieldKind.INT):
            return self.blank() if value is None else self.coerce(value)
        return value or ""

    def coerce(self, value: Any) -> Any:
        """Normalize raw form input (JSON or multipart strings)."""
        if self.kind == FieldKind.BOOL:
            if isinstance(value, str):
                return value.strip().lower() in _TRUE_STRINGS
            return bool(value)

        if self.kind == FieldKind.INT:
            if value is None or (isinstance(value, str) and not value.strip()):
                return None
            try:
                return int(value)
            except (TypeError, ValueError):
                # Unparseable input counts as 0
                return 0

        if self.kind == FieldKind.LIST:
            if value is None:
                return []
            if isinstance(value, str):
                return split_lines(value) or []
            return [str(item) for item in value]

        return "" if value is None else str(value)

    def to_record(self, value: Any) -> Any:
        """Form value -> stored value. Empty text is stored as None."""
        if self.kind == FieldKind.LINES:
            return split_lines(value)
        if self.kind == FieldKind.LIST:
            items = [item.strip() for item in (value or []) if item and item.strip()]
            return items or None
        if self.kind == FieldKind.BOOL:
            return bool(value)
        if self.kind == FieldKind.INT:
            return 0 if value is None else int(value)
        return blank_to_none(value)

    def is_filled(self, value: Any) -> bool:
        if self.kind == FieldKind.BOOL:
            return True
        if self.kind == FieldKind.INT:
            return value is not None
        if self.kind == FieldKind.LIST:
            return bool(value)
        return isinstance(value, str) and bool(value.strip())


@dataclass(frozen=True)
class ImageFieldSpec:
    """A field whose value may come from an uploaded file."""

    field: str
    # Storage sub-directory uploads for this resource go into
    category: str


@dataclass(frozen=True)
class ResourceSpec:
    """Everything the generic editor needs to know about one table."""

    name: str
    table: str
    # Singular label used in notifications ("Service created successfully")
    label: str
    fields: tuple[FieldSpec, ...]
    order: Order | None = None
    row_ids: tuple[str, ...] | None = None
    image: ImageFieldSpec | None = None
    allow_create: bool = True
    allow_delete: bool = True
    # Timestamp column stamped on every update
    touch_field: str | None = None
    create_verb: str = "create"

    @property
    def filters(self) -> tuple[Filter, ...]:
        if self.row_ids is None:
            return ()
        return (Filter.in_("id", self.row_ids),)

    @property
    def created_word(self) -> str:
        return {"create": "created", "add": "added"}.get(self.create_verb, f"{self.create_verb}d")

    def field(self, name: str) -> FieldSpec:
        for spec in self.fields:
            if spec.name == name:
                return spec
        raise KeyError(f"{self.name} has no field '{name}'")

    def fields_for(self, row_id: str | None) -> tuple[FieldSpec, ...]:
        return tuple(f for f in self.fields if f.applies_to(row_id))

    def blank_form(self) -> dict[str, Any]:
        return {f.name: f.blank() for f in self.fields_for(None)}

    def to_form(self, row: dict[str, Any]) -> dict[str, Any]:
        row_id = row.get("id")
        return {f.name: f.to_form(row.get(f.name)) for f in self.fields_for(row_id)}

    def to_record(self, values: dict[str, Any], row_id: str | None) -> dict[str, Any]:
        return {f.name: f.to_record(values.get(f.name)) for f in self.fields_for(row_id)}

    def missing_fields(
        self,
        values: dict[str, Any],
        row_id: str | None,
        has_file: bool = False,
    ) -> list[str]:
        """Names of required fields the draft leaves empty."""
        missing = []
        for f in self.fields_for(row_id):
            if not f.required:
                continue
            if has_file and self.image is not None and f.name == self.image.field:
                continue
            if not f.is_filled(values.get(f.name)):
                missing.append(f.name)
        return missing


# =============================================================================
# The four editable tables
# =============================================================================

SERVICES = ResourceSpec(
    name="services",
    table="services",
    label="Service",
    fields=(
        FieldSpec("name", required=True),
        FieldSpec("photo_url", FieldKind.IMAGE),
        FieldSpec("short_description"),
        FieldSpec("duration"),
        FieldSpec("benefits", FieldKind.LINES),
    ),
    order=Order("created_at", descending=True),
    image=ImageFieldSpec("photo_url", category="services"),
)

GALLERY = ResourceSpec(
    name="gallery",
    table="gallery",
    label="Image",
    fields=(
        FieldSpec("photo_url", FieldKind.IMAGE, required=True),
        FieldSpec("caption"),
    ),
    order=Order("created_at", descending=True),
    image=ImageFieldSpec("photo_url", category="gallery"),
    create_verb="add",
)

CONTENT = ResourceSpec(
    name="content",
    table="content",
    label="Content",
    fields=(
        FieldSpec("title"),
        FieldSpec("body"),
        FieldSpec("philosophy", only_for=("about",)),
        FieldSpec("what_sets_apart", FieldKind.LIST, only_for=("about",)),
    ),
    row_ids=CONTENT_BLOCK_IDS,
    allow_create=False,
    allow_delete=False,
    touch_field="updated_at",
)

SOCIAL_MEDIA = ResourceSpec(
    name="social_media",
    table="social_media",
    label="Social media",
    fields=(
        FieldSpec("platform", required=True),
        FieldSpec("url", required=True),
        FieldSpec("icon_name", required=True),
        FieldSpec("is_active", FieldKind.BOOL, default=True),
        FieldSpec("display_order", FieldKind.INT, required=True, default=0),
    ),
    order=Order("display_order"),
    create_verb="add",
)

RESOURCES: dict[str, ResourceSpec] = {
    spec.name: spec for spec in (SERVICES, GALLERY, CONTENT, SOCIAL_MEDIA)
}


def get_resource(name: str) -> ResourceSpec:
    """
    Look up a resource by name.

    Raises:
        KeyError: If no editable resource has that name
    """
    return RESOURCES[name]
