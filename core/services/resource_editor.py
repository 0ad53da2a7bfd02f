# =============================================================================
# core/services/resource_editor.py - Generic Table Editor
# =============================================================================
# One ResourceEditor drives the admin editing cycle of one table:
#
#   load() -> begin_edit(row) -> update_draft({...}) -> submit() -> load()
#                                                 \-> cancel_edit()
#   remove(id) -> release stored image (best-effort) -> load()
#
# The table-specific parts (fields, ordering, image field, create/delete
# permissions) come from a ResourceSpec. Every failure is caught at the
# operation boundary and emitted on the NotificationChannel; operations
# return True/False instead of raising.
#
# After close() the editor is torn down: responses that arrive later are
# dropped without touching rows, draft or notifications.
# =============================================================================

import logging
from dataclasses import dataclass, field
from typing import Any

from core.errors import DraftValidationError, EditorError, FetchFailure, UploadError, WriteFailure
from core.resources import FieldKind, ResourceSpec
from core.services.image_service import ImageInput, ImageService
from core.services.notifications import NotificationChannel
from lib.backend import Filter, RowStore
from lib.utils import normalize_id, utc_now_iso

logger = logging.getLogger(__name__)


@dataclass
class Draft:
    """
    Form state of the row being edited.

    `row_id` is None for a row that does not exist yet.
    """

    values: dict[str, Any] = field(default_factory=dict)
    row_id: str | None = None

    @property
    def is_new(self) -> bool:
        return self.row_id is None


class ResourceEditor:
    """
    Fetch / insert / update / delete cycle against one table.

    Example:
        editor = ResourceEditor(SERVICES, SupabaseRowStore(), images, channel)
        await editor.load()
        editor.update_draft({"name": "Facial", "benefits": "Deep cleansing\\nGlow"})
        await editor.submit()
    """

    def __init__(
        self,
        spec: ResourceSpec,
        store: RowStore,
        images: ImageService | None,
        notifications: NotificationChannel,
    ):
        self.spec = spec
        self.store = store
        self.images = images
        self.notifications = notifications

        self.rows: list[dict[str, Any]] = []
        self.draft = Draft(values=spec.blank_form())
        self.loaded = False

        self._closed = False
        self._load_seq = 0

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def editing_id(self) -> str | None:
        return self.draft.row_id

    @property
    def is_editing(self) -> bool:
        return self.draft.row_id is not None

    @property
    def closed(self) -> bool:
        return self._closed

    def find_row(self, row_id: str) -> dict[str, Any] | None:
        row_id = normalize_id(row_id)
        for row in self.rows:
            if normalize_id(row.get("id")) == row_id:
                return row
        return None

    def snapshot(self) -> dict[str, Any]:
        return {
            "resource": self.spec.name,
            "rows": list(self.rows),
            "draft": dict(self.draft.values),
            "editing_id": self.editing_id,
            "loaded": self.loaded,
            "can_create": self.spec.allow_create,
            "can_delete": self.spec.allow_delete,
        }

    def close(self) -> None:
        """Tear the editor down. In-flight results are discarded."""
        self._closed = True
        logger.debug(f"Closed {self.spec.name} editor")

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def load(self) -> bool:
        """
        Replace the row list with the table's current rows.

        On failure the previous rows stay in place and an error
        notification is emitted.
        """
        if self._closed:
            return False

        self._load_seq += 1
        seq = self._load_seq

        try:
            rows = await self.store.select(
                self.spec.table,
                filters=self.spec.filters,
                order=self.spec.order,
            )
        except Exception as e:
            if self._is_stale(seq):
                return False
            self._report(FetchFailure(self.spec.name.replace("_", " "), str(e)))
            return False

        # A newer load or a teardown overtook this one
        if self._is_stale(seq):
            return False

        self.rows = rows
        self.loaded = True
        logger.debug(f"Loaded {len(rows)} {self.spec.name} rows")
        return True

    def _is_stale(self, seq: int) -> bool:
        return self._closed or seq != self._load_seq

    # -------------------------------------------------------------------------
    # Draft editing (local only, no network calls)
    # -------------------------------------------------------------------------

    def begin_edit(self, row: dict[str, Any]) -> Draft:
        """Open a draft pre-filled from `row`, replacing any open draft."""
        self.draft = Draft(values=self.spec.to_form(row), row_id=normalize_id(row["id"]))
        return self.draft

    def cancel_edit(self) -> Draft:
        """Discard the draft and go back to an empty create form."""
        self.draft = Draft(values=self.spec.blank_form())
        return self.draft

    def update_draft(self, values: dict[str, Any]) -> Draft:
        """
        Bind form input to the draft.

        Raises:
            KeyError: If a field does not exist for the row being edited
        """
        for name, value in values.items():
            spec = self.spec.field(name)
            if not spec.applies_to(self.draft.row_id):
                raise KeyError(f"'{name}' cannot be edited on this {self.spec.label.lower()}")
            self.draft.values[name] = spec.coerce(value)
        return self.draft

    def add_list_item(self, name: str, value: str) -> Draft:
        """Append a trimmed item to a list field. Blank items are ignored."""
        spec = self._list_field(name)
        item = (value or "").strip()
        if item:
            items = list(self.draft.values.get(spec.name) or [])
            items.append(item)
            self.draft.values[spec.name] = items
        return self.draft

    def remove_list_item(self, name: str, index: int) -> Draft:
        """Drop one item of a list field. Out-of-range indexes are ignored."""
        spec = self._list_field(name)
        items = list(self.draft.values.get(spec.name) or [])
        if 0 <= index < len(items):
            del items[index]
            self.draft.values[spec.name] = items
        return self.draft

    def _list_field(self, name: str):
        spec = self.spec.field(name)
        if spec.kind != FieldKind.LIST:
            raise KeyError(f"'{name}' is not a list field")
        if not spec.applies_to(self.draft.row_id):
            raise KeyError(f"'{name}' cannot be edited on this {self.spec.label.lower()}")
        return spec

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    async def submit(self, draft: Draft | None = None, image: ImageInput | None = None) -> bool:
        """
        Validate the draft, upload its image if a file was chosen, then insert
        (new draft) or update (existing row).

        On success the draft is cleared and the rows are reloaded once.
        On failure the draft is kept so the user can retry.
        """
        if self._closed:
            return False
        if draft is not None:
            self.draft = draft
        draft = self.draft

        try:
            record = await self._prepare(draft, image)
            if self._closed:
                return False
            await self._write(draft, record)
        except EditorError as e:
            if not self._closed:
                self._report(e)
            return False

        if self._closed:
            return False

        if draft.is_new:
            self.notifications.success(
                f"{self.spec.label} {self.spec.created_word} successfully", self.spec.name
            )
        else:
            self.notifications.success(f"{self.spec.label} updated successfully", self.spec.name)

        self.cancel_edit()
        await self.load()
        return True

    async def _prepare(self, draft: Draft, image: ImageInput | None) -> dict[str, Any]:
        spec = self.spec

        if draft.is_new and not spec.allow_create:
            raise DraftValidationError(
                spec.table, [], message=f"Choose which {spec.label.lower()} to edit first"
            )

        if image is not None and spec.image is None:
            raise DraftValidationError(
                spec.table, [], message=f"{spec.label} does not take an image"
            )

        values = dict(draft.values)
        if image is not None and image.kind == "url":
            values[spec.image.field] = image.value
            image = None

        has_file = image is not None
        missing = spec.missing_fields(values, draft.row_id, has_file=has_file)
        if missing:
            raise DraftValidationError(spec.table, missing)

        if has_file:
            if self.images is None:
                raise UploadError(image.filename or "", "Image uploads are not configured")
            url = await self.images.resolve_image(image, spec.image.category)
            values[spec.image.field] = url
            # Keep the stored URL so a retry does not upload the file again
            draft.values[spec.image.field] = url

        record = spec.to_record(values, draft.row_id)
        if not draft.is_new and spec.touch_field:
            record[spec.touch_field] = utc_now_iso()
        return record

    async def _write(self, draft: Draft, record: dict[str, Any]) -> None:
        subject = self.spec.label.lower()

        if draft.is_new:
            try:
                await self.store.insert(self.spec.table, [record])
            except Exception as e:
                raise WriteFailure(self.spec.create_verb, subject, str(e))
            logger.info(f"Inserted {self.spec.table} row")
            return

        try:
            await self.store.update(self.spec.table, record, [Filter.eq("id", draft.row_id)])
        except Exception as e:
            raise WriteFailure("update", subject, str(e))
        logger.info(f"Updated {self.spec.table} row {draft.row_id}")

    async def remove(self, row_id: str) -> bool:
        """
        Delete a row, then best-effort delete the image it referenced.

        Image cleanup never affects the outcome. On success the rows are
        reloaded; on failure they are left as they are.
        """
        if self._closed:
            return False

        spec = self.spec
        row_id = normalize_id(row_id)

        if not spec.allow_delete:
            self.notifications.error(f"{spec.label} cannot be deleted", spec.name)
            return False

        row = self.find_row(row_id)
        if row is None and spec.image is not None:
            row = await self._fetch_row(row_id)
            if self._closed:
                return False

        try:
            await self.store.delete(spec.table, [Filter.eq("id", row_id)])
        except Exception as e:
            if not self._closed:
                self._report(WriteFailure("delete", spec.label.lower(), str(e)))
            return False

        logger.info(f"Deleted {spec.table} row {row_id}")

        if spec.image is not None and self.images is not None and row is not None:
            await self.images.release_image(row.get(spec.image.field))

        if self._closed:
            return False

        self.notifications.success(f"{spec.label} deleted successfully", spec.name)
        if self.draft.row_id == row_id:
            self.cancel_edit()
        await self.load()
        return True

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    async def _fetch_row(self, row_id: str) -> dict[str, Any] | None:
        """Read one row straight from the store, for rows not loaded yet."""
        try:
            rows = await self.store.select(self.spec.table, filters=[Filter.eq("id", row_id)], limit=1)
        except Exception as e:
            logger.warning(f"Could not read {self.spec.table} row {row_id} before delete: {e}")
            return None
        return rows[0] if rows else None

    def _report(self, error: EditorError) -> None:
        logger.warning(f"{self.spec.name}: {error}")
        self.notifications.error(error.message, self.spec.name, title=error.title)
