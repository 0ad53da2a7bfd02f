# =============================================================================
# tests/test_resource_editor.py - Resource Editor Tests
# =============================================================================
# Tests for the generic fetch / insert / update / delete cycle:
# - Loading and failed loads
# - Draft editing (begin, update, list items, cancel)
# - Submit: validation, image upload, insert vs update, reload
# - Remove: row delete, best-effort image release, reload
# - Teardown: late responses are discarded
#
# Run with: pytest tests/test_resource_editor.py -v
# =============================================================================

import asyncio

import pytest

from core.resources import CONTENT, GALLERY, SERVICES, SOCIAL_MEDIA
from core.services.image_service import ImageInput
from core.services.resource_editor import Draft, ResourceEditor
from tests.conftest import PUBLIC_PREFIX, InMemoryRowStore


def make_editor(spec, row_store, image_service, channel):
    return ResourceEditor(spec, row_store, image_service, channel)


def levels(channel):
    return [n.level for n in channel.recent]


def messages(channel):
    return [n.message for n in channel.recent]


class GatedRowStore(InMemoryRowStore):
    """Selects wait for their gate to be opened, in whatever order the test chooses."""

    def __init__(self, tables=None):
        super().__init__(tables)
        self.gates: list[asyncio.Event] = []

    async def select(self, table, columns="*", filters=(), order=None, limit=None):
        rows = await super().select(table, columns, filters, order, limit)
        gate = asyncio.Event()
        self.gates.append(gate)
        await gate.wait()
        return rows


# =============================================================================
# Loading
# =============================================================================

class TestLoad:
    """Tests for ResourceEditor.load()."""

    def test_load_orders_rows(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)

        assert asyncio.run(editor.load()) is True

        assert editor.loaded
        assert [r["id"] for r in editor.rows] == ["svc-2", "svc-1"]

    def test_social_links_ordered_by_display_order(self, row_store, image_service, channel):
        editor = make_editor(SOCIAL_MEDIA, row_store, image_service, channel)

        asyncio.run(editor.load())

        assert [r["display_order"] for r in editor.rows] == [1, 2, 3]

    def test_concurrent_loads_report_separately(self, sample_tables, image_service, channel):
        """A gallery failure while a services load is in flight stays with the gallery."""
        store = GatedRowStore(sample_tables)
        store.fail_on.add(("select", "gallery"))
        services = make_editor(SERVICES, store, image_service, channel)
        gallery = make_editor(GALLERY, store, image_service, channel)

        async def collected(editor):
            with channel.collect() as emitted:
                await editor.load()
            return emitted

        async def scenario():
            pending = asyncio.gather(collected(services), collected(gallery))
            while not store.gates:
                await asyncio.sleep(0)
            await asyncio.sleep(0)
            store.gates[0].set()
            return await pending

        from_services, from_gallery = asyncio.run(scenario())

        assert from_services == []
        assert [n.resource for n in from_gallery] == ["gallery"]

    def test_content_only_loads_home_and_about(self, row_store, image_service, channel):
        row_store.tables["content"].append({"id": "footer", "title": "Stray"})
        editor = make_editor(CONTENT, row_store, image_service, channel)

        asyncio.run(editor.load())

        assert sorted(r["id"] for r in editor.rows) == ["about", "home"]

    def test_failed_load_keeps_rows_and_notifies(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        asyncio.run(editor.load())
        before = list(editor.rows)

        row_store.fail_on.add(("select", "services"))
        assert asyncio.run(editor.load()) is False

        assert editor.rows == before
        assert levels(channel) == ["error"]
        assert messages(channel) == ["Failed to fetch services"]

    def test_stale_load_is_discarded(self, sample_tables, image_service, channel):
        store = GatedRowStore(sample_tables)
        editor = make_editor(GALLERY, store, image_service, channel)

        async def scenario():
            first = asyncio.create_task(editor.load())
            await asyncio.sleep(0)
            store.tables["gallery"] = [{"id": "gal-9", "photo_url": "https://x/y.png"}]
            second = asyncio.create_task(editor.load())
            await asyncio.sleep(0)

            store.gates[1].set()
            await second
            store.gates[0].set()
            await first
            return first.result(), second.result()

        first_ok, second_ok = asyncio.run(scenario())

        assert (first_ok, second_ok) == (False, True)
        assert [r["id"] for r in editor.rows] == ["gal-9"]

    def test_load_after_close_is_discarded(self, sample_tables, image_service, channel):
        store = GatedRowStore(sample_tables)
        editor = make_editor(SERVICES, store, image_service, channel)

        async def scenario():
            task = asyncio.create_task(editor.load())
            await asyncio.sleep(0)
            editor.close()
            store.gates[0].set()
            return await task

        assert asyncio.run(scenario()) is False
        assert editor.rows == []
        assert not editor.loaded


# =============================================================================
# Draft Editing
# =============================================================================

class TestDraft:
    """Tests for local draft operations."""

    def test_begin_edit_prefills_from_row(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(SERVICES, row_store, image_service, channel)

        draft = editor.begin_edit(sample_tables["services"][0])

        assert draft.row_id == "svc-1"
        assert draft.values["benefits"] == "Deep cleansing\nGlowing skin"
        assert editor.is_editing

    def test_cancel_edit_resets_to_blank(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.begin_edit(sample_tables["services"][0])

        editor.cancel_edit()

        assert editor.editing_id is None
        assert editor.draft.values == SERVICES.blank_form()

    def test_update_unknown_field_raises(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)

        with pytest.raises(KeyError):
            editor.update_draft({"price": "20"})

    def test_field_named_like_a_parameter_is_rejected(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)

        with pytest.raises(KeyError):
            editor.update_draft({"self": "x", "values": "y"})

    def test_about_only_field_rejected_on_home(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(CONTENT, row_store, image_service, channel)
        editor.begin_edit(sample_tables["content"][0])

        with pytest.raises(KeyError):
            editor.update_draft({"philosophy": "Ours"})

    def test_remove_list_item(self, row_store, image_service, channel, sample_tables):
        """About with ["A", "B"], remove index 0 -> ["B"]."""
        editor = make_editor(CONTENT, row_store, image_service, channel)
        editor.begin_edit(sample_tables["content"][1])

        editor.remove_list_item("what_sets_apart", 0)

        assert editor.draft.values["what_sets_apart"] == ["B"]

    def test_add_list_item_trims_and_ignores_blank(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(CONTENT, row_store, image_service, channel)
        editor.begin_edit(sample_tables["content"][1])

        editor.add_list_item("what_sets_apart", "  C  ")
        editor.add_list_item("what_sets_apart", "   ")

        assert editor.draft.values["what_sets_apart"] == ["A", "B", "C"]

    def test_remove_list_item_out_of_range_is_ignored(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(CONTENT, row_store, image_service, channel)
        editor.begin_edit(sample_tables["content"][1])

        editor.remove_list_item("what_sets_apart", 5)

        assert editor.draft.values["what_sets_apart"] == ["A", "B"]

    def test_list_items_only_on_list_fields(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)

        with pytest.raises(KeyError):
            editor.add_list_item("name", "x")


# =============================================================================
# Submit
# =============================================================================

class TestSubmit:
    """Tests for ResourceEditor.submit()."""

    @pytest.mark.parametrize("missing", [
        ["platform"],
        ["url"],
        ["icon_name"],
        ["display_order"],
        ["platform", "url"],
        ["platform", "url", "icon_name", "display_order"],
    ])
    def test_missing_required_fields_block_write(self, missing, row_store, image_service, channel):
        editor = make_editor(SOCIAL_MEDIA, row_store, image_service, channel)
        editor.update_draft({
            "platform": "Instagram",
            "url": "https://instagram.com/salon",
            "icon_name": "Instagram",
            "display_order": "1",
        })
        for name in missing:
            editor.update_draft({name: ""})

        assert asyncio.run(editor.submit()) is False

        assert row_store.count("insert") == 0
        assert row_store.count("update") == 0
        assert levels(channel) == ["error"]
        assert channel.recent[0].title == "Missing information"

    def test_create_minimal_service(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.update_draft({"name": "Facial"})

        assert asyncio.run(editor.submit()) is True

        stored = [r for r in row_store.tables["services"] if r["name"] == "Facial"][0]
        assert stored["photo_url"] is None
        assert stored["benefits"] is None
        assert messages(channel) == ["Service created successfully"]

    def test_benefits_text_is_split(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.update_draft({"name": "Facial", "benefits": "Deep cleansing\n\nGlow"})

        asyncio.run(editor.submit())

        stored = [r for r in row_store.tables["services"] if r["name"] == "Facial"][0]
        assert stored["benefits"] == ["Deep cleansing", "Glow"]

    def test_success_clears_draft_and_reloads_once(self, row_store, image_service, channel):
        editor = make_editor(GALLERY, row_store, image_service, channel)
        editor.update_draft({"photo_url": "https://x/y.png", "caption": "New look"})
        selects_before = row_store.count("select")

        asyncio.run(editor.submit())

        assert row_store.count("select") == selects_before + 1
        assert editor.draft.values == GALLERY.blank_form()
        assert editor.editing_id is None
        assert any(r.get("caption") == "New look" for r in editor.rows)
        assert messages(channel) == ["Image added successfully"]

    def test_update_existing_row(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.begin_edit(sample_tables["services"][1])
        editor.update_draft({"duration": "90 minutes"})

        assert asyncio.run(editor.submit()) is True

        stored = [r for r in row_store.tables["services"] if r["id"] == "svc-2"][0]
        assert stored["duration"] == "90 minutes"
        assert row_store.count("insert") == 0
        assert messages(channel) == ["Service updated successfully"]

    def test_content_update_stamps_updated_at(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(CONTENT, row_store, image_service, channel)
        editor.begin_edit(sample_tables["content"][1])
        editor.remove_list_item("what_sets_apart", 0)

        asyncio.run(editor.submit())

        about = [r for r in row_store.tables["content"] if r["id"] == "about"][0]
        assert about["what_sets_apart"] == ["B"]
        assert about["updated_at"] != "2024-01-01T00:00:00+00:00"
        assert messages(channel) == ["Content updated successfully"]

    def test_content_cannot_be_created(self, row_store, image_service, channel):
        editor = make_editor(CONTENT, row_store, image_service, channel)
        editor.update_draft({"title": "Footer"})

        assert asyncio.run(editor.submit()) is False

        assert row_store.count("insert") == 0
        assert levels(channel) == ["error"]

    def test_write_failure_keeps_draft(self, row_store, image_service, channel):
        row_store.fail_on.add(("insert", "services"))
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.update_draft({"name": "Facial"})

        assert asyncio.run(editor.submit()) is False

        assert editor.draft.values["name"] == "Facial"
        assert messages(channel) == ["Failed to create service"]
        assert row_store.count("select") == 0

    def test_uploaded_file_is_stored_before_insert(self, row_store, object_store, image_service, channel):
        editor = make_editor(GALLERY, row_store, image_service, channel)
        image = ImageInput.file(b"\x89PNG...", "bride.PNG", "image/png")

        assert asyncio.run(editor.submit(image=image)) is True

        assert len(object_store.uploads) == 1
        path = object_store.uploads[0]
        assert path.startswith("gallery/") and path.endswith(".png")
        assert any(r["photo_url"] == PUBLIC_PREFIX + path for r in row_store.tables["gallery"])

    def test_upload_failure_blocks_write(self, row_store, object_store, image_service, channel):
        object_store.fail_upload = True
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.update_draft({"name": "Facial"})
        image = ImageInput.file(b"jpeg-bytes", "facial.jpg")

        assert asyncio.run(editor.submit(image=image)) is False

        assert row_store.count("insert") == 0
        assert editor.draft.values["name"] == "Facial"
        assert channel.recent[0].title == "Upload failed"

    def test_image_url_input_fills_image_field(self, row_store, object_store, image_service, channel):
        editor = make_editor(GALLERY, row_store, image_service, channel)

        asyncio.run(editor.submit(image=ImageInput.url("https://x/y.png")))

        assert object_store.uploads == []
        assert any(r["photo_url"] == "https://x/y.png" for r in row_store.tables["gallery"])

    def test_explicit_draft_argument(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        draft = Draft(values={**SERVICES.blank_form(), "name": "Threading"})

        assert asyncio.run(editor.submit(draft)) is True
        assert any(r["name"] == "Threading" for r in row_store.tables["services"])

    def test_submit_after_close_does_nothing(self, row_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        editor.update_draft({"name": "Facial"})
        editor.close()

        assert asyncio.run(editor.submit()) is False
        assert row_store.calls == []
        assert list(channel.recent) == []


# =============================================================================
# Remove
# =============================================================================

class TestRemove:
    """Tests for ResourceEditor.remove()."""

    def test_removed_row_absent_after_reload(self, row_store, object_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        asyncio.run(editor.load())

        assert asyncio.run(editor.remove("svc-1")) is True

        assert "svc-1" not in [r["id"] for r in editor.rows]
        assert object_store.removals == [["services/0.123.jpg"]]
        assert messages(channel) == ["Service deleted successfully"]

    def test_unloaded_editor_still_releases_stored_image(self, row_store, object_store, image_service, channel):
        object_store.objects["gallery/0.456.png"] = b"png"
        editor = make_editor(GALLERY, row_store, image_service, channel)

        assert asyncio.run(editor.remove("gal-1")) is True

        assert object_store.removals == [["gallery/0.456.png"]]
        assert "gallery/0.456.png" not in object_store.objects
        assert "gal-1" not in [r["id"] for r in editor.rows]

    def test_unreadable_row_is_still_deleted(self, row_store, object_store, image_service, channel):
        row_store.fail_on.add(("select", "gallery"))
        editor = make_editor(GALLERY, row_store, image_service, channel)

        assert asyncio.run(editor.remove("gal-1")) is True

        assert row_store.count("delete") == 1
        assert object_store.removals == []
        assert levels(channel)[0] == "success"

    def test_external_image_is_not_released(self, row_store, object_store, image_service, channel):
        editor = make_editor(GALLERY, row_store, image_service, channel)
        asyncio.run(editor.load())

        assert asyncio.run(editor.remove("gal-2")) is True

        assert object_store.removals == []
        assert levels(channel) == ["success"]
        assert messages(channel) == ["Image deleted successfully"]

    def test_cleanup_failure_does_not_fail_delete(self, row_store, object_store, image_service, channel):
        object_store.fail_remove = True
        editor = make_editor(GALLERY, row_store, image_service, channel)
        asyncio.run(editor.load())

        assert asyncio.run(editor.remove("gal-1")) is True

        assert levels(channel) == ["success"]
        assert "gal-1" not in [r["id"] for r in editor.rows]

    def test_delete_failure_keeps_rows(self, row_store, object_store, image_service, channel):
        editor = make_editor(SERVICES, row_store, image_service, channel)
        asyncio.run(editor.load())
        row_store.fail_on.add(("delete", "services"))
        selects_before = row_store.count("select")

        assert asyncio.run(editor.remove("svc-1")) is False

        assert row_store.count("select") == selects_before
        assert "svc-1" in [r["id"] for r in editor.rows]
        assert object_store.removals == []
        assert messages(channel) == ["Failed to delete service"]

    def test_content_cannot_be_deleted(self, row_store, image_service, channel):
        editor = make_editor(CONTENT, row_store, image_service, channel)

        assert asyncio.run(editor.remove("home")) is False

        assert row_store.count("delete") == 0
        assert levels(channel) == ["error"]

    def test_removing_edited_row_cancels_draft(self, row_store, image_service, channel, sample_tables):
        editor = make_editor(SOCIAL_MEDIA, row_store, image_service, channel)
        editor.begin_edit(sample_tables["social_media"][0])

        asyncio.run(editor.remove("soc-2"))

        assert editor.editing_id is None
