# =============================================================================
# app/routers/admin.py - Admin Editor Endpoints
# =============================================================================
# Drives the per-admin ResourceEditors over HTTP. Every endpoint:
# 1. is gated by require_admin (redirect to login before any fetch)
# 2. looks up the admin's editor for {resource}
# 3. runs one editor operation while collecting its notifications
# 4. returns the editor state plus those notifications
#
# Editing failures never become HTTP errors: they come back as
# `ok: false` with an error notification. Only requests that cannot reach
# an editor (unknown resource, unknown field, unknown row) are 4xx.
# =============================================================================

import logging
from typing import Annotated, Any, Optional

from fastapi import APIRouter, Depends, File, Form, Path, UploadFile
from pydantic import BaseModel, Field

from app.auth import AuthUser, require_admin
from app.dependencies import RegistryDep
from app.exceptions import InvalidDraftFieldError, RowNotFoundError, UnknownResourceError
from core.models.notification import Notification
from core.resources import RESOURCES
from core.services.image_service import ImageInput
from core.services.resource_editor import ResourceEditor
from core.services.workspace import AdminWorkspace

logger = logging.getLogger(__name__)

router = APIRouter()

ResourcePath = Annotated[str, Path(description="services, gallery, content or social_media")]


# =============================================================================
# Request / Response Models
# =============================================================================

class OpenDraftRequest(BaseModel):
    """Open a draft for an existing row, or a blank create form without row_id."""
    row_id: Optional[str] = Field(default=None, examples=["7f9c...", "about"])


class DraftUpdateRequest(BaseModel):
    """Form input to bind to the open draft."""
    values: dict[str, Any] = Field(..., examples=[{"name": "Facial", "duration": "60 min"}])


class ListItemRequest(BaseModel):
    """Append one item to a list field of the draft."""
    field: str = Field(..., examples=["what_sets_apart"])
    value: str


class EditorStateResponse(BaseModel):
    """Editor state after an operation, with what the operation emitted."""
    resource: str
    rows: list[dict[str, Any]]
    draft: dict[str, Any]
    editing_id: Optional[str] = None
    loaded: bool
    can_create: bool
    can_delete: bool
    ok: bool = Field(default=True, description="False when the operation failed")
    notifications: list[Notification] = Field(default_factory=list)


class NotificationsResponse(BaseModel):
    notifications: list[Notification]


# =============================================================================
# Helpers
# =============================================================================

def _workspace(user: AuthUser, registry: RegistryDep) -> AdminWorkspace:
    return registry.get(str(user.id))


def _editor(resource: str, workspace: AdminWorkspace) -> ResourceEditor:
    try:
        return workspace.editor(resource)
    except KeyError:
        raise UnknownResourceError(resource, list(RESOURCES))


def _state(
    editor: ResourceEditor,
    notifications: list[Notification],
    ok: bool = True,
) -> EditorStateResponse:
    return EditorStateResponse(**editor.snapshot(), ok=ok, notifications=list(notifications))


def _field_error(resource: str, error: KeyError) -> InvalidDraftFieldError:
    return InvalidDraftFieldError(resource, str(error.args[0]) if error.args else str(error))


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/notifications", response_model=NotificationsResponse)
async def list_notifications(
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> NotificationsResponse:
    """Notifications of this admin that have not expired yet."""
    workspace = _workspace(user, registry)
    return NotificationsResponse(notifications=workspace.notifications.pending())


@router.get("/{resource}", response_model=EditorStateResponse)
async def load_resource(
    resource: ResourcePath,
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Load every row of the table into the editor.

    On a failed fetch the previously loaded rows are returned with an error
    notification.
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    with workspace.notifications.collect() as emitted:
        ok = await editor.load()

    return _state(editor, emitted, ok=ok)


@router.post("/{resource}/draft", response_model=EditorStateResponse)
async def open_draft(
    resource: ResourcePath,
    body: OpenDraftRequest,
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Start editing a row (pre-filled from it) or open a blank create form.

    Raises:
        404: If row_id is not among the table's rows
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    with workspace.notifications.collect() as emitted:
        if body.row_id is None:
            editor.cancel_edit()
        else:
            if not editor.loaded:
                await editor.load()
            row = editor.find_row(body.row_id)
            if row is None:
                raise RowNotFoundError(resource, body.row_id)
            editor.begin_edit(row)

    return _state(editor, emitted)


@router.patch("/{resource}/draft", response_model=EditorStateResponse)
async def update_draft(
    resource: ResourcePath,
    body: DraftUpdateRequest,
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Bind form input to the open draft. Nothing is written.

    Raises:
        400: If a field does not exist for the row being edited
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    try:
        editor.update_draft(body.values)
    except KeyError as e:
        raise _field_error(resource, e)

    return _state(editor, [])


@router.delete("/{resource}/draft", response_model=EditorStateResponse)
async def cancel_draft(
    resource: ResourcePath,
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """Discard the open draft."""
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)
    editor.cancel_edit()
    return _state(editor, [])


@router.post("/{resource}/draft/items", response_model=EditorStateResponse)
async def add_list_item(
    resource: ResourcePath,
    body: ListItemRequest,
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Append an item to a list field of the draft. Blank items are ignored.

    Raises:
        400: If the field is not a list field of the row being edited
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    try:
        editor.add_list_item(body.field, body.value)
    except KeyError as e:
        raise _field_error(resource, e)

    return _state(editor, [])


@router.delete("/{resource}/draft/items/{field}/{index}", response_model=EditorStateResponse)
async def remove_list_item(
    resource: ResourcePath,
    field: Annotated[str, Path(description="List field name")],
    index: Annotated[int, Path(description="Zero-based item index")],
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Remove one item of a list field. Out-of-range indexes are ignored.

    Raises:
        400: If the field is not a list field of the row being edited
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    try:
        editor.remove_list_item(field, index)
    except KeyError as e:
        raise _field_error(resource, e)

    return _state(editor, [])


@router.post("/{resource}/submit", response_model=EditorStateResponse)
async def submit_draft(
    resource: ResourcePath,
    registry: RegistryDep,
    image: Annotated[Optional[UploadFile], File(description="Image to upload for the image field")] = None,
    image_url: Annotated[Optional[str], Form(description="Image URL instead of a file")] = None,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Save the open draft.

    A new draft is inserted, an existing row is updated. An uploaded file
    is stored first and its public URL written into the image field; if
    the upload fails nothing is written.
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    source = None
    if image is not None and image.filename:
        content = await image.read()
        source = ImageInput.file(content, image.filename, image.content_type)
    elif image_url:
        source = ImageInput.url(image_url)

    with workspace.notifications.collect() as emitted:
        ok = await editor.submit(image=source)

    return _state(editor, emitted, ok=ok)


@router.delete("/{resource}/rows/{row_id}", response_model=EditorStateResponse)
async def delete_row(
    resource: ResourcePath,
    row_id: Annotated[str, Path(description="Row id")],
    registry: RegistryDep,
    user: AuthUser = Depends(require_admin),
) -> EditorStateResponse:
    """
    Delete a row and, best-effort, the stored image it referenced.
    """
    workspace = _workspace(user, registry)
    editor = _editor(resource, workspace)

    with workspace.notifications.collect() as emitted:
        ok = await editor.remove(row_id)

    return _state(editor, emitted, ok=ok)
