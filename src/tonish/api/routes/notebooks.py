"""Notebook endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Request, Response

from tonish.api.deps import current_user_id
from tonish.api.schemas import NotebookCreate, NotebookUpdate
from tonish.data.notebooks import NotebookStore
from tonish.exceptions import NotFoundError
from tonish.models import Notebook
from tonish.realtime.hub import Hub, MessageType

router = APIRouter()


def _store(request: Request) -> NotebookStore:
    return request.app.state.notebook_store


def _notify(request: Request, message_type: MessageType, notebook: Notebook) -> None:
    hub: Hub = request.app.state.hub
    hub.broadcast_to_user(notebook.user_id, message_type, notebook.to_dict())


def _found(notebook: Notebook | None, notebook_id: int) -> Notebook:
    if notebook is None:
        raise NotFoundError("Notebook", notebook_id)
    return notebook


@router.get("")
async def list_notebooks(request: Request) -> list[dict]:
    return [notebook.to_dict() for notebook in await _store(request).list_all()]


@router.get("/{notebook_id}")
async def get_notebook(notebook_id: int, request: Request) -> dict:
    return _found(await _store(request).get(notebook_id), notebook_id).to_dict()


@router.post("", status_code=201)
async def create_notebook(
    body: NotebookCreate,
    request: Request,
    user_id: int | None = Depends(current_user_id),
) -> dict:
    fields = body.supplied()
    if user_id is not None:
        fields["user_id"] = user_id
    elif not fields.get("user_id"):
        fields.pop("user_id", None)

    notebook = await _store(request).create(fields)
    _notify(request, MessageType.NOTEBOOK_CREATE, notebook)
    return notebook.to_dict()


@router.put("/{notebook_id}")
async def update_notebook(notebook_id: int, body: NotebookUpdate, request: Request) -> dict:
    fields = body.supplied()
    if not fields.get("user_id"):
        fields.pop("user_id", None)
    store = _store(request)
    before = _found(await store.get(notebook_id), notebook_id)
    notebook = _found(await store.update(notebook_id, fields), notebook_id)
    _notify(request, MessageType.NOTEBOOK_UPDATE, notebook)
    if before.user_id != notebook.user_id:
        request.app.state.hub.broadcast_to_user(
            before.user_id, MessageType.NOTEBOOK_UPDATE, notebook.to_dict()
        )
    return notebook.to_dict()


@router.delete("/{notebook_id}", status_code=204)
async def delete_notebook(notebook_id: int, request: Request) -> Response:
    notebook = _found(await _store(request).delete(notebook_id), notebook_id)
    _notify(request, MessageType.NOTEBOOK_DELETE, notebook)
    return Response(status_code=204)
