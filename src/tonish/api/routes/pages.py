"""Page endpoints.

Pages have no owner of their own; a page change is announced as an update of
the notebook that contains it, addressed to that notebook's user.
"""

from __future__ import annotations

from fastapi import APIRouter, Request, Response

from tonish.api.schemas import PageCreate, PageUpdate
from tonish.data.notebooks import NotebookStore
from tonish.exceptions import NotFoundError
from tonish.models import Page
from tonish.realtime.hub import Hub, MessageType

router = APIRouter()


def _store(request: Request) -> NotebookStore:
    return request.app.state.notebook_store


async def _notify_parent(request: Request, notebook_id: int) -> None:
    notebook = await _store(request).get(notebook_id)
    if notebook is None:
        return
    hub: Hub = request.app.state.hub
    hub.broadcast_to_user(notebook.user_id, MessageType.NOTEBOOK_UPDATE, notebook.to_dict())


def _found(page: Page | None, page_id: int) -> Page:
    if page is None:
        raise NotFoundError("Page", page_id)
    return page


@router.get("/search")
async def search_pages(request: Request, q: str = "") -> list[dict]:
    return [page.to_dict() for page in await _store(request).search_pages(q)]


@router.get("/{page_id}")
async def get_page(page_id: int, request: Request) -> dict:
    return _found(await _store(request).get_page(page_id), page_id).to_dict()


@router.post("", status_code=201)
async def create_page(body: PageCreate, request: Request) -> dict:
    store = _store(request)
    if await store.get(body.notebook_id) is None:
        raise NotFoundError("Notebook", body.notebook_id)

    page = await store.create_page(body.supplied())
    await _notify_parent(request, page.notebook_id)
    return page.to_dict()


@router.put("/{page_id}")
async def update_page(page_id: int, body: PageUpdate, request: Request) -> dict:
    store = _store(request)
    if body.notebook_id is not None and await store.get(body.notebook_id) is None:
        raise NotFoundError("Notebook", body.notebook_id)

    before = _found(await store.get_page(page_id), page_id)
    page = _found(await store.update_page(page_id, body.supplied()), page_id)
    await _notify_parent(request, page.notebook_id)
    if before.notebook_id != page.notebook_id:
        await _notify_parent(request, before.notebook_id)
    return page.to_dict()


@router.delete("/{page_id}", status_code=204)
async def delete_page(page_id: int, request: Request) -> Response:
    page = _found(await _store(request).delete_page(page_id), page_id)
    await _notify_parent(request, page.notebook_id)
    return Response(status_code=204)
