"""Task endpoints. Every successful write is pushed to live clients."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Request, Response

from tonish.api.deps import current_user_id
from tonish.api.schemas import TaskCreate, TaskUpdate
from tonish.data.tasks import TaskStore
from tonish.exceptions import NotFoundError
from tonish.logging import get_logger
from tonish.models import Task
from tonish.realtime.hub import Hub, MessageType

log = get_logger(__name__)

router = APIRouter()


def _store(request: Request) -> TaskStore:
    return request.app.state.task_store


def _notify(request: Request, message_type: MessageType, task: Task) -> None:
    hub: Hub = request.app.state.hub
    hub.broadcast_to_user(task.user_id, message_type, task.to_dict())


def _found(task: Task | None, task_id: int) -> Task:
    if task is None:
        raise NotFoundError("Task", task_id)
    return task


def _fields(body: TaskUpdate) -> dict[str, Any]:
    fields = body.supplied()
    # 0 is "no owner" on the wire; never let it clear an existing owner.
    if not fields.get("user_id"):
        fields.pop("user_id", None)
    return fields


# Static paths first so they are not captured by /{task_id}.


@router.get("")
async def list_tasks(request: Request) -> list[dict]:
    return [task.to_dict() for task in await _store(request).list_active()]


@router.get("/archived")
async def list_archived(request: Request) -> list[dict]:
    return [task.to_dict() for task in await _store(request).list_archived()]


@router.get("/status")
async def list_by_status(request: Request, status: str = "") -> list[dict]:
    tasks = await _store(request).list_active(status=status or None)
    return [task.to_dict() for task in tasks]


@router.get("/quadrant/{quadrant}")
async def list_by_quadrant(quadrant: str, request: Request) -> list[dict]:
    tasks = await _store(request).list_active(quadrant=quadrant)
    return [task.to_dict() for task in tasks]


@router.get("/{task_id}")
async def get_task(task_id: int, request: Request) -> dict:
    return _found(await _store(request).get(task_id), task_id).to_dict()


@router.post("", status_code=201)
async def create_task(
    body: TaskCreate,
    request: Request,
    user_id: int | None = Depends(current_user_id),
) -> dict:
    fields = _fields(body)
    if user_id is not None:
        fields["user_id"] = user_id

    task = await _store(request).create(fields)
    log.info("task_created", task_id=task.id, user_id=task.user_id)
    _notify(request, MessageType.TASK_CREATE, task)
    return task.to_dict()


@router.put("/{task_id}")
async def update_task(task_id: int, body: TaskUpdate, request: Request) -> dict:
    store = _store(request)
    before = _found(await store.get(task_id), task_id)
    task = _found(await store.update(task_id, _fields(body)), task_id)
    _notify(request, MessageType.TASK_UPDATE, task)
    if before.user_id != task.user_id:
        # The previous owner's clients still hold the task.
        request.app.state.hub.broadcast_to_user(
            before.user_id, MessageType.TASK_UPDATE, task.to_dict()
        )
    return task.to_dict()


@router.delete("/{task_id}", status_code=204)
async def delete_task(task_id: int, request: Request) -> Response:
    task = _found(await _store(request).delete(task_id), task_id)
    log.info("task_deleted", task_id=task_id, soft=True)
    _notify(request, MessageType.TASK_DELETE, task)
    return Response(status_code=204)


@router.post("/{task_id}/archive")
async def archive_task(task_id: int, request: Request) -> dict:
    task = _found(await _store(request).archive(task_id), task_id)
    _notify(request, MessageType.TASK_UPDATE, task)
    return task.to_dict()


@router.post("/{task_id}/restore")
async def restore_task(task_id: int, request: Request) -> dict:
    task = _found(await _store(request).restore(task_id), task_id)
    _notify(request, MessageType.TASK_UPDATE, task)
    return task.to_dict()


@router.delete("/{task_id}/permanent", status_code=204)
async def delete_task_permanently(task_id: int, request: Request) -> Response:
    task = _found(await _store(request).delete_permanently(task_id), task_id)
    log.info("task_deleted", task_id=task_id, soft=False)
    _notify(request, MessageType.TASK_DELETE, task)
    return Response(status_code=204)
