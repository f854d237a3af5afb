from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException
from fastapi.encoders import jsonable_encoder

from noteflow_api.auth import require_user
from noteflow_api.moods import random_affirmation
from noteflow_api.schemas import SubTaskCreate, SubTaskPatch, TaskCreate, TaskImportPayload, TaskPatch, TaskUpdate
from noteflow_api import repositories

logger = logging.getLogger(__name__)

router = APIRouter()


def _task_or_404(record: dict) -> dict:
    if not record:
        raise HTTPException(status_code=404, detail="Task not found")
    return jsonable_encoder(record)


def _sub_task_or_404(record: dict) -> dict:
    if not record:
        raise HTTPException(status_code=404, detail="Sub-task not found")
    return jsonable_encoder(record)


@router.get("/v1/tasks")
async def list_tasks(user: dict = Depends(require_user)):
    items = await repositories.list_tasks(user["id"])
    return {"items": jsonable_encoder(items)}


@router.post("/v1/tasks")
async def create_task(payload: TaskCreate, user: dict = Depends(require_user)):
    try:
        record = await repositories.create_task(user["id"], payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return jsonable_encoder(record)


@router.post("/v1/tasks/import")
async def import_tasks(payload: TaskImportPayload, user: dict = Depends(require_user)):
    try:
        records = await repositories.import_tasks(user["id"], [task.model_dump() for task in payload.tasks])
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    logger.info("Imported %s guest tasks for %s", len(records), user["id"])
    return {"items": jsonable_encoder(records)}


@router.put("/v1/tasks/{task_id}")
async def replace_task(task_id: str, payload: TaskUpdate, user: dict = Depends(require_user)):
    if not await repositories.get_task(user["id"], task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        record = await repositories.update_task(user["id"], task_id, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _task_or_404(record)


@router.patch("/v1/tasks/{task_id}")
async def patch_task(task_id: str, payload: TaskPatch, user: dict = Depends(require_user)):
    if not await repositories.get_task(user["id"], task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        record = await repositories.update_task(user["id"], task_id, payload.model_dump(exclude_unset=True))
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _task_or_404(record)


@router.post("/v1/tasks/{task_id}/toggle")
async def toggle_task(task_id: str, user: dict = Depends(require_user)):
    record = _task_or_404(await repositories.toggle_task(user["id"], task_id))
    return {
        "task": record,
        "affirmation": random_affirmation() if record["completed"] else None,
    }


@router.delete("/v1/tasks/{task_id}")
async def delete_task(task_id: str, user: dict = Depends(require_user)):
    if not await repositories.delete_task(user["id"], task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    return {"ok": True}


@router.post("/v1/tasks/{task_id}/subtasks")
async def add_sub_task(task_id: str, payload: SubTaskCreate, user: dict = Depends(require_user)):
    if not await repositories.get_task(user["id"], task_id):
        raise HTTPException(status_code=404, detail="Task not found")
    try:
        record = await repositories.add_sub_task(user["id"], task_id, payload.model_dump())
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return jsonable_encoder(record)


@router.patch("/v1/subtasks/{sub_task_id}")
async def patch_sub_task(sub_task_id: str, payload: SubTaskPatch, user: dict = Depends(require_user)):
    if not await repositories.get_sub_task(user["id"], sub_task_id):
        raise HTTPException(status_code=404, detail="Sub-task not found")
    try:
        record = await repositories.update_sub_task(
            user["id"], sub_task_id, payload.model_dump(exclude_unset=True)
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return _sub_task_or_404(record)


@router.post("/v1/subtasks/{sub_task_id}/toggle")
async def toggle_sub_task(sub_task_id: str, user: dict = Depends(require_user)):
    return _sub_task_or_404(await repositories.toggle_sub_task(user["id"], sub_task_id))


@router.delete("/v1/subtasks/{sub_task_id}")
async def delete_sub_task(sub_task_id: str, user: dict = Depends(require_user)):
    if not await repositories.delete_sub_task(user["id"], sub_task_id):
        raise HTTPException(status_code=404, detail="Sub-task not found")
    return {"ok": True}
