"""任务 REST 路由

POST   /api/task:        创建任务（含 tags / groups），返回 201 + 资源
GET    /api/task:        任务列表，固定 SUMMARY
GET    /api/task/{guid}: 任务详情，projection 默认 DETAILS
PATCH  /api/task/{guid}: 应用 JSON-Patch，返回更新后的资源
DELETE /api/task/{guid}: 删除任务，返回 204
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Body, Depends, Query
from starlette.responses import JSONResponse, Response
from tasksms.core.models import Projection, TaskCreateRequest

from ..deps import get_actor, get_task_service
from ..services.task_service import TaskService

router = APIRouter(prefix="/api/task")


@router.post("", status_code=201)
async def create_task(
    body: TaskCreateRequest,
    service: TaskService = Depends(get_task_service),
    actor: str = Depends(get_actor),
):
    """创建任务，响应包含写入的 tags / groups"""
    resource = await service.create_task(body, actor)
    return JSONResponse(status_code=201, content=resource.render(Projection.DEEP))


@router.get("")
async def list_tasks(service: TaskService = Depends(get_task_service)):
    """查询全部任务，无论请求参数均按 SUMMARY 输出"""
    resources = await service.list_all_tasks()
    return JSONResponse(content=[r.render(Projection.SUMMARY) for r in resources])


@router.get("/{guid}")
async def get_task(
    guid: UUID,
    projection: Projection = Query(default=Projection.DETAILS, description="读取深度"),
    service: TaskService = Depends(get_task_service),
):
    """按 guid 查询任务"""
    resource = await service.find_task_by_guid(guid, projection)
    return JSONResponse(content=resource.render(projection))


@router.patch("/{guid}")
async def update_task(
    guid: UUID,
    operations: list[dict[str, Any]] = Body(description="JSON-Patch 操作列表"),
    service: TaskService = Depends(get_task_service),
    actor: str = Depends(get_actor),
):
    """对任务应用 JSON-Patch（RFC 6902）"""
    resource = await service.update_task(guid, operations, actor)
    return JSONResponse(content=resource.render(Projection.DETAILS))


@router.delete("/{guid}", status_code=204)
async def delete_task(
    guid: UUID,
    service: TaskService = Depends(get_task_service),
    actor: str = Depends(get_actor),
):
    """删除任务，级联删除其 tags / groups"""
    await service.delete_task(guid, actor)
    return Response(status_code=204)
