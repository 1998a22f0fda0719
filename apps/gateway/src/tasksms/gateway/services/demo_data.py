"""演示数据 -- 启动时写入三条示例任务"""

import asyncio

import structlog
from tasksms.core.config import get_demo_seed_timeout
from tasksms.core.models import TaskCreateRequest, TaskResource

from .task_service import TaskService

log = structlog.get_logger()

DEMO_TASKS: list[TaskCreateRequest] = [
    TaskCreateRequest(name="Task1", description="DESC"),
    TaskCreateRequest(name="Task2", tags=["A"]),
    TaskCreateRequest(name="Task3", tags=["A", "B"], groups=["1"]),
]


async def seed_demo_data(service: TaskService, actor: str) -> list[TaskResource]:
    """并发创建演示任务，超过 TASKSMS_DEMO_SEED_TIMEOUT_S 秒抛出 TimeoutError"""
    log.info("demo_data_seeding", task_count=len(DEMO_TASKS))

    async def _create(request: TaskCreateRequest) -> TaskResource:
        resource = await service.create_task(request, actor)
        log.info(
            "demo_task_created",
            task_guid=str(resource.guid),
            name=resource.name,
        )
        return resource

    return await asyncio.wait_for(
        asyncio.gather(*(_create(request) for request in DEMO_TASKS)),
        timeout=get_demo_seed_timeout(),
    )
