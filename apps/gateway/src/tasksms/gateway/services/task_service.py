"""TaskService -- 任务创建/查询/更新/删除业务逻辑

每个写操作在同一事务内完成 Task 行与子记录的写入：
1. create: Task 行 -> GROUP/TAG LookupValue -> CREATED History
2. update: JSON-Patch -> Task 行 -> 变更的 LookupValue -> UPDATED History
3. delete: LookupValue 级联删除 -> Task 行 -> DELETED History（History 永久保留）
"""

import asyncio
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any
from uuid import UUID, uuid4

import structlog
from tasksms.core.exceptions import TaskNotFoundError
from tasksms.core.models import (
    EntityType,
    History,
    HistoryType,
    LookupValue,
    LookupValueType,
    Projection,
    Task,
    TaskCreateRequest,
    TaskResource,
    includes_children,
)
from tasksms.core.patch import apply_task_patch
from tasksms.core.store import StoreGroup

log = structlog.get_logger()


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TaskService:
    """任务业务服务"""

    def __init__(
        self,
        store_group: StoreGroup,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._stores = store_group
        self._clock = clock

    async def create_task(self, request: TaskCreateRequest, actor: str) -> TaskResource:
        """创建任务及其 groups / tags，并写入 CREATED History

        Returns:
            含 groups / tags 的 TaskResource

        Raises:
            aiosqlite.IntegrityError: guid 已存在
        """
        now = self._clock()
        task = Task(
            guid=request.guid or uuid4(),
            name=request.name,
            description=request.description,
            created_by=actor,
            created_on=now,
            modified_by=actor,
            modified_on=now,
        )

        async with self._stores.transaction():
            task = await self._stores.task_store.create_task(task)
            groups = await self._create_lookup_values(
                task.id, LookupValueType.GROUP, request.groups
            )
            tags = await self._create_lookup_values(
                task.id, LookupValueType.TAG, request.tags
            )
            await self._append_history(
                task.id,
                HistoryType.CREATED,
                actor,
                now,
                details={
                    "task": {
                        "guid": str(task.guid),
                        "name": task.name,
                        "description": task.description,
                    }
                },
            )

        log.info(
            "task_created",
            task_guid=str(task.guid),
            group_count=len(groups),
            tag_count=len(tags),
        )
        return TaskResource.from_entity(task).model_copy(
            update={"groups": groups, "tags": tags}
        )

    async def find_task_by_guid(
        self,
        guid: UUID,
        projection: Projection = Projection.DETAILS,
    ) -> TaskResource:
        """按 guid 查询任务，DEEP 时并发读取 LookupValue 和 History

        读取期间持有 StoreGroup 读锁，不会看到进行中的写事务。

        Raises:
            TaskNotFoundError: guid 不存在
        """
        async with self._stores.read():
            task = await self._get_task_or_raise(guid)
            resource = TaskResource.from_entity(task)
            if not includes_children(projection):
                return resource

            lookup_values, history = await asyncio.gather(
                self._stores.lookup_value_store.find_by_entity(EntityType.TASK, task.id),
                self._stores.history_store.find_by_entity(EntityType.TASK, task.id),
            )
        return resource.with_lookup_values(lookup_values).with_history(history)

    async def list_all_tasks(self) -> list[TaskResource]:
        """查询全部任务（不含子记录）"""
        async with self._stores.read():
            tasks = await self._stores.task_store.list_tasks()
        return [TaskResource.from_entity(t) for t in tasks]

    async def update_task(
        self,
        guid: UUID,
        operations: list[dict[str, Any]],
        actor: str,
    ) -> TaskResource:
        """对任务当前表示应用 JSON-Patch 并持久化

        Returns:
            更新后的 TaskResource（DETAILS）

        Raises:
            TaskNotFoundError: guid 不存在
            TaskPatchError: patch 无法应用或结果不合法
            ImmutableFieldError: patch 修改了 guid
        """
        async with self._stores.transaction():
            task = await self._get_task_or_raise(guid)
            lookup_values = await self._stores.lookup_value_store.find_by_entity(
                EntityType.TASK, task.id
            )
            current = TaskResource.from_entity(task).with_lookup_values(lookup_values)
            patched = apply_task_patch(current, operations)

            now = self._clock()
            updated = task.model_copy(
                update={
                    "name": patched.name,
                    "description": patched.description,
                    "modified_by": actor,
                    "modified_on": now,
                }
            )
            await self._stores.task_store.update_task(updated)

            if patched.groups != current.groups:
                await self._replace_lookup_values(
                    task.id, LookupValueType.GROUP, patched.groups
                )
            if patched.tags != current.tags:
                await self._replace_lookup_values(
                    task.id, LookupValueType.TAG, patched.tags
                )

            await self._append_history(
                task.id,
                HistoryType.UPDATED,
                actor,
                now,
                details={"patch": operations},
            )

        log.info(
            "task_updated",
            task_guid=str(guid),
            operation_count=len(operations),
        )
        return await self.find_task_by_guid(guid, Projection.DETAILS)

    async def delete_task(self, guid: UUID, actor: str) -> None:
        """删除任务并级联删除其 LookupValue，History 保留并追加 DELETED

        Raises:
            TaskNotFoundError: guid 不存在
        """
        async with self._stores.transaction():
            task = await self._get_task_or_raise(guid)
            removed = await self._stores.lookup_value_store.delete_by_entity(
                EntityType.TASK, task.id
            )
            await self._stores.task_store.delete_task(task.id)
            await self._append_history(
                task.id,
                HistoryType.DELETED,
                actor,
                self._clock(),
                details={"task": {"guid": str(task.guid), "name": task.name}},
            )

        log.info(
            "task_deleted",
            task_guid=str(guid),
            lookup_values_removed=removed,
        )

    async def _get_task_or_raise(self, guid: UUID) -> Task:
        task = await self._stores.task_store.get_task_by_guid(guid)
        if task is None:
            raise TaskNotFoundError(guid)
        return task

    async def _create_lookup_values(
        self,
        task_id: int,
        value_type: LookupValueType,
        values: list[str],
    ) -> list[str]:
        """按给定顺序写入 LookupValue，返回写入的值"""
        created = []
        for value in values:
            lookup_value = await self._stores.lookup_value_store.create_lookup_value(
                LookupValue(
                    entity_type=EntityType.TASK,
                    entity_id=task_id,
                    value_type=value_type,
                    value=value,
                )
            )
            created.append(lookup_value.value)
        return created

    async def _replace_lookup_values(
        self,
        task_id: int,
        value_type: LookupValueType,
        values: list[str],
    ) -> None:
        await self._stores.lookup_value_store.delete_by_entity(
            EntityType.TASK, task_id, value_type
        )
        await self._create_lookup_values(task_id, value_type, values)

    async def _append_history(
        self,
        task_id: int,
        event_type: HistoryType,
        actor: str,
        created_on: datetime,
        details: dict[str, Any],
    ) -> History:
        return await self._stores.history_store.append_history(
            History(
                entity_type=EntityType.TASK,
                entity_id=task_id,
                event_type=event_type,
                created_by=actor,
                created_on=created_on,
                details=details,
            )
        )
