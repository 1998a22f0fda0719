"""TaskService 测试

测试内容：
1. create 写入 LookupValue 与 CREATED History
2. update 刷新 modified_on / modified_by 并按需替换 LookupValue
3. 失败的 patch 整体回滚
4. delete 级联删除 LookupValue，History 保留
5. 读操作看不到进行中的写事务
"""

import asyncio
from datetime import UTC, datetime
from uuid import uuid4

import pytest
from tasksms.core.exceptions import (
    ImmutableFieldError,
    TaskNotFoundError,
    TaskPatchError,
)
from tasksms.core.models import (
    EntityType,
    HistoryType,
    LookupValueType,
    Projection,
    TaskCreateRequest,
)
from tasksms.core.store import StoreGroup
from tasksms.gateway.services.task_service import TaskService


@pytest.fixture
def service(store_group: StoreGroup, clock) -> TaskService:
    return TaskService(store_group, clock=clock)


class TestCreate:
    async def test_create_writes_children(
        self, service: TaskService, store_group: StoreGroup
    ):
        resource = await service.create_task(
            TaskCreateRequest(name="Task3", tags=["A", "B"], groups=["1"]), "alice"
        )
        assert resource.id is not None
        assert resource.tags == ["A", "B"]
        assert resource.groups == ["1"]
        assert resource.created_by == "alice"
        assert resource.created_on == datetime(2024, 1, 1, tzinfo=UTC)

        values = await store_group.lookup_value_store.find_by_entity(
            EntityType.TASK, resource.id
        )
        assert [(v.value_type, v.value) for v in values] == [
            (LookupValueType.GROUP, "1"),
            (LookupValueType.TAG, "A"),
            (LookupValueType.TAG, "B"),
        ]

        history = await store_group.history_store.find_by_entity(
            EntityType.TASK, resource.id
        )
        assert len(history) == 1
        assert history[0].event_type == HistoryType.CREATED
        assert history[0].created_by == "alice"

    async def test_find_detail_has_no_children(self, service: TaskService):
        created = await service.create_task(
            TaskCreateRequest(name="t", tags=["A"]), "alice"
        )
        details = await service.find_task_by_guid(created.guid, Projection.DETAILS)
        assert details.tags == []
        assert details.history == []

        deep = await service.find_task_by_guid(created.guid, Projection.DEEP)
        assert deep.tags == ["A"]
        assert len(deep.history) == 1

    async def test_find_missing(self, service: TaskService):
        with pytest.raises(TaskNotFoundError):
            await service.find_task_by_guid(uuid4())


class TestUpdate:
    async def test_update_refreshes_audit(self, service: TaskService):
        created = await service.create_task(TaskCreateRequest(name="before"), "alice")

        updated = await service.update_task(
            created.guid,
            [{"op": "replace", "path": "/name", "value": "after"}],
            "bob",
        )
        assert updated.name == "after"
        assert updated.created_by == "alice"
        assert updated.created_on == created.created_on
        assert updated.modified_by == "bob"
        assert updated.modified_on > created.modified_on

    async def test_update_replaces_tags_only(
        self, service: TaskService, store_group: StoreGroup
    ):
        created = await service.create_task(
            TaskCreateRequest(name="t", tags=["A"], groups=["1"]), "alice"
        )
        before = await store_group.lookup_value_store.find_by_entity(
            EntityType.TASK, created.id
        )
        group_ids = [v.id for v in before if v.value_type == LookupValueType.GROUP]

        await service.update_task(
            created.guid,
            [{"op": "replace", "path": "/tags", "value": ["X", "Y"]}],
            "bob",
        )
        after = await store_group.lookup_value_store.find_by_entity(
            EntityType.TASK, created.id
        )
        assert [v.value for v in after if v.value_type == LookupValueType.TAG] == [
            "X",
            "Y",
        ]
        # 未变更的 groups 保持原行
        assert [v.id for v in after if v.value_type == LookupValueType.GROUP] == group_ids

    async def test_update_history(self, service: TaskService):
        created = await service.create_task(TaskCreateRequest(name="t"), "alice")
        operations = [{"op": "add", "path": "/description", "value": "DESC"}]
        await service.update_task(created.guid, operations, "bob")

        deep = await service.find_task_by_guid(created.guid, Projection.DEEP)
        assert deep.description == "DESC"
        assert [h.event_type for h in deep.history] == [
            HistoryType.CREATED,
            HistoryType.UPDATED,
        ]
        assert deep.history[1].created_by == "bob"
        assert deep.history[1].details == {"patch": operations}

    async def test_invalid_patch_rolls_back(self, service: TaskService):
        created = await service.create_task(TaskCreateRequest(name="keep"), "alice")
        with pytest.raises(TaskPatchError):
            await service.update_task(
                created.guid,
                [{"op": "remove", "path": "/missing"}],
                "bob",
            )

        deep = await service.find_task_by_guid(created.guid, Projection.DEEP)
        assert deep.name == "keep"
        assert deep.modified_by == "alice"
        assert len(deep.history) == 1

    async def test_blank_name_rejected(self, service: TaskService):
        created = await service.create_task(TaskCreateRequest(name="keep"), "alice")
        with pytest.raises(TaskPatchError):
            await service.update_task(
                created.guid,
                [{"op": "replace", "path": "/name", "value": ""}],
                "bob",
            )

    async def test_guid_change_rejected(self, service: TaskService):
        created = await service.create_task(TaskCreateRequest(name="t"), "alice")
        with pytest.raises(ImmutableFieldError):
            await service.update_task(
                created.guid,
                [{"op": "replace", "path": "/guid", "value": str(uuid4())}],
                "bob",
            )

    async def test_update_missing(self, service: TaskService):
        with pytest.raises(TaskNotFoundError):
            await service.update_task(uuid4(), [], "bob")


class TestDelete:
    async def test_delete_cascades_lookup_values(
        self, service: TaskService, store_group: StoreGroup
    ):
        created = await service.create_task(
            TaskCreateRequest(name="t", tags=["A", "B"], groups=["1"]), "alice"
        )
        await service.delete_task(created.guid, "bob")

        assert await store_group.task_store.get_task_by_guid(created.guid) is None
        count = await store_group.lookup_value_store.count_by_entity(
            EntityType.TASK, created.id
        )
        assert count == 0

        history = await store_group.history_store.find_by_entity(
            EntityType.TASK, created.id
        )
        assert [h.event_type for h in history] == [
            HistoryType.CREATED,
            HistoryType.DELETED,
        ]
        assert history[1].created_by == "bob"

    async def test_delete_missing(self, service: TaskService):
        with pytest.raises(TaskNotFoundError):
            await service.delete_task(uuid4(), "bob")

    async def test_list_all(self, service: TaskService):
        await service.create_task(TaskCreateRequest(name="a"), "alice")
        await service.create_task(TaskCreateRequest(name="b", tags=["A"]), "alice")
        tasks = await service.list_all_tasks()
        assert [t.name for t in tasks] == ["a", "b"]
        assert all(t.tags == [] for t in tasks)


class TestReadIsolation:
    """读操作与进行中的写事务隔离"""

    async def _poll_tag_counts(
        self, service: TaskService, guid, rounds: int = 200
    ) -> list[int]:
        """反复 DEEP 读取，记录每次看到的 tag 数量（不存在时跳过）"""
        seen = []
        for _ in range(rounds):
            try:
                deep = await service.find_task_by_guid(guid, Projection.DEEP)
            except TaskNotFoundError:
                pass
            else:
                seen.append(len(deep.tags))
            await asyncio.sleep(0)
        return seen

    async def test_deep_read_during_create(self, service: TaskService):
        guid = uuid4()
        tags = [f"T{i}" for i in range(50)]

        _, seen = await asyncio.gather(
            service.create_task(
                TaskCreateRequest(guid=guid, name="many", tags=tags), "alice"
            ),
            self._poll_tag_counts(service, guid),
        )
        assert seen
        assert all(count == len(tags) for count in seen)

    async def test_deep_read_during_delete(self, service: TaskService):
        tags = [f"T{i}" for i in range(50)]
        created = await service.create_task(
            TaskCreateRequest(name="doomed", tags=tags), "alice"
        )

        _, seen = await asyncio.gather(
            service.delete_task(created.guid, "bob"),
            self._poll_tag_counts(service, created.guid),
        )
        # 要么删除前的完整视图，要么不存在
        assert all(count == len(tags) for count in seen)
        with pytest.raises(TaskNotFoundError):
            await service.find_task_by_guid(created.guid)

    async def test_list_during_create(self, service: TaskService):
        async def create_many():
            for i in range(5):
                await service.create_task(
                    TaskCreateRequest(name=f"t{i}", tags=["A"] * 20), "alice"
                )

        async def list_repeatedly() -> list[int]:
            counts = []
            for _ in range(100):
                counts.append(len(await service.list_all_tasks()))
                await asyncio.sleep(0)
            return counts

        _, counts = await asyncio.gather(create_many(), list_repeatedly())
        # 列表长度单调不减，且只反映已提交的任务
        assert counts == sorted(counts)
        assert len(await service.list_all_tasks()) == 5
