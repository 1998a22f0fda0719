"""packages/core 测试配置 -- 核心层 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import pytest
import pytest_asyncio
from tasksms.core.models import Task
from tasksms.core.store import StoreGroup, create_store_group


@pytest_asyncio.fixture
async def core_db_path(tmp_path: Path) -> Path:
    """核心层临时数据库路径"""
    return tmp_path / "core_test.db"


@pytest_asyncio.fixture
async def stores(core_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    """已初始化 schema 的 StoreGroup"""
    store_group = await create_store_group(str(core_db_path))
    yield store_group
    await store_group.conn.close()


@pytest.fixture
def make_task():
    """构造未入库的 Task 的工厂"""

    def _make(name: str = "测试任务", **overrides) -> Task:
        now = datetime.now(UTC)
        fields = {
            "guid": uuid4(),
            "name": name,
            "description": "描述",
            "created_by": "tester",
            "created_on": now,
            "modified_by": "tester",
            "modified_on": now,
        }
        fields.update(overrides)
        return Task(**fields)

    return _make
