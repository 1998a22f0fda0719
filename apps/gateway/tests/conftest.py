"""apps/gateway 测试配置 -- FastAPI app + httpx AsyncClient + 临时 DB fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest
import pytest_asyncio
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from tasksms.core.store import StoreGroup, create_store_group


class FakeClock:
    """每次调用前进一秒的时钟"""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest_asyncio.fixture
async def gateway_db_path(tmp_path: Path) -> Path:
    """Gateway 临时数据库路径"""
    return tmp_path / "sqlite" / "test.db"


@pytest_asyncio.fixture
async def store_group(gateway_db_path: Path) -> AsyncGenerator[StoreGroup, None]:
    store_group = await create_store_group(str(gateway_db_path))
    yield store_group
    await store_group.conn.close()


@pytest_asyncio.fixture
async def app(gateway_db_path: Path, store_group: StoreGroup, clock: FakeClock, monkeypatch):
    """创建测试用 FastAPI app 实例（绕过 lifespan，手动注入 StoreGroup 与时钟）"""
    monkeypatch.setenv("TASKSMS_DB_PATH", str(gateway_db_path))
    monkeypatch.setenv("TASKSMS_DEMO_DATA", "false")

    from tasksms.gateway.deps import get_store_group, get_task_service
    from tasksms.gateway.main import create_app
    from tasksms.gateway.services.task_service import TaskService

    def _task_service(group: StoreGroup = Depends(get_store_group)) -> TaskService:
        return TaskService(group, clock=clock)

    application = create_app()
    application.state.store_group = store_group
    application.dependency_overrides[get_task_service] = _task_service
    yield application


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """提供 httpx AsyncClient 用于测试"""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
