"""集成测试共享 fixture"""

from collections.abc import AsyncGenerator
from datetime import UTC, datetime, timedelta
from pathlib import Path

import pytest_asyncio
from fastapi import Depends
from httpx import ASGITransport, AsyncClient
from tasksms.core.store import StoreGroup, create_store_group


class _SteppingClock:
    """每次调用前进一秒，保证审计时间戳严格递增"""

    def __init__(self) -> None:
        self.now = datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        current = self.now
        self.now += timedelta(seconds=1)
        return current


@pytest_asyncio.fixture
async def integration_app(tmp_path: Path, monkeypatch):
    """集成测试用 FastAPI app"""
    db_path = str(tmp_path / "test.db")
    monkeypatch.setenv("TASKSMS_DB_PATH", db_path)
    monkeypatch.setenv("TASKSMS_DEMO_DATA", "false")

    from tasksms.gateway.deps import get_store_group, get_task_service
    from tasksms.gateway.main import create_app
    from tasksms.gateway.services.task_service import TaskService

    clock = _SteppingClock()

    def _task_service(group: StoreGroup = Depends(get_store_group)) -> TaskService:
        return TaskService(group, clock=clock)

    app = create_app()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group
    app.dependency_overrides[get_task_service] = _task_service

    yield app

    await store_group.conn.close()


@pytest_asyncio.fixture
async def client(integration_app) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=integration_app),
        base_url="http://test",
    ) as ac:
        yield ac
