"""FastAPI 应用主文件

app 创建 + lifespan 管理：DB 初始化/关闭 + 演示数据写入 + 路由注册。
"""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI
from tasksms.core.config import demo_data_enabled, get_db_path, get_default_actor
from tasksms.core.store import create_store_group

from .middleware.logging_config import setup_logging
from .middleware.logging_mw import LoggingMiddleware
from .middleware.trace_mw import TraceMiddleware
from .routes import health, tasks
from .routes.errors import register_exception_handlers
from .services.demo_data import seed_demo_data
from .services.task_service import TaskService

log = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """应用生命周期管理：启动时初始化 DB 与演示数据，关闭时清理连接"""
    db_path = get_db_path()
    store_group = await create_store_group(db_path)
    app.state.store_group = store_group
    log.info("store_group_initialized", db_path=db_path)

    try:
        if demo_data_enabled():
            log.info("demo_data_setup", message="Setting up demo data")
            await seed_demo_data(TaskService(store_group), get_default_actor())

        yield
    finally:
        # 关闭：清理数据库连接（演示数据写入失败时同样执行）
        await store_group.conn.close()
        log.info("store_group_closed", db_path=db_path)


def create_app() -> FastAPI:
    """创建 FastAPI 应用实例"""
    app = FastAPI(
        title="tasksms",
        version="0.1.0",
        description="Task CRUD API（JSON-Patch 更新 + 分级 Projection）",
        lifespan=lifespan,
    )

    # 注册中间件（顺序：先 Trace 后 Logging，Logging 在最外层）
    app.add_middleware(TraceMiddleware)
    app.add_middleware(LoggingMiddleware)

    setup_logging()
    register_exception_handlers(app)

    app.include_router(tasks.router, tags=["tasks"])
    app.include_router(health.router, tags=["health"])

    return app


# 默认 app 实例（uvicorn 入口）
app = create_app()
