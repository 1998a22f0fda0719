"""依赖注入模块 -- 通过 FastAPI Depends 注入 Store 实例与服务

Store 实例通过 app.state 管理，在 lifespan 中初始化/清理。
"""

from fastapi import Depends, Header, Request
from tasksms.core.config import ACTOR_HEADER, get_default_actor
from tasksms.core.store import StoreGroup

from .services.task_service import TaskService


def get_store_group(request: Request) -> StoreGroup:
    """从 app.state 获取 StoreGroup 实例"""
    return request.app.state.store_group


def get_task_service(store_group: StoreGroup = Depends(get_store_group)) -> TaskService:
    return TaskService(store_group)


def get_actor(
    actor: str | None = Header(default=None, alias=ACTOR_HEADER),
) -> str:
    """操作者：X-Actor 请求头，缺省为配置的默认操作者"""
    if actor and actor.strip():
        return actor.strip()
    return get_default_actor()
