"""TraceMiddleware -- 为单任务操作绑定 task_guid

从 /api/task/{guid} 路径中提取 guid，贯穿该请求的全部日志。
"""

from uuid import UUID

import structlog
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

_TASK_PATH_PREFIX = "/api/task/"


def extract_task_guid(path: str) -> str | None:
    """从请求路径提取任务 guid，非法 UUID 返回 None"""
    if not path.startswith(_TASK_PATH_PREFIX):
        return None
    candidate = path[len(_TASK_PATH_PREFIX):].split("/", 1)[0]
    try:
        return str(UUID(candidate))
    except ValueError:
        return None


class TraceMiddleware(BaseHTTPMiddleware):
    """任务级追踪中间件"""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        task_guid = extract_task_guid(request.url.path)
        if task_guid:
            structlog.contextvars.bind_contextvars(task_guid=task_guid)

        return await call_next(request)
