"""异常 -> HTTP 错误响应映射

统一错误格式：{"error": {"code": ..., "message": ...}}
"""

import aiosqlite
import structlog
from fastapi import FastAPI, Request
from starlette.responses import JSONResponse
from tasksms.core.exceptions import TaskServiceError

log = structlog.get_logger()


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"error": {"code": code, "message": message}},
    )


async def handle_task_service_error(request: Request, exc: TaskServiceError) -> JSONResponse:
    """业务异常：状态码和错误码由异常类型决定"""
    log.info(
        "request_rejected",
        code=exc.code,
        status_code=exc.status_code,
        message=exc.message,
    )
    return error_response(exc.status_code, exc.code, exc.message)


async def handle_integrity_error(
    request: Request, exc: aiosqlite.IntegrityError
) -> JSONResponse:
    """约束冲突（如 guid 重复）"""
    log.warning("constraint_violation", error=str(exc))
    return error_response(409, "CONSTRAINT_VIOLATION", str(exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TaskServiceError, handle_task_service_error)
    app.add_exception_handler(aiosqlite.IntegrityError, handle_integrity_error)
