"""健康检查路由

GET /health: Liveness 检查，永远返回 200。
GET /ready: Readiness 检查，验证 SQLite 连通性与 schema。
"""

import structlog
from fastapi import APIRouter, Request
from starlette.responses import JSONResponse

log = structlog.get_logger()

router = APIRouter()

_REQUIRED_TABLES = ("t_history", "t_lookup_value", "t_task")


@router.get("/health")
async def health():
    """Liveness 检查 -- 永远返回 200"""
    return {"status": "ok"}


@router.get("/ready")
async def ready(request: Request):
    """Readiness 检查 -- 验证核心依赖可用性

    检查项：
    1. sqlite: 数据库连通性
    2. schema: 三张业务表均已创建
    """
    checks = {}
    all_ok = True

    # 1. SQLite 连通性检查
    try:
        store_group = request.app.state.store_group
        cursor = await store_group.conn.execute(
            "SELECT name FROM sqlite_master WHERE type = 'table'"
        )
        tables = {row[0] for row in await cursor.fetchall()}
        checks["sqlite"] = "ok"
    except Exception as e:
        log.warning("readiness_sqlite_error", error_type=type(e).__name__)
        checks["sqlite"] = "unavailable"
        tables = set()
        all_ok = False

    # 2. Schema 检查
    missing = [name for name in _REQUIRED_TABLES if name not in tables]
    if checks["sqlite"] == "ok" and missing:
        checks["schema"] = f"missing: {', '.join(missing)}"
        all_ok = False
    elif checks["sqlite"] == "ok":
        checks["schema"] = "ok"
    else:
        checks["schema"] = "unknown"

    status_code = 200 if all_ok else 503
    status_text = "ready" if all_ok else "not_ready"

    return JSONResponse(
        status_code=status_code,
        content={
            "status": status_text,
            "checks": checks,
        },
    )
