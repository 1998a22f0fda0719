"""structlog 配置模块

dev 模式：ConsoleRenderer 可读输出
json 模式：结构化 JSON 输出（每行一条事件）

请求内的事件都带 request_id / actor；单任务请求另带 task_guid。
"""

import logging

import structlog
from structlog.types import EventDict, WrappedLogger
from tasksms.core.config import get_default_actor, get_log_format, get_log_level

# aiosqlite 在 DEBUG 级别逐条记录 SQL 执行，压到 WARNING
_QUIET_LOGGERS: dict[str, int] = {
    "aiosqlite": logging.WARNING,
}


def fill_default_actor(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """请求内未携带 X-Actor 时补上默认操作者，与写入审计字段的 actor 一致"""
    if "request_id" in event_dict and not event_dict.get("actor"):
        event_dict["actor"] = get_default_actor()
    return event_dict


def setup_logging() -> None:
    """初始化 structlog 与标准库 logging

    TASKSMS_LOG_FORMAT 选择渲染模式，TASKSMS_LOG_LEVEL 决定根日志级别。
    """
    log_format = get_log_format()
    log_level = get_log_level()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        fill_default_actor,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(log_level)

    for name, level in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(level)
