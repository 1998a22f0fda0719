"""配置常量模块 -- 可通过环境变量覆盖

包含数据库路径、演示数据开关、默认操作者等可配置项。
"""

import os
from pathlib import Path

import structlog

log = structlog.get_logger()

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}
_LOG_FORMATS = ("dev", "json")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# 内存数据库标识（嵌入式，进程退出即丢失）
IN_MEMORY_DB = ":memory:"


def _get_base_dir() -> Path:
    """获取项目 data 基础目录"""
    return Path(os.environ.get("TASKSMS_DATA_DIR", "data"))


def _get_bool(env_var: str, default: bool) -> bool:
    """读取布尔型环境变量，无法识别时回退默认值"""
    raw = os.environ.get(env_var)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE_VALUES:
        return True
    if value in _FALSE_VALUES:
        return False
    log.warning(
        "invalid_bool_config",
        env_var=env_var,
        value=raw,
        fallback=default,
    )
    return default


def _get_positive_float(env_var: str, default: float) -> float:
    """读取正数型环境变量，非法或非正值回退默认值"""
    raw = os.environ.get(env_var)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if value > 0:
        return value
    log.warning(
        "invalid_number_config",
        env_var=env_var,
        value=raw,
        fallback=default,
    )
    return default


def get_db_path() -> str:
    """获取 SQLite 数据库路径（":memory:" 表示内存库）"""
    return os.environ.get(
        "TASKSMS_DB_PATH",
        str(_get_base_dir() / "sqlite" / "tasksms.db"),
    )


def demo_data_enabled() -> bool:
    """启动时是否写入演示任务"""
    return _get_bool("TASKSMS_DEMO_DATA", True)


def get_default_actor() -> str:
    """请求未携带 X-Actor 时记录的操作者"""
    return os.environ.get("TASKSMS_DEFAULT_ACTOR", "system")


# 操作者请求头
ACTOR_HEADER: str = "X-Actor"


def get_demo_seed_timeout() -> float:
    """演示数据写入超时（秒）"""
    return _get_positive_float("TASKSMS_DEMO_SEED_TIMEOUT_S", 10.0)


def get_log_format() -> str:
    """日志渲染模式：dev（默认）或 json"""
    value = os.environ.get("TASKSMS_LOG_FORMAT", "dev").strip().lower()
    if value in _LOG_FORMATS:
        return value
    log.warning("invalid_log_format", value=value, fallback="dev")
    return "dev"


def get_log_level() -> str:
    """根日志级别，默认 INFO"""
    value = os.environ.get("TASKSMS_LOG_LEVEL", "INFO").strip().upper()
    if value in _LOG_LEVELS:
        return value
    log.warning("invalid_log_level", value=value, fallback="INFO")
    return "INFO"
