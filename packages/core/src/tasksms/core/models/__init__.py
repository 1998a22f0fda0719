"""tasksms Core Domain Models -- 公共类型导出

所有公共模型类型从此入口导入。
"""

from .enums import (
    PROJECTION_FIELDS,
    EntityType,
    HistoryType,
    LookupValueType,
    Projection,
    includes_children,
)
from .history import History
from .lookup_value import LookupValue
from .resource import HistoryEntry, PatchedTask, TaskCreateRequest, TaskResource
from .task import Task

__all__ = [
    # 枚举
    "Projection",
    "EntityType",
    "LookupValueType",
    "HistoryType",
    "PROJECTION_FIELDS",
    "includes_children",
    # 表映射
    "Task",
    "LookupValue",
    "History",
    # REST 资源
    "TaskResource",
    "HistoryEntry",
    "TaskCreateRequest",
    "PatchedTask",
]
