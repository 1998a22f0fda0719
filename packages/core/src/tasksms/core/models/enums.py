"""枚举定义

包含 Projection 读取深度、EntityType、LookupValueType、HistoryType 枚举，
以及各 Projection 对应的输出字段集合。
"""

from enum import StrEnum


class Projection(StrEnum):
    """读取深度 -- 控制响应中包含的字段和关联记录"""

    # 仅 guid + name
    SUMMARY = "SUMMARY"
    # + description 与审计字段
    DETAILS = "DETAILS"
    # + groups / tags / history
    DEEP = "DEEP"


class EntityType(StrEnum):
    """LookupValue / History 归属的实体类型"""

    TASK = "TASK"


class LookupValueType(StrEnum):
    """LookupValue 类型"""

    GROUP = "GROUP"
    TAG = "TAG"


class HistoryType(StrEnum):
    """History 事件类型"""

    CREATED = "CREATED"
    UPDATED = "UPDATED"
    DELETED = "DELETED"


_SUMMARY_FIELDS = frozenset({"guid", "name"})
_DETAIL_FIELDS = _SUMMARY_FIELDS | {
    "description",
    "created_by",
    "created_on",
    "modified_by",
    "modified_on",
}
_DEEP_FIELDS = _DETAIL_FIELDS | {"groups", "tags", "history"}

PROJECTION_FIELDS: dict[Projection, frozenset[str]] = {
    Projection.SUMMARY: _SUMMARY_FIELDS,
    Projection.DETAILS: _DETAIL_FIELDS,
    Projection.DEEP: _DEEP_FIELDS,
}


def includes_children(projection: Projection) -> bool:
    """该 Projection 是否需要读取 LookupValue / History 子记录"""
    return projection == Projection.DEEP
