"""Task REST 资源模型

TaskResource 是 Task 对外的表示形式，按 Projection 裁剪输出字段。
空值（None、空字符串、空列表）不输出。
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import PROJECTION_FIELDS, HistoryType, LookupValueType, Projection
from .history import History
from .lookup_value import LookupValue
from .task import Task


def _not_blank(value: str) -> str:
    if not value.strip():
        raise ValueError("name must not be blank")
    return value


class HistoryEntry(BaseModel):
    """History 的对外表示（DEEP 输出）"""

    event_type: HistoryType
    created_by: str
    created_on: datetime
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_history(cls, history: History) -> "HistoryEntry":
        return cls(
            event_type=history.event_type,
            created_by=history.created_by,
            created_on=history.created_on,
            details=history.details,
        )


class TaskResource(BaseModel):
    """Task 资源

    SUMMARY: guid, name
    DETAILS: + description, created_by, created_on, modified_by, modified_on
    DEEP:    + groups, tags, history
    """

    id: int | None = Field(default=None, description="内部主键，不对外输出")
    guid: UUID
    name: str
    description: str | None = None
    created_by: str | None = None
    created_on: datetime | None = None
    modified_by: str | None = None
    modified_on: datetime | None = None
    groups: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)
    history: list[HistoryEntry] = Field(default_factory=list)

    @classmethod
    def from_entity(cls, task: Task) -> "TaskResource":
        """从 Task 行构建资源（不含子记录）"""
        return cls(
            id=task.id,
            guid=task.guid,
            name=task.name,
            description=task.description,
            created_by=task.created_by,
            created_on=task.created_on,
            modified_by=task.modified_by,
            modified_on=task.modified_on,
        )

    def with_lookup_values(self, lookup_values: list[LookupValue]) -> "TaskResource":
        """按类型把 LookupValue 拆分到 groups / tags"""
        groups = [lv.value for lv in lookup_values if lv.value_type == LookupValueType.GROUP]
        tags = [lv.value for lv in lookup_values if lv.value_type == LookupValueType.TAG]
        return self.model_copy(update={"groups": groups, "tags": tags})

    def with_history(self, history: list[History]) -> "TaskResource":
        return self.model_copy(
            update={"history": [HistoryEntry.from_history(h) for h in history]}
        )

    def render(self, projection: Projection = Projection.DETAILS) -> dict[str, Any]:
        """按 Projection 输出 JSON 字典，并去除空值"""
        data = self.model_dump(mode="json", include=set(PROJECTION_FIELDS[projection]))
        return {key: value for key, value in data.items() if value not in (None, "", [])}

    def patch_document(self) -> dict[str, Any]:
        """JSON-Patch 作用的当前表示

        groups / tags 始终存在（可能为空列表），以便 "/tags/-" 之类的追加操作。
        """
        return self.model_dump(
            mode="json",
            include={
                "guid",
                "name",
                "description",
                "created_by",
                "created_on",
                "modified_by",
                "modified_on",
                "groups",
                "tags",
            },
        )


class TaskCreateRequest(BaseModel):
    """创建任务请求体"""

    guid: UUID | None = Field(default=None, description="可选，指定对外标识")
    name: str = Field(min_length=1, description="任务名称")
    description: str | None = Field(default=None, description="任务描述")
    tags: list[str] = Field(default_factory=list, description="标签")
    groups: list[str] = Field(default_factory=list, description="分组")

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _not_blank(value)


class PatchedTask(BaseModel):
    """应用 JSON-Patch 之后的表示，校验可写字段

    审计字段及未知字段忽略。
    """

    model_config = ConfigDict(extra="ignore")

    guid: UUID
    name: str = Field(min_length=1)
    description: str | None = None
    groups: list[str] = Field(default_factory=list)
    tags: list[str] = Field(default_factory=list)

    @field_validator("name")
    @classmethod
    def check_name(cls, value: str) -> str:
        return _not_blank(value)
