"""History Domain Model -- 映射 t_history 表

审计轨迹表 append-only，不允许更新或删除。
实体删除后其 History 仍保留。
"""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from .enums import EntityType, HistoryType


class History(BaseModel):
    """History 数据模型"""

    id: int | None = Field(default=None, description="代理键")
    entity_type: EntityType = Field(default=EntityType.TASK, description="归属实体类型")
    entity_id: int = Field(description="归属实体代理键")
    event_type: HistoryType = Field(description="CREATED / UPDATED / DELETED")
    created_by: str = Field(description="操作者")
    created_on: datetime = Field(description="事件时间")
    details: dict[str, Any] = Field(default_factory=dict, description="自由格式明细")
