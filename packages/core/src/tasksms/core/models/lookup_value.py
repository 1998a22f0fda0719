"""LookupValue Domain Model -- 映射 t_lookup_value 表

通用 tag/group 附加值，按 (entity_type, entity_id) 归属到任意实体。
"""

from pydantic import BaseModel, Field

from .enums import EntityType, LookupValueType


class LookupValue(BaseModel):
    """LookupValue 数据模型"""

    id: int | None = Field(default=None, description="代理键")
    entity_type: EntityType = Field(default=EntityType.TASK, description="归属实体类型")
    entity_id: int = Field(description="归属实体代理键")
    value_type: LookupValueType = Field(description="GROUP / TAG")
    value: str = Field(description="值")
