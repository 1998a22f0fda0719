"""Task Domain Model -- 映射 t_task 表

id 为数据库自增代理键，guid 为对外标识（全局唯一、不可变）。
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field


class Task(BaseModel):
    """Task 数据模型

    LookupValue 与 History 通过 (entity_type, entity_id) 关联到 id，
    没有外键约束，删除 Task 时需显式级联删除 LookupValue。
    """

    id: int | None = Field(default=None, description="代理键，插入后由数据库分配")
    guid: UUID = Field(description="对外唯一标识，创建后不可变")
    name: str = Field(description="任务名称")
    description: str | None = Field(default=None, description="任务描述")
    created_by: str = Field(description="创建者")
    created_on: datetime = Field(description="创建时间")
    modified_by: str = Field(description="最后修改者")
    modified_on: datetime = Field(description="最后修改时间")
