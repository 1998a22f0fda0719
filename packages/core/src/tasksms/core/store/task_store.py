"""TaskStore SQLite 实现

此处仅提供 t_task 表的数据库操作，不自动提交事务，由调用方管理。
"""

from datetime import datetime
from uuid import UUID

import aiosqlite

from ..models.task import Task

_COLUMNS = (
    "ta_id, guid, name, description, created_by, created_on, modified_by, modified_on"
)


class SqliteTaskStore:
    """TaskStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_task(self, task: Task) -> Task:
        """插入任务记录，返回带 id 的 Task"""
        cursor = await self._conn.execute(
            """
            INSERT INTO t_task (guid, name, description, created_by, created_on,
                                modified_by, modified_on)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                str(task.guid),
                task.name,
                task.description,
                task.created_by,
                task.created_on.isoformat(),
                task.modified_by,
                task.modified_on.isoformat(),
            ),
        )
        return task.model_copy(update={"id": cursor.lastrowid})

    async def get_task_by_guid(self, guid: UUID) -> Task | None:
        """根据 guid 查询任务"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM t_task WHERE guid = ?",
            (str(guid),),
        )
        row = await cursor.fetchone()
        if row is None:
            return None
        return self._row_to_task(row)

    async def list_tasks(self) -> list[Task]:
        """查询全部任务，按 id 正序"""
        cursor = await self._conn.execute(
            f"SELECT {_COLUMNS} FROM t_task ORDER BY ta_id ASC"
        )
        rows = await cursor.fetchall()
        return [self._row_to_task(row) for row in rows]

    async def update_task(self, task: Task) -> None:
        """更新可写字段与修改审计字段（guid 和创建审计字段不变）"""
        await self._conn.execute(
            """
            UPDATE t_task
            SET name = ?, description = ?, modified_by = ?, modified_on = ?
            WHERE ta_id = ?
            """,
            (
                task.name,
                task.description,
                task.modified_by,
                task.modified_on.isoformat(),
                task.id,
            ),
        )

    async def delete_task(self, task_id: int) -> None:
        """根据代理键删除任务"""
        await self._conn.execute("DELETE FROM t_task WHERE ta_id = ?", (task_id,))

    @staticmethod
    def _row_to_task(row: aiosqlite.Row) -> Task:
        """将数据库行转换为 Task 模型"""
        return Task(
            id=row[0],
            guid=UUID(row[1]),
            name=row[2],
            description=row[3],
            created_by=row[4],
            created_on=datetime.fromisoformat(row[5]),
            modified_by=row[6],
            modified_on=datetime.fromisoformat(row[7]),
        )
