"""HistoryStore SQLite 实现

t_history 表 append-only：只允许插入，不允许更新或删除。
"""

import json
from datetime import datetime

import aiosqlite

from ..models.enums import EntityType, HistoryType
from ..models.history import History


class SqliteHistoryStore:
    """HistoryStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def append_history(self, history: History) -> History:
        """追加一条 History（append-only）

        注意：此方法不自动提交事务，需由调用方管理事务。
        """
        cursor = await self._conn.execute(
            """
            INSERT INTO t_history (entity_type, entity_id, event_type,
                                   created_by, created_on, details)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                history.entity_type.value,
                history.entity_id,
                history.event_type.value,
                history.created_by,
                history.created_on.isoformat(),
                json.dumps(history.details, ensure_ascii=False, default=str),
            ),
        )
        return history.model_copy(update={"id": cursor.lastrowid})

    async def find_by_entity(
        self,
        entity_type: EntityType,
        entity_id: int,
    ) -> list[History]:
        """查询实体的全部 History，按发生顺序"""
        cursor = await self._conn.execute(
            """
            SELECT hi_id, entity_type, entity_id, event_type, created_by,
                   created_on, details
            FROM t_history
            WHERE entity_type = ? AND entity_id = ?
            ORDER BY hi_id ASC
            """,
            (entity_type.value, entity_id),
        )
        rows = await cursor.fetchall()
        return [self._row_to_history(row) for row in rows]

    @staticmethod
    def _row_to_history(row: aiosqlite.Row) -> History:
        """将数据库行转换为 History 模型"""
        details = json.loads(row[6]) if row[6] else {}
        return History(
            id=row[0],
            entity_type=EntityType(row[1]),
            entity_id=row[2],
            event_type=HistoryType(row[3]),
            created_by=row[4],
            created_on=datetime.fromisoformat(row[5]),
            details=details,
        )
