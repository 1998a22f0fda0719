"""LookupValueStore SQLite 实现

LookupValue 按 (entity_type, entity_id) 归属，没有外键约束，
删除实体时需由调用方显式调用 delete_by_entity。
"""

import aiosqlite

from ..models.enums import EntityType, LookupValueType
from ..models.lookup_value import LookupValue


class SqliteLookupValueStore:
    """LookupValueStore 的 SQLite 实现"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self._conn = conn

    async def create_lookup_value(self, lookup_value: LookupValue) -> LookupValue:
        """插入一条 LookupValue，返回带 id 的记录"""
        cursor = await self._conn.execute(
            """
            INSERT INTO t_lookup_value (entity_type, entity_id, value_type, value)
            VALUES (?, ?, ?, ?)
            """,
            (
                lookup_value.entity_type.value,
                lookup_value.entity_id,
                lookup_value.value_type.value,
                lookup_value.value,
            ),
        )
        return lookup_value.model_copy(update={"id": cursor.lastrowid})

    async def find_by_entity(
        self,
        entity_type: EntityType,
        entity_id: int,
    ) -> list[LookupValue]:
        """查询实体的全部 LookupValue，按插入顺序"""
        cursor = await self._conn.execute(
            """
            SELECT lv_id, entity_type, entity_id, value_type, value
            FROM t_lookup_value
            WHERE entity_type = ? AND entity_id = ?
            ORDER BY lv_id ASC
            """,
            (entity_type.value, entity_id),
        )
        rows = await cursor.fetchall()
        return [self._row_to_lookup_value(row) for row in rows]

    async def delete_by_entity(
        self,
        entity_type: EntityType,
        entity_id: int,
        value_type: LookupValueType | None = None,
    ) -> int:
        """删除实体的 LookupValue，可按类型限定

        Returns:
            删除的行数
        """
        if value_type is None:
            cursor = await self._conn.execute(
                "DELETE FROM t_lookup_value WHERE entity_type = ? AND entity_id = ?",
                (entity_type.value, entity_id),
            )
        else:
            cursor = await self._conn.execute(
                """
                DELETE FROM t_lookup_value
                WHERE entity_type = ? AND entity_id = ? AND value_type = ?
                """,
                (entity_type.value, entity_id, value_type.value),
            )
        return cursor.rowcount

    async def count_by_entity(self, entity_type: EntityType, entity_id: int) -> int:
        cursor = await self._conn.execute(
            "SELECT COUNT(*) FROM t_lookup_value WHERE entity_type = ? AND entity_id = ?",
            (entity_type.value, entity_id),
        )
        row = await cursor.fetchone()
        return row[0] if row else 0

    @staticmethod
    def _row_to_lookup_value(row: aiosqlite.Row) -> LookupValue:
        return LookupValue(
            id=row[0],
            entity_type=EntityType(row[1]),
            entity_id=row[2],
            value_type=LookupValueType(row[3]),
            value=row[4],
        )
