"""tasksms Core Store -- SQLite 持久化实现

提供工厂函数创建共享数据库连接的 Store 实例组。
"""

import asyncio
from pathlib import Path

import aiosqlite

from ..config import IN_MEMORY_DB
from .history_store import SqliteHistoryStore
from .lookup_value_store import SqliteLookupValueStore
from .sqlite_init import init_db
from .task_store import SqliteTaskStore
from .transaction import atomic


class StoreGroup:
    """Store 实例组 -- 共享同一个数据库连接和写锁"""

    def __init__(self, conn: aiosqlite.Connection) -> None:
        self.conn = conn
        self.write_lock = asyncio.Lock()
        self.task_store = SqliteTaskStore(conn)
        self.lookup_value_store = SqliteLookupValueStore(conn)
        self.history_store = SqliteHistoryStore(conn)

    def transaction(self):
        """写事务上下文：async with stores.transaction(): ..."""
        return atomic(self.conn, self.write_lock)

    def read(self) -> asyncio.Lock:
        """读上下文：async with stores.read(): ...

        与写事务共用一把锁，读不到未提交的写入。
        """
        return self.write_lock


async def create_store_group(db_path: str) -> StoreGroup:
    """创建 Store 实例组并执行 schema 初始化

    Args:
        db_path: SQLite 数据库文件路径，":memory:" 表示内存库

    Returns:
        StoreGroup 实例
    """
    if db_path != IN_MEMORY_DB:
        # 确保数据库目录存在
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = await aiosqlite.connect(db_path)
    conn.row_factory = aiosqlite.Row
    await init_db(conn)

    return StoreGroup(conn=conn)


__all__ = [
    "StoreGroup",
    "create_store_group",
    "SqliteTaskStore",
    "SqliteLookupValueStore",
    "SqliteHistoryStore",
    "init_db",
    "atomic",
]
