"""写事务封装

Task 行与其 LookupValue / History 子记录在同一 SQLite 事务内原子提交。
所有 Store 共享一个连接，写事务通过 asyncio.Lock 串行化，
避免并发协程提交或回滚彼此未完成的写入。
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import aiosqlite


@asynccontextmanager
async def atomic(
    conn: aiosqlite.Connection,
    lock: asyncio.Lock,
) -> AsyncIterator[aiosqlite.Connection]:
    """在写锁内执行一个事务：正常退出提交，异常回滚后原样抛出

    Args:
        conn: 数据库连接（需在同一连接上操作以保证事务性）
        lock: StoreGroup 共享写锁

    Raises:
        Exception: 事务体或提交失败时，回滚后抛出原异常
    """
    async with lock:
        try:
            yield conn
            await conn.commit()
        except BaseException:
            # 请求被取消时同样需要回滚，否则残留事务会被下一次提交带出
            await conn.rollback()
            raise
