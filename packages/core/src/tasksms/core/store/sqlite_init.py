"""SQLite 数据库初始化

PRAGMA 配置 + 三张表 DDL + 索引创建。
使用 aiosqlite 异步操作，可重复执行。
"""

import aiosqlite

# t_task 表 DDL
_TASK_DDL = """
CREATE TABLE IF NOT EXISTS t_task (
    ta_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    guid         TEXT NOT NULL UNIQUE,
    name         TEXT NOT NULL,
    description  TEXT,
    created_by   TEXT NOT NULL,
    created_on   TEXT NOT NULL,
    modified_by  TEXT NOT NULL,
    modified_on  TEXT NOT NULL
);
"""

# t_lookup_value 表 DDL（按 entity_type + entity_id 关联，无外键）
_LOOKUP_VALUE_DDL = """
CREATE TABLE IF NOT EXISTS t_lookup_value (
    lv_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    entity_type  TEXT NOT NULL,
    entity_id    INTEGER NOT NULL,
    value_type   TEXT NOT NULL,
    value        TEXT NOT NULL
);
"""

_LOOKUP_VALUE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_lookup_value_entity "
    "ON t_lookup_value(entity_type, entity_id);",
]

# t_history 表 DDL（append-only）
_HISTORY_DDL = """
CREATE TABLE IF NOT EXISTS t_history (
    hi_id        INTEGER PRIMARY KEY AUTOINCREMENT,
    entity_type  TEXT NOT NULL,
    entity_id    INTEGER NOT NULL,
    event_type   TEXT NOT NULL,
    created_by   TEXT NOT NULL,
    created_on   TEXT NOT NULL,
    details      TEXT NOT NULL DEFAULT '{}'
);
"""

_HISTORY_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_history_entity ON t_history(entity_type, entity_id);",
]


async def init_db(conn: aiosqlite.Connection) -> None:
    """初始化数据库：设置 PRAGMA + 创建表 + 创建索引

    Args:
        conn: aiosqlite 数据库连接
    """
    # 设置 PRAGMA（内存库的 journal_mode 固定为 memory）
    await conn.execute("PRAGMA journal_mode = WAL;")
    await conn.execute("PRAGMA foreign_keys = ON;")
    await conn.execute("PRAGMA busy_timeout = 5000;")

    # 创建表
    await conn.execute(_TASK_DDL)
    await conn.execute(_LOOKUP_VALUE_DDL)
    await conn.execute(_HISTORY_DDL)

    # 创建索引
    for idx_sql in _LOOKUP_VALUE_INDEXES + _HISTORY_INDEXES:
        await conn.execute(idx_sql)

    await conn.commit()


async def verify_wal_mode(conn: aiosqlite.Connection) -> bool:
    """验证 WAL 模式是否生效

    Returns:
        True 如果 WAL 模式已启用
    """
    cursor = await conn.execute("PRAGMA journal_mode;")
    row = await cursor.fetchone()
    return row is not None and row[0].lower() == "wal"
