import os
import sqlite3
from typing import Optional

from . import config


def init_database(db_path: Optional[str] = None, prefix: Optional[str] = None):
    """初始化数据库表结构。"""
    path = db_path or config.DB_PATH
    if config.settings.db_reset and not config._DB_WAS_RESET and db_path is None:
        if os.path.exists(path):
            try:
                os.remove(path)
                config.logger.info("数据库重置：已删除现有文件 %s", path)
            except OSError as exc:
                config.logger.error("删除数据库文件失败: %s", exc)
                raise
        config._DB_WAS_RESET = True

    table = config.link_table(prefix)
    conn = sqlite3.connect(path)
    cursor = conn.cursor()

    try:
        cursor.execute(f'''
            CREATE TABLE IF NOT EXISTS {table} (
                link_id TEXT PRIMARY KEY,
                link_key TEXT,
                title TEXT,
                settings TEXT,
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')
        conn.commit()
        config.logger.info("数据库初始化完成: %s (%s)", path, table)
    except Exception as exc:
        conn.rollback()
        config.logger.error("数据库初始化失败: %s", exc)
        raise
    finally:
        conn.close()
