import sqlite3
from contextlib import contextmanager
from typing import Optional

from . import config
from .config import logger


@contextmanager
def get_db_connection(db_path: Optional[str] = None):
    """获取数据库连接的上下文管理器。"""
    conn = sqlite3.connect(db_path or config.DB_PATH)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    except Exception as exc:
        conn.rollback()
        logger.error("数据库操作错误: %s", exc)
        raise
    finally:
        conn.close()
