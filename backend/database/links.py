from typing import Dict, List, Optional

from .config import link_table, logger
from .connection import get_db_connection


class LinkDB:
    """lti_link 行的基本维护（由启动流程或管理脚本调用）。"""

    @staticmethod
    def get_by_id(link_id: str, db_path: Optional[str] = None, prefix: Optional[str] = None) -> Optional[Dict]:
        with get_db_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT * FROM {link_table(prefix)} WHERE link_id = ?', (link_id,))
            row = cursor.fetchone()
            return dict(row) if row else None

    @staticmethod
    def list_links(db_path: Optional[str] = None, prefix: Optional[str] = None) -> List[Dict]:
        with get_db_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'''
                SELECT link_id, link_key, title, created_at, updated_at
                FROM {link_table(prefix)}
                ORDER BY created_at ASC, link_id ASC
            ''')
            return [dict(row) for row in cursor.fetchall()]

    @staticmethod
    def ensure_link(
        link_id: str,
        link_key: Optional[str] = None,
        title: Optional[str] = None,
        db_path: Optional[str] = None,
        prefix: Optional[str] = None,
    ) -> bool:
        """如链接不存在则插入一行（settings 保持 NULL），返回是否新建。"""
        with get_db_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'INSERT OR IGNORE INTO {link_table(prefix)} (link_id, link_key, title) VALUES (?, ?, ?)',
                (link_id, link_key or link_id, title),
            )
            conn.commit()
            created = cursor.rowcount > 0
        if created:
            logger.info("已登记链接 %s", link_id)
        return created

    @staticmethod
    def delete_link(link_id: str, db_path: Optional[str] = None, prefix: Optional[str] = None) -> bool:
        with get_db_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'DELETE FROM {link_table(prefix)} WHERE link_id = ?', (link_id,))
            conn.commit()
            return cursor.rowcount > 0
