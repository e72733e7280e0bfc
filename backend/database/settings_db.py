from typing import Optional, Tuple

from .config import link_table, logger
from .connection import get_db_connection


class LinkSettingsDB:
    """链接级设置列的读写。

    每个链接一行，``settings`` 列保存 JSON 文本，可以为 NULL。
    """

    def __init__(self, db_path: Optional[str] = None, prefix: Optional[str] = None):
        self.db_path = db_path
        self.table = link_table(prefix)

    def fetch_settings(self, link_id: str) -> Optional[Tuple[Optional[str]]]:
        """返回 ``(settings,)``；链接不存在时返回 None。"""
        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f'SELECT settings FROM {self.table} WHERE link_id = ?', (link_id,))
            row = cursor.fetchone()
            return (row["settings"],) if row else None

    def update_settings(self, link_id: str, json_text: str) -> int:
        with get_db_connection(self.db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(
                f'UPDATE {self.table} SET settings = ?, updated_at = CURRENT_TIMESTAMP WHERE link_id = ?',
                (json_text, link_id),
            )
            conn.commit()
            updated = cursor.rowcount
        if updated == 0:
            logger.warning("更新设置时未找到链接: %s", link_id)
        return updated
