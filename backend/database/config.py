import logging
from typing import Optional

from config import get_settings

logger = logging.getLogger("database")
settings = get_settings()

DB_PATH = str(settings.db_path)
DB_PREFIX = settings.db_prefix
_DB_WAS_RESET = False


def link_table(prefix: Optional[str] = None) -> str:
    """返回带前缀的 lti_link 表名。"""
    return f"{DB_PREFIX if prefix is None else prefix}lti_link"
