from .config import DB_PATH, link_table, logger
from .connection import get_db_connection
from .bootstrap import init_database
from .links import LinkDB
from .settings_db import LinkSettingsDB

__all__ = [
    "DB_PATH",
    "link_table",
    "logger",
    "get_db_connection",
    "init_database",
    "LinkDB",
    "LinkSettingsDB",
]
