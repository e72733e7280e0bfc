"""Utility script to reset and bootstrap the SQLite database via env-driven settings."""

from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Iterable, Optional

from config import get_settings
from database import LinkDB, init_database

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = get_settings()


def reset_database(
    link_ids: Iterable[str] = (),
    keep_existing: bool = False,
    remove_ids: Iterable[str] = (),
) -> None:
    """Rebuild the database, register the given links and drop the removed ones."""
    db_path: Path = settings.db_path

    if db_path.exists() and not keep_existing:
        logger.info("删除旧数据库文件: %s", db_path)
        db_path.unlink()
    elif not db_path.exists():
        logger.info("未发现旧数据库文件，将创建新数据库: %s", db_path)

    db_path.parent.mkdir(parents=True, exist_ok=True)

    init_database()
    for link_id in link_ids:
        LinkDB.ensure_link(link_id)
    for link_id in remove_ids:
        if LinkDB.delete_link(link_id):
            logger.info("已删除链接: %s", link_id)
        else:
            logger.warning("要删除的链接不存在: %s", link_id)
    logger.info("数据库初始化完成: %s", db_path)


def main(argv: Optional[list] = None) -> None:
    parser = argparse.ArgumentParser(description="初始化 lti_link 表并登记链接")
    parser.add_argument("link_ids", nargs="*", help="需要登记的 link_id")
    parser.add_argument("--keep", action="store_true", help="保留现有数据库文件")
    parser.add_argument("--remove", action="append", default=[], metavar="LINK_ID", help="删除指定链接及其设置，可重复")
    args = parser.parse_args(argv)
    reset_database(args.link_ids, keep_existing=args.keep, remove_ids=args.remove)


if __name__ == "__main__":
    main()
