from contextlib import asynccontextmanager

from fastapi import FastAPI

from config import get_settings
from database import DB_PATH, LinkDB, init_database, link_table
from .context import logger


settings = get_settings()


def log_configuration_snapshot() -> None:
    """启动时记录当前生效的存储与比较配置。"""
    try:
        link_count = len(LinkDB.list_links())
    except Exception as exc:
        logger.warning(f"统计链接数量失败: {exc}")
        link_count = -1
    logger.info(
        "存储配置: 数据库=%s, 表=%s, 已登记链接=%s, 比较模式=%s",
        DB_PATH,
        link_table(),
        link_count,
        settings.compare_mode,
    )


def run_startup_tasks() -> None:
    """应用启动时初始化数据库。"""
    logger.info("正在启动 LTI 链接设置服务...")
    init_database()
    log_configuration_snapshot()
    logger.info("LTI 链接设置服务启动完成")


@asynccontextmanager
async def app_lifespan(app: FastAPI):
    run_startup_tasks()
    yield
    logger.info("LTI 链接设置服务已停止")
