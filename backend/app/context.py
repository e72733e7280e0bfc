import logging
from typing import List, Tuple

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings


settings = get_settings()

# Logging configuration
log_level = settings.log_level.upper()
logging.basicConfig(
    level=getattr(logging, log_level, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

auth_logger = logging.getLogger("auth")
auth_logger.setLevel(getattr(logging, log_level, logging.INFO))

logger = logging.getLogger(__name__)

# CORS configuration
ALLOWED_ORIGINS = settings.allowed_origins
ALLOW_ALL_ORIGINS = "*" in ALLOWED_ORIGINS


def _cors_config() -> Tuple[List[str], bool]:
    allow_origins = ["*"] if ALLOW_ALL_ORIGINS else ALLOWED_ORIGINS
    allow_credentials = not ALLOW_ALL_ORIGINS
    if ALLOW_ALL_ORIGINS and not allow_credentials:
        logger.warning("检测到通配符跨域设置，已禁用凭据共享以符合CORS规范。")
    return allow_origins, allow_credentials


def apply_cors(app: FastAPI) -> Tuple[List[str], bool]:
    allow_origins, allow_credentials = _cors_config()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials=allow_credentials,
        allow_methods=["GET", "PUT", "PATCH", "OPTIONS"],
        allow_headers=["*"],
    )
    return allow_origins, allow_credentials


def create_app(*, lifespan=None) -> FastAPI:
    app = FastAPI(
        title="LTI Link Settings API",
        description="LTI 工具链接级设置服务",
        version="1.0.0",
        lifespan=lifespan,
    )
    apply_cors(app)
    return app
