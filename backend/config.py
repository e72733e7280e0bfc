"""Centralised environment-driven settings for the backend."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List

from dotenv import load_dotenv


BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent

# Ensure variables from .env are loaded before anything else reads from os.environ
_env_candidates: Iterable[Path] = (
    PROJECT_ROOT / ".env",
    BASE_DIR / ".env",
)
for candidate in _env_candidates:
    if candidate.exists():
        load_dotenv(dotenv_path=candidate, override=False)
load_dotenv(override=False)

COMPARE_MODES = ("loose", "strict")
_PREFIX_PATTERN = re.compile(r"^[A-Za-z0-9_]*$")


def _split_csv(value: str | None) -> List[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _as_int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


def _as_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _normalize_env(value: str | None) -> str:
    if not value:
        return "production"
    cleaned = value.strip().lower()
    if cleaned == "devlopment":  # tolerate typo from configuration guidance
        cleaned = "development"
    return cleaned


@dataclass(frozen=True)
class Settings:
    env: str
    is_development: bool
    backend_host: str
    backend_port: int
    log_level: str
    db_path: Path
    db_reset: bool
    db_prefix: str
    session_secret_key: str
    session_algorithm: str
    session_expire_hours: int
    session_cookie_secure: bool
    allowed_origins: List[str]
    compare_mode: str


@lru_cache()
def get_settings() -> Settings:
    env_value = _normalize_env(os.getenv("ENV"))
    is_development = env_value == "development"

    backend_host = os.getenv("DEV_BACKEND_HOST") if is_development else os.getenv("BACKEND_HOST")
    backend_host = (backend_host or "0.0.0.0").strip()

    backend_port = _as_int(os.getenv("BACKEND_PORT"), 9099)
    dev_port = _as_int(os.getenv("DEV_BACKEND_PORT"), backend_port)
    port = dev_port if is_development else backend_port

    log_level_key = "DEV_LOG_LEVEL" if is_development else "LOG_LEVEL"
    log_level = (os.getenv(log_level_key) or os.getenv("LOG_LEVEL") or "INFO").upper()

    db_path_value = os.getenv("DB_PATH", "lti_settings.db").strip()
    db_path = Path(db_path_value)
    if not db_path.is_absolute():
        db_path = BASE_DIR / db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)

    db_reset = _as_bool(os.getenv("DB_RESET"), False)

    # 表名前缀会被拼进 SQL，只允许标识符字符
    db_prefix = (os.getenv("DB_PREFIX") or "").strip()
    if not _PREFIX_PATTERN.match(db_prefix):
        raise RuntimeError(f"DB_PREFIX contains invalid characters: {db_prefix!r}")

    session_secret = os.getenv("SESSION_SECRET_KEY")
    if not session_secret:
        import secrets

        session_secret = secrets.token_hex(32)

    session_algorithm = os.getenv("SESSION_ALGORITHM", "HS256").strip() or "HS256"
    session_hours = _as_int(os.getenv("SESSION_EXPIRE_HOURS"), 12)
    cookie_secure = _as_bool(os.getenv("SESSION_COOKIE_SECURE"), not is_development)

    allowed_origins = _split_csv(os.getenv("ALLOWED_ORIGINS"))
    if not allowed_origins:
        allowed_origins = ["*"]

    compare_mode = (os.getenv("SETTINGS_COMPARE_MODE") or "loose").strip().lower()
    if compare_mode not in COMPARE_MODES:
        raise RuntimeError(
            f"SETTINGS_COMPARE_MODE must be one of {', '.join(COMPARE_MODES)}, got {compare_mode!r}"
        )

    return Settings(
        env=env_value,
        is_development=is_development,
        backend_host=backend_host,
        backend_port=port,
        log_level=log_level,
        db_path=db_path,
        db_reset=db_reset,
        db_prefix=db_prefix,
        session_secret_key=session_secret,
        session_algorithm=session_algorithm,
        session_expire_hours=session_hours,
        session_cookie_secure=cookie_secure,
        allowed_origins=allowed_origins,
        compare_mode=compare_mode,
    )


__all__ = ["COMPARE_MODES", "Settings", "get_settings"]
