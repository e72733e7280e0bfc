from typing import Any, Dict, Tuple

from fastapi import Request, Response

from auth import (
    MAX_SESSION_TOKEN_LENGTH,
    SessionManager,
    get_lti_session_required_from_cookie,
    set_session_cookie,
)
from database import LinkSettingsDB
from .context import logger
from .services.link_settings import (
    LaunchCustomSource,
    LinkContext,
    LinkSettingsStore,
    SessionCache,
)


def build_link_settings_store(lti: Dict[str, Any]) -> Tuple[LinkSettingsStore, SessionCache]:
    """根据会话中的 lti 字典组装设置服务。"""
    cache = SessionCache(lti)
    store = LinkSettingsStore(
        LinkContext(link_id=lti["link_id"], store=LinkSettingsDB()),
        LaunchCustomSource(lti.get("custom")),
        session=cache,
    )
    return store, cache


def require_link_settings(request: Request) -> Tuple[Dict[str, Any], LinkSettingsStore, SessionCache]:
    """Ensure the requester has an LTI session and return (lti, store, cache)."""
    lti = get_lti_session_required_from_cookie(request)
    store, cache = build_link_settings_store(lti)
    return lti, store, cache


def persist_session(response: Response, lti: Dict[str, Any], cache: SessionCache) -> None:
    """会话缓存有变动时重新签发 Cookie。"""
    if not cache.dirty:
        return
    token = SessionManager.reissue(lti)
    if len(token) > MAX_SESSION_TOKEN_LENGTH:
        logger.warning(
            f"链接 {lti['link_id']} 会话令牌长度 {len(token)} 超过上限 {MAX_SESSION_TOKEN_LENGTH}，本次不缓存设置"
        )
        lti.pop("link_settings", None)
        token = SessionManager.reissue(lti)
    set_session_cookie(response, token)
    logger.debug(f"链接 {lti['link_id']} 会话缓存已更新")
