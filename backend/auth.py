# /backend/auth.py
import jwt
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from fastapi import HTTPException, Request, Response

from config import get_settings

settings = get_settings()

SESSION_COOKIE_NAME = "lti_session"
SESSION_TOKEN_TYPE = "lti"
# 浏览器单个 Cookie 上限约 4KB，需给名称与属性留出余量
MAX_SESSION_TOKEN_LENGTH = 3800

logger = logging.getLogger(__name__)


class SessionManager:
    """LTI 会话令牌管理器

    启动流程结束后，会话以签名 JWT 的形式存放在 Cookie 中，载荷即会话里的
    lti 字典：link_id、custom（启动时的 custom 参数）以及可选的 link_settings
    缓存。
    """

    @staticmethod
    def create_session_token(
        link_id: str,
        custom: Optional[Dict[str, Any]] = None,
        link_settings: Optional[str] = None,
    ) -> str:
        """创建会话令牌"""
        to_encode: Dict[str, Any] = {
            "type": SESSION_TOKEN_TYPE,
            "link_id": str(link_id),
            "custom": dict(custom or {}),
        }
        if link_settings is not None:
            to_encode["link_settings"] = link_settings
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.session_expire_hours)
        to_encode.update({"exp": expire})
        return jwt.encode(to_encode, settings.session_secret_key, algorithm=settings.session_algorithm)

    @staticmethod
    def verify_token(token: str) -> Optional[Dict[str, Any]]:
        """验证会话令牌"""
        try:
            return jwt.decode(token, settings.session_secret_key, algorithms=[settings.session_algorithm])
        except jwt.ExpiredSignatureError:
            logger.warning("会话令牌已过期")
            return None
        except jwt.PyJWTError as e:
            logger.warning(f"会话令牌验证失败: {e}")
            return None

    @staticmethod
    def reissue(lti: Dict[str, Any]) -> str:
        """根据（可能已被修改的）lti 字典重新签发令牌"""
        return SessionManager.create_session_token(
            lti["link_id"],
            custom=lti.get("custom"),
            link_settings=lti.get("link_settings"),
        )


def get_token_from_request(request: Request) -> Optional[str]:
    """优先从Cookie获取令牌，其次是 Authorization 头"""
    token = request.cookies.get(SESSION_COOKIE_NAME)
    if token:
        return token
    header = request.headers.get("Authorization") or ""
    scheme, _, credentials = header.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials.strip()
    return None


def get_lti_session_from_cookie(request: Request) -> Optional[Dict[str, Any]]:
    """从Cookie获取当前 LTI 会话"""
    token = get_token_from_request(request)
    if not token:
        return None

    payload = SessionManager.verify_token(token)
    if not payload or payload.get("type") != SESSION_TOKEN_TYPE or not payload.get("link_id"):
        return None

    lti: Dict[str, Any] = {
        "link_id": str(payload["link_id"]),
        "custom": payload.get("custom") or {},
    }
    if payload.get("link_settings") is not None:
        lti["link_settings"] = payload["link_settings"]
    return lti


def get_lti_session_required_from_cookie(request: Request) -> Dict[str, Any]:
    """从Cookie获取当前 LTI 会话（必需）"""
    lti = get_lti_session_from_cookie(request)
    if not lti:
        raise HTTPException(status_code=401, detail="需要有效的 LTI 会话")
    return lti


def set_session_cookie(response: Response, token: str):
    """设置会话Cookie"""
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=settings.session_expire_hours * 60 * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="none" if settings.session_cookie_secure else "lax",
    )


def clear_session_cookie(response: Response):
    """清除会话Cookie"""
    response.delete_cookie(key=SESSION_COOKIE_NAME)


# 统一响应格式
def success_response(message: str = "操作成功", data: Any = None) -> Dict[str, Any]:
    """成功响应"""
    return {
        "success": True,
        "message": message,
        "data": data or {},
        "code": 200
    }

def error_response(message: str, code: int = 400, details: Any = None) -> Dict[str, Any]:
    """错误响应"""
    response = {
        "success": False,
        "message": message,
        "code": code,
        "data": {}
    }
    if details:
        response["details"] = details
    return response
