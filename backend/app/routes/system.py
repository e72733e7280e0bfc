from fastapi import APIRouter, Response

from auth import clear_session_cookie, success_response


router = APIRouter()


@router.get("/healthz")
async def health_check():
    """健康检查。"""
    return success_response("服务运行正常")


@router.delete("/lti/session")
async def end_session(response: Response):
    """结束当前会话，会话缓存随 Cookie 一起失效。"""
    clear_session_cookie(response)
    return success_response("会话已结束")
