from typing import Any, Dict, Optional

from fastapi import APIRouter, Request, Response

from auth import error_response, success_response
from ..context import logger
from ..dependencies import persist_session, require_link_settings


router = APIRouter()


async def _read_object_body(request: Request) -> Optional[Dict[str, Any]]:
    try:
        body = await request.json()
    except ValueError:
        return None
    return body if isinstance(body, dict) else None


@router.get("/lti/settings")
async def get_link_settings(request: Request, response: Response):
    """获取当前链接的全部设置。"""
    lti, store, cache = require_link_settings(request)
    try:
        all_settings = store.get_all()
        persist_session(response, lti, cache)
        return success_response("获取链接设置成功", {"link_id": lti["link_id"], "settings": all_settings})
    except Exception as exc:
        logger.error(f"获取链接设置失败: {exc}")
        return error_response("获取链接设置失败", 500)


@router.get("/lti/settings/{key}")
async def get_link_setting(key: str, request: Request, response: Response):
    """获取当前链接的单个设置。"""
    lti, store, cache = require_link_settings(request)
    try:
        lookup = store.get(key)
        persist_session(response, lti, cache)
    except Exception as exc:
        logger.error(f"获取链接设置 {key} 失败: {exc}")
        return error_response("获取链接设置失败", 500)
    if not lookup.found:
        return error_response(f"设置项不存在: {key}", 404)
    return success_response("获取链接设置成功", {"key": key, "value": lookup.value})


@router.put("/lti/settings")
async def replace_link_settings(request: Request, response: Response):
    """整体替换当前链接的设置，空对象会清空全部设置。"""
    lti, store, cache = require_link_settings(request)
    body = await _read_object_body(request)
    if body is None:
        return error_response("请求体必须是 JSON 对象", 400)
    try:
        store.set_all(body)
        persist_session(response, lti, cache)
        return success_response("链接设置已保存", {"link_id": lti["link_id"], "settings": body})
    except Exception as exc:
        logger.error(f"保存链接设置失败: {exc}")
        return error_response("保存链接设置失败", 500)


@router.patch("/lti/settings")
async def update_link_settings(request: Request, response: Response):
    """更新部分设置，值无变化时不写库。"""
    lti, store, cache = require_link_settings(request)
    body = await _read_object_body(request)
    if body is None:
        return error_response("请求体必须是 JSON 对象", 400)
    try:
        changed = store.set(body)
        persist_session(response, lti, cache)
        return success_response(
            "链接设置已更新" if changed else "链接设置无变化",
            {"link_id": lti["link_id"], "changed": changed},
        )
    except Exception as exc:
        logger.error(f"更新链接设置失败: {exc}")
        return error_response("更新链接设置失败", 500)
