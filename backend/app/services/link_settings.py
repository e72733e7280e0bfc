"""链接级设置的读写服务。

设置以 JSON 文本存放在 lti_link.settings 列中，读取时会把旧版 LTI 1.x
自定义参数作为默认值垫在下面，使 LMS 控制的 custom 参数逐步迁移为工具
自己管理的设置。会话存在时，最近一次读到或写入的 JSON 文本缓存在会话里。
"""

import json
from dataclasses import dataclass
from typing import Any, Dict, Mapping, MutableMapping, Optional

from config import get_settings
from database import LinkSettingsDB
from ..context import logger
from ..utils import get_comparator


# 'due' 在旧列表中出现两次，字典里只会保留一个
LEGACY_FIELDS = ("dologin", "close", "due", "due", "timezone", "period", "cost")

SESSION_SETTINGS_KEY = "link_settings"


@dataclass(frozen=True)
class LinkContext:
    link_id: str
    store: LinkSettingsDB


@dataclass(frozen=True)
class SettingLookup:
    """get() 的结果，区分“不存在”和存储的 false/null。"""

    found: bool
    value: Any = None

    @classmethod
    def missing(cls) -> "SettingLookup":
        return cls(found=False)

    def unwrap(self, default: Any = None) -> Any:
        return self.value if self.found else default


class SessionCache:
    """会话中 lti 字典里的单个设置缓存槽。"""

    def __init__(self, lti: MutableMapping[str, Any]):
        self._lti = lti
        self.dirty = False

    def get(self) -> Optional[str]:
        return self._lti.get(SESSION_SETTINGS_KEY)

    def put(self, json_text: str) -> None:
        self._lti[SESSION_SETTINGS_KEY] = json_text
        self.dirty = True


class LaunchCustomSource:
    """从启动参数中读取旧版 custom 参数。"""

    def __init__(self, params: Optional[Mapping[str, Any]] = None):
        self._params = dict(params or {})

    def get_custom(self, name: str) -> Any:
        key = f"custom_{name}"
        if key in self._params:
            return self._params[key]
        return self._params.get(name)


class LinkSettingsStore:
    def __init__(
        self,
        link: LinkContext,
        custom: LaunchCustomSource,
        session: Optional[SessionCache] = None,
        compare_mode: Optional[str] = None,
    ):
        self.link = link
        self.custom = custom
        self.session = session
        self._equals = get_comparator(compare_mode or get_settings().compare_mode)

    def legacy_defaults(self) -> Dict[str, Any]:
        return {name: self.custom.get_custom(name) for name in LEGACY_FIELDS}

    def get_all(self) -> Dict[str, Any]:
        """返回全部链接设置。

        会话缓存命中时直接返回缓存内容，不合并旧版默认值；否则从数据库读取，
        与默认值合并后返回（已存设置优先）。没有行或 settings 为 NULL 时只返回
        默认值。JSON 损坏时抛出 json.JSONDecodeError。
        """
        defaults = self.legacy_defaults()

        if self.session is not None:
            cached = self.session.get()
            if cached is not None:
                logger.debug(f"链接 {self.link.link_id} 设置命中会话缓存")
                return _decode(cached)

        row = self.link.store.fetch_settings(self.link.link_id)
        if row is None:
            return defaults
        json_text = row[0]
        if json_text is None:
            return defaults
        stored = _decode(json_text)

        if self.session is not None:
            self.session.put(json_text)
        return {**defaults, **stored}

    def get(self, key: str) -> SettingLookup:
        all_settings = self.get_all()
        if key in all_settings:
            return SettingLookup(found=True, value=all_settings[key])
        return SettingLookup.missing()

    def set_all(self, keyvals: Mapping[str, Any]) -> None:
        """整体替换链接设置；传入空字典会清空所有已存设置（存为 "{}"）。"""
        json_text = json.dumps(dict(keyvals))
        self.link.store.update_settings(self.link.link_id, json_text)
        logger.info(f"链接 {self.link.link_id} 设置已保存，共 {len(keyvals)} 项")
        if self.session is not None:
            self.session.put(json_text)

    def set(self, keyvals: Mapping[str, Any]) -> bool:
        """更新部分键，只有存在差异时才写库。返回是否发生写入。"""
        all_settings = self.get_all()
        different = False
        for key, value in keyvals.items():
            if key not in all_settings or not self._equals(value, all_settings[key]):
                different = True
                break
        if not different:
            logger.debug(f"链接 {self.link.link_id} 设置无变化，跳过写入")
            return False
        self.set_all({**all_settings, **keyvals})
        return True


def _decode(json_text: str) -> Dict[str, Any]:
    value = json.loads(json_text)
    if isinstance(value, dict):
        return value
    if isinstance(value, list):
        # 旧数据里空设置被存成 "[]"
        return {str(index): item for index, item in enumerate(value)}
    raise ValueError(f"link settings must be a JSON object, got {type(value).__name__}")


__all__ = [
    "LEGACY_FIELDS",
    "LaunchCustomSource",
    "LinkContext",
    "LinkSettingsStore",
    "SessionCache",
    "SettingLookup",
]
