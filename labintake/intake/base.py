"""
BaseIntakeAdapter — 所有 webhook 数据源 Adapter 的基类。

每个新数据源只需：
1. 继承 BaseIntakeAdapter
2. 声明 source 和 DEFAULT_CANDIDATES（或者直接用默认表）
3. 在 factory.py 的 _REGISTRY 注册一行

业务代码无需任何改动。
"""

import re
import time
from typing import Any, Mapping, Optional

from django.conf import settings

from .fields import FieldMap, extract_fields
from .normalizer import merge_form_fields
from .schema import validate_payload
from .types import InternalSubmission

_SLUG_STRIP_RE = re.compile(r'[^a-z0-9\-_]')
_DASH_RUN_RE = re.compile(r'-+')


def normalize_form_slug(raw) -> str:
    """form_id / form_name → "contact-form-7"；空值 → "unknown-form"。"""
    if raw is None or raw == '':
        return 'unknown-form'
    slug = _SLUG_STRIP_RE.sub('-', str(raw).lower())
    slug = _DASH_RUN_RE.sub('-', slug).strip('-')
    return slug or 'unknown-form'


class BaseIntakeAdapter:
    """
    两步流水线：validate → transform

    payload 在进入 Adapter 之前已经由 normalize_payload() 解码，
    并且已经写进 webhook_logs；Adapter 只做结构校验和字段抽取。
    """

    # 子类声明自己对应的 source 标识符（与 factory 注册键一致）
    source: str = ''

    # 子类可覆盖：该数据源特有的候选 key（会被 settings.INTAKE_FIELD_MAPS 再覆盖一次）
    DEFAULT_CANDIDATES: Mapping[str, Any] = {}

    def __init__(self, payload: dict):
        self._payload = payload
        self._validated: Optional[dict] = None

    @property
    def field_map(self) -> FieldMap:
        overrides = dict(self.DEFAULT_CANDIDATES)
        overrides.update(getattr(settings, 'INTAKE_FIELD_MAPS', {}).get(self.source, {}))
        return FieldMap.with_overrides(overrides)

    def validate(self) -> dict:
        """
        顶层结构校验。

        Raises:
            SchemaInvalid
        """
        self._validated = validate_payload(self._payload)
        return self._validated

    def external_id(self) -> str:
        entry_id = self._validated.get('entry_id') if self._validated else None
        if entry_id is None or entry_id == '':
            return f"wp-{int(time.time() * 1000)}"
        return str(entry_id)

    def transform(self) -> InternalSubmission:
        """把已校验的 payload 转成 InternalSubmission。必须先 validate()。"""
        validated = self._validated if self._validated is not None else self.validate()
        form_fields = merge_form_fields(self._payload)

        form_name = validated.get('form_name') or None
        return InternalSubmission(
            fields=extract_fields(form_fields, self.field_map),
            external_id=self.external_id(),
            form_slug=normalize_form_slug(validated.get('form_id') or form_name),
            form_name=form_name,
            source=self.source,
            raw_payload=self._payload,
        )

    def process(self) -> InternalSubmission:
        """validate → transform，返回 InternalSubmission。"""
        self.validate()
        return self.transform()
