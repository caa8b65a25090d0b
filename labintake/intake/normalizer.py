"""
Payload Normalizer：任意请求体 → 规范的 key → value dict。

支持两种编码：
  - application/json                 （必须是 JSON object）
  - application/x-www-form-urlencoded / multipart/form-data

按 Content-Type 先试对应的解码，失败再试另一种；两种都失败才抛 MalformedPayload。
其他 Content-Type（xml / text / ...）直接拒绝。

表单编码里 WordPress/PHP 风格的 key 会被还原成结构：
  entries[mf-patient-name]=Jane   → {"entries": {"mf-patient-name": "Jane"}}
  mf-tests[]=A&mf-tests[]=B       → {"mf-tests": ["A", "B"]}
"""

import json
import re
from typing import Any, Optional
from urllib.parse import parse_qsl

from ..exceptions import MalformedPayload

JSON_TYPES = ('application/json',)
FORM_TYPES = ('application/x-www-form-urlencoded', 'multipart/form-data')

# webhook 协议自身的顶层字段，不算表单字段
META_KEYS = frozenset({'entries', 'form_id', 'form_name', 'entry_id', 'webhook_secret', 'file_uploads'})

_BRACKET_KEY_RE = re.compile(r'^([^\[\]]+)((?:\[[^\[\]]*\])+)$')
_BRACKET_PART_RE = re.compile(r'\[([^\[\]]*)\]')


def _media_type(content_type: str) -> str:
    return (content_type or '').split(';', 1)[0].strip().lower()


def _decode_text(raw_body) -> str:
    if isinstance(raw_body, bytes):
        return raw_body.decode('utf-8-sig')
    return raw_body or ''


def _split_key(key: str) -> list[str]:
    match = _BRACKET_KEY_RE.match(key)
    if not match:
        return [key]
    return [match.group(1)] + _BRACKET_PART_RE.findall(match.group(2))


def _assign(target: dict, key: str, values: list) -> None:
    parts = _split_key(key.strip())
    as_list = len(parts) > 1 and parts[-1] == ''
    if as_list:
        parts = parts[:-1]

    node = target
    for part in parts[:-1]:
        child = node.get(part)
        if not isinstance(child, dict):
            child = node[part] = {}
        node = child

    leaf = parts[-1]
    if as_list:
        existing = node.get(leaf)
        node[leaf] = (existing if isinstance(existing, list) else []) + list(values)
    else:
        node[leaf] = values[0] if len(values) == 1 else list(values)


def _unwrap_entries(payload: dict) -> dict:
    # 有的发送方把 entries 编成 JSON 字符串塞进表单
    entries = payload.get('entries')
    if isinstance(entries, str) and entries.strip().startswith('{'):
        try:
            decoded = json.loads(entries)
        except ValueError:
            return payload
        if isinstance(decoded, dict):
            payload['entries'] = decoded
    return payload


def _reject_constant(token):
    # NaN / Infinity 不是标准 JSON，JSON 列存不进去
    raise ValueError(f"Non-standard JSON constant: {token}")


def _ensure_storable(value) -> None:
    """PostgreSQL jsonb 不接受字符串里的 \\u0000。"""
    if isinstance(value, str):
        if '\x00' in value:
            raise ValueError('NUL character in payload')
    elif isinstance(value, dict):
        for key, item in value.items():
            _ensure_storable(key)
            _ensure_storable(item)
    elif isinstance(value, list):
        for item in value:
            _ensure_storable(item)


def decode_json(raw_body) -> dict:
    data = json.loads(_decode_text(raw_body), parse_constant=_reject_constant)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return {str(k).strip(): v for k, v in data.items()}


def decode_form(raw_body, form=None) -> dict:
    """
    form: Django 已解析好的 QueryDict（multipart 只能靠它）。
    没有时按 urlencoded 严格解析 raw_body。
    """
    result: dict[str, Any] = {}
    if form is not None:
        for key in form.keys():
            _assign(result, key, form.getlist(key))
        return result

    pairs = [segment for segment in _decode_text(raw_body).strip().split('&') if segment]
    bad = [segment for segment in pairs if '=' not in segment]
    if not pairs or bad:
        raise ValueError(f"Not form-encoded data: {bad[:3]!r}")

    grouped: dict[str, list] = {}
    for key, value in parse_qsl('&'.join(pairs), keep_blank_values=True):
        grouped.setdefault(key, []).append(value)
    for key, values in grouped.items():
        _assign(result, key, values)
    return result


def normalize_payload(raw_body, content_type: str = '', form=None) -> dict:
    """
    Raises:
        MalformedPayload: 不支持的 Content-Type，空 body，或两种解码都失败
    """
    media_type = _media_type(content_type)
    if media_type and media_type not in JSON_TYPES + FORM_TYPES:
        raise MalformedPayload(
            f"Unsupported content type: {media_type!r}",
            detail={'content_type': media_type},
        )

    has_form = form is not None and len(form) > 0
    try:
        text = _decode_text(raw_body)
    except UnicodeDecodeError as exc:
        if not has_form:
            raise MalformedPayload(f"Request body is not valid UTF-8: {exc}") from exc
        text = ''
    if not text.strip() and not has_form:
        raise MalformedPayload("Empty request body")

    if media_type in FORM_TYPES:
        decoders = (lambda: decode_form(text, form), lambda: decode_json(text))
    else:
        decoders = (lambda: decode_json(text), lambda: decode_form(text, form))

    errors = []
    for decoder in decoders:
        try:
            payload = _unwrap_entries(decoder())
            _ensure_storable(payload)
            return payload
        except ValueError as exc:
            errors.append(str(exc))

    raise MalformedPayload(
        "Request body is neither a JSON object nor form-encoded data",
        detail={'errors': errors},
    )


def merge_form_fields(payload: dict) -> dict:
    """
    把 entries 和其余顶层字段合并成一个平铺的表单字段 dict。
    key 冲突时 entries 里的值优先。
    """
    extras = {k: v for k, v in payload.items() if k not in META_KEYS}
    entries = payload.get('entries')
    if isinstance(entries, dict):
        extras.update(entries)
    return extras


def find_secret(payload: dict, field_name: str) -> Optional[str]:
    """payload 里携带的 secret：先看顶层，再看 entries。"""
    for container in (payload, payload.get('entries')):
        if isinstance(container, dict):
            value = container.get(field_name)
            if isinstance(value, str) and value:
                return value
    return None
