"""
Field Extractor：按「每个逻辑字段一张有序候选 key 列表」从表单里取值。

发送方的字段名是运营在表单构建器里随手配的，不是协议的一部分，
所以 key 列表是数据（可以通过 settings.INTAKE_FIELD_MAPS 覆盖），
取值逻辑固定：第一个非空、非纯空白的字符串胜出。
"""

import logging
import re
from dataclasses import dataclass, fields as dataclass_fields
from datetime import date, datetime
from typing import Any, Mapping, Optional

from .types import SubmissionFields

logger = logging.getLogger(__name__)

# ── 默认候选 key 表 ─────────────────────────────────────────────────────────
# 新表单字段名不需要改代码：在 INTAKE_FIELD_MAPS 里按 source 覆盖即可。

DEFAULT_FIELD_CANDIDATES: dict[str, tuple[str, ...]] = {
    'patient_name': (
        'mf-patient-name', 'patient_name', 'patient-name',
        'full_name', 'name', 'mf-name',
    ),
    'patient_dob': (
        'mf-patient-dob', 'patient_dob', 'patient-dob',
        'date_of_birth', 'dob', 'mf-dob', 'patient_date_of_birth',
    ),
    'patient_phone': (
        'mf-patient-phone', 'patient_phone', 'patient-phone',
        'contact_number', 'phone', 'mf-phone', 'patient_contact_number',
    ),
    'patient_secondary_phone': (
        'secondary_phone', 'secondary-phone', 'alt_phone',
        'patient_secondary_phone', 'mf-secondary-phone',
    ),
    'patient_address': (
        'patient_address', 'patient-address', 'address',
        'mf-address', 'full_address',
    ),
    'physician_name': (
        'mf-physician-name', 'physician_name', 'physician-name',
        'doctor_name', 'doctor', 'mf-doctor-name',
    ),
    'clinic_address': (
        'mf-clinic-address', 'clinic_address', 'clinic-address',
        'clinic', 'mf-clinic',
    ),
    'schedule_date': (
        'mf-select-date', 'schedule_date', 'schedule-date',
        'appointment_date', 'mf-schedule-date', 'date',
    ),
    'schedule_time': (
        'mf-available-slots', 'schedule_time', 'schedule-time',
        'appointment_time', 'mf-schedule-time', 'time', 'time_slot',
    ),
    'date_of_order': (
        'mf-date-of-order', 'date_of_order', 'date-of-order',
        'order_date',
    ),
    'test_names': (
        'mf-tests-selection', 'tests', 'selected_tests',
        'mf-tests', 'test_names',
    ),
    'category_hint': (
        'mf-test-category-name', 'category', 'test_category',
    ),
}

DATE_FIELDS = ('patient_dob', 'schedule_date', 'date_of_order')

_TIME_RE = re.compile(r'^(?P<hour>\d{1,2}):(?P<minute>\d{2})(?:\s*(?P<ampm>[ap])\.?m\.?)?$', re.IGNORECASE)


@dataclass(frozen=True)
class FieldMap:
    """逻辑字段 → 有序候选 key。"""

    candidates: Mapping[str, tuple[str, ...]]

    @classmethod
    def with_overrides(cls, overrides: Optional[Mapping[str, Any]] = None) -> 'FieldMap':
        """
        用 overrides 替换指定字段的候选列表，其余字段保持默认。
        未知的逻辑字段名忽略并记 warning。
        """
        candidates = dict(DEFAULT_FIELD_CANDIDATES)
        for name, keys in (overrides or {}).items():
            if name not in candidates:
                logger.warning("Ignoring field map override for unknown field %r", name)
                continue
            if isinstance(keys, str):
                keys = [keys]
            candidates[name] = tuple(str(k) for k in keys)
        return cls(candidates=candidates)

    def keys_for(self, name: str) -> tuple[str, ...]:
        return self.candidates.get(name, ())


# ── value helpers ─────────────────────────────────────────────────────────

def first_text(form: Mapping[str, Any], keys) -> Optional[str]:
    for key in keys:
        value = form.get(key)
        if isinstance(value, str) and value.strip():
            return value.strip()
    return None


def split_test_names(raw: Any) -> list[str]:
    """
    三种形态：
      "A, B ,C"      → ["A", "B", "C"]
      ["A", 2, ""]   → ["A", "2"]
      None / 其他     → []
    """
    if isinstance(raw, str):
        return [name.strip() for name in raw.split(',') if name.strip()]
    if isinstance(raw, (list, tuple)):
        return [str(name).strip() for name in raw if name is not None and str(name).strip()]
    return []


def parse_date(raw: Optional[str]) -> Optional[date]:
    """
    支持 "YYYY-MM-DD"、"YYYYMMDD"、"MM/DD/YYYY"。
    无法识别返回 None（字段缺失不是错误）。
    """
    if not raw:
        return None
    value = raw.strip()
    if len(value) == 8 and value.isdigit():
        value = f"{value[:4]}-{value[4:6]}-{value[6:]}"
    for fmt in ('%Y-%m-%d', '%m/%d/%Y'):
        try:
            return datetime.strptime(value, fmt).date()
        except ValueError:
            continue
    return None


def parse_time_slot(raw: Optional[str]) -> Optional[str]:
    """
    "9:20 AM" / "09:20" / "2:40 pm" → "HH:MM"；不在 TIME_SLOTS 里返回 None。
    """
    from ..models import TIME_SLOTS

    if not raw:
        return None
    match = _TIME_RE.match(raw.strip())
    if not match:
        return None
    hour, minute = int(match.group('hour')), int(match.group('minute'))
    ampm = (match.group('ampm') or '').lower()
    if ampm == 'p' and hour < 12:
        hour += 12
    elif ampm == 'a' and hour == 12:
        hour = 0
    slot = f"{hour:02d}:{minute:02d}"
    return slot if slot in TIME_SLOTS else None


def extract_fields(form: Mapping[str, Any], field_map: Optional[FieldMap] = None) -> SubmissionFields:
    """
    从平铺的表单 dict 里解析出所有逻辑字段。任何字段缺失都不是错误。
    """
    field_map = field_map or FieldMap.with_overrides()
    values: dict[str, Any] = {}

    for f in dataclass_fields(SubmissionFields):
        if f.name == 'test_names':
            continue
        values[f.name] = first_text(form, field_map.keys_for(f.name))

    test_raw = None
    for key in field_map.keys_for('test_names'):
        if form.get(key):
            test_raw = form[key]
            break
    values['test_names'] = split_test_names(test_raw)

    for name in DATE_FIELDS:
        raw = values[name]
        values[name] = parse_date(raw)
        if raw and values[name] is None:
            logger.warning("Unparseable %s %r, storing null", name, raw)

    raw_time = values['schedule_time']
    values['schedule_time'] = parse_time_slot(raw_time)
    if raw_time and values['schedule_time'] is None:
        logger.warning("Schedule time %r is not a valid slot, storing null", raw_time)

    return SubmissionFields(**values)
