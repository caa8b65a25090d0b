"""
InternalSubmission dataclass — 业务逻辑唯一认识的标准格式。

所有 Adapter 的 transform() 必须返回这个结构。
业务层（services.py）只消费这个结构，永远不碰外部原始数据。
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Optional


@dataclass
class SubmissionFields:
    """从表单里抽出来的逻辑字段。除 test_names 外全部可选。"""

    patient_name: Optional[str] = None
    patient_dob: Optional[date] = None
    patient_phone: Optional[str] = None
    patient_secondary_phone: Optional[str] = None
    patient_address: Optional[str] = None
    physician_name: Optional[str] = None
    clinic_address: Optional[str] = None
    schedule_date: Optional[date] = None
    schedule_time: Optional[str] = None        # TIME_SLOTS 之一
    date_of_order: Optional[date] = None
    test_names: list[str] = field(default_factory=list)
    category_hint: Optional[str] = None


@dataclass
class InternalSubmission:
    """
    标准内部提交格式。

    external_id  发送方的 entry id，订单 upsert 的幂等键。
    raw_payload  保存原始数据（dict），用于排查问题，不参与业务逻辑。
    source       标识数据来源（"metform" / ...）。
    """

    fields: SubmissionFields
    external_id: str
    form_slug: str = 'unknown-form'
    form_name: Optional[str] = None
    source: str = ''
    raw_payload: Any = field(default=None, repr=False)
