"""
具体 Adapter 实现。

新增数据源：在此文件添加一个类，然后在 factory.py 注册即可。

已注册数据源：
  metform — MetformAdapter  (WordPress Metform，字段包在 entries 里)
"""

from .base import BaseIntakeAdapter


# ── MetformAdapter ─────────────────────────────────────────────────────────
#
# 外部格式示例（JSON 或表单编码）:
# {
#   "form_id":   "1234",
#   "form_name": "Lab Test Booking",
#   "entry_id":  "5678",
#   "entries": {
#     "mf-patient-name":       "Jane Doe",
#     "mf-patient-dob":        "1985-03-20",
#     "mf-patient-phone":      "555-0100",
#     "mf-select-date":        "2025-02-10",
#     "mf-available-slots":    "09:20",
#     "mf-tests-selection":    "hemoglobin-a1c-$29, lipid-panel-cholesterol-$29",
#     "mf-test-category-name": "medical-testing-and-panels"
#   },
#   "webhook_secret": "..."
# }
#
# 字段名完全取决于表单构建器里的配置，默认候选表已覆盖 mf-* 前缀。

class MetformAdapter(BaseIntakeAdapter):
    source = 'metform'
