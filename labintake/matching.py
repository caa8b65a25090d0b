"""
检测项目名称匹配。

canonical_key() 同时用于：
  1. CatalogEntry.save() 生成 search_name
  2. webhook 里的自由文本检测名

两边用同一个函数，所以 "Lipid Panel (Cholesterol)" 和
"lipid-panel-cholesterol-$29" 会得到同一个 key。

TestResolver 是一条固定顺序的优先级链，不打分、不排序：
  1. 拆价格后缀   "<name>-$<integer>"
  2. 规范化精确匹配 search_name == key
  3. 分类 + 价格   category == hint 且 price == 价格提示（仅 active）
  4. 子串模糊匹配   key in search_name 或 search_name in key
第一个命中的阶段获胜；全部失败 → unmatched（不报错，只记 warning）。
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Optional

logger = logging.getLogger(__name__)

_PRICE_SUFFIX_RE = re.compile(r'^(?P<name>.*?)-\$(?P<price>\d+)$')
_TRAILING_PRICE_RE = re.compile(r'[\s-]*\$\s*\d+(?:\.\d+)?\s*$')
_NON_WORD_RE = re.compile(r'[^\w\s]|_')
_WHITESPACE_RE = re.compile(r'\s+')

STAGE_NORMALIZED_EXACT = 'normalized_exact'
STAGE_CATEGORY_PRICE = 'category_price'
STAGE_FUZZY = 'fuzzy'


def canonical_key(text) -> str:
    """
    小写 → 去掉结尾价格后缀 → 标点/括号/横线换成空格 → 合并空白。

    幂等：canonical_key(canonical_key(x)) == canonical_key(x)。
    """
    if not text:
        return ''
    key = str(text).lower()
    key = _TRAILING_PRICE_RE.sub('', key)
    key = _NON_WORD_RE.sub(' ', key)
    return _WHITESPACE_RE.sub(' ', key).strip()


def parse_price_suffix(raw_name: str) -> tuple[str, Optional[Decimal]]:
    """
    "drug-screening-and-confirmation-$140" → ("drug screening and confirmation", Decimal("140"))
    不符合格式 → (原字符串, None)
    """
    raw_name = (raw_name or '').strip()
    match = _PRICE_SUFFIX_RE.match(raw_name)
    if not match:
        return raw_name, None
    bare = match.group('name').replace('-', ' ').strip()
    return bare, Decimal(match.group('price'))


@dataclass
class TestMatch:
    raw_name: str
    entry: Optional[object] = None     # CatalogEntry；None 表示 unmatched
    stage: Optional[str] = None
    price_hint: Optional[Decimal] = None

    __test__ = False  # 不是 pytest 测试类

    @property
    def matched(self) -> bool:
        return self.entry is not None

    def as_warning(self) -> dict:
        return {
            'code': 'UNMATCHED_TEST',
            'test_name': self.raw_name,
            'message': f"Test not found in catalog: {self.raw_name!r}",
        }


@dataclass
class TestResolver:
    """
    对一份 catalog 快照做匹配。catalog 是按 id 排好序的 CatalogEntry 列表，
    只读，多个请求并发读取不需要加锁。
    """

    catalog: list = field(default_factory=list)

    __test__ = False

    @classmethod
    def from_database(cls) -> 'TestResolver':
        from .models import CatalogEntry

        return cls(catalog=list(CatalogEntry.objects.order_by('id')))

    def resolve(self, raw_name: str, category=None, price_hint=None) -> TestMatch:
        bare_name, parsed_price = parse_price_suffix(raw_name)
        if parsed_price is not None:
            price_hint = parsed_price
        elif price_hint is not None:
            price_hint = Decimal(str(price_hint))

        result = TestMatch(raw_name=raw_name, price_hint=price_hint)
        key = canonical_key(bare_name)

        for stage, finder in (
            (STAGE_NORMALIZED_EXACT, lambda: self._exact(key)),
            (STAGE_CATEGORY_PRICE, lambda: self._category_price(category, price_hint)),
            (STAGE_FUZZY, lambda: self._fuzzy(key)),
        ):
            entry = finder()
            if entry is not None:
                result.entry = entry
                result.stage = stage
                logger.info("Resolved test %r → %r via %s", raw_name, entry.test_name, stage)
                return result

        logger.warning("Test not found in catalog: %r", raw_name)
        return result

    def resolve_all(self, raw_names, category=None) -> list[TestMatch]:
        return [self.resolve(name, category=category) for name in raw_names]

    # ── stages ────────────────────────────────────────────────────────────

    def _exact(self, key):
        if not key:
            return None
        for entry in self.catalog:
            if entry.search_name == key:
                return entry
        return None

    def _category_price(self, category, price_hint):
        if not category or price_hint is None:
            return None
        for entry in self.catalog:
            if entry.is_active and entry.category == category and Decimal(entry.price) == price_hint:
                return entry
        return None

    def _fuzzy(self, key):
        if not key:
            return None
        for entry in self.catalog:
            if entry.search_name and (key in entry.search_name or entry.search_name in key):
                return entry
        return None
