"""
工厂函数：根据来源字符串返回对应 Adapter 类。

新增数据源只需：
  1. 在 adapters.py 新建 Adapter 类
  2. 在此处 _REGISTRY 加一行
  不需要修改任何业务代码。
"""

from ..exceptions import SchemaInvalid
from .base import BaseIntakeAdapter


# ── 注册表 ──────────────────────────────────────────────────────────────────
# key: source 字符串（来自 URL: POST /webhook/<source>）
# value: Adapter 类（未实例化）
def _build_registry() -> dict[str, type[BaseIntakeAdapter]]:
    # 延迟导入，避免循环依赖
    from .adapters import MetformAdapter

    return {
        "metform": MetformAdapter,
    }


def get_adapter(source: str, payload: dict) -> BaseIntakeAdapter:
    """
    根据 source 返回已实例化的 Adapter。

    Args:
        source:  数据来源标识，例如 "metform"
        payload: normalize_payload() 解码后的 dict

    Raises:
        SchemaInvalid: 未知的 source
    """
    registry = _build_registry()
    adapter_cls = registry.get(source)

    if adapter_cls is None:
        raise SchemaInvalid(
            message=f"Unknown webhook source: {source!r}.",
            code="UNKNOWN_SOURCE",
            detail={"known_sources": list(registry.keys())},
        )

    return adapter_cls(payload=payload)
