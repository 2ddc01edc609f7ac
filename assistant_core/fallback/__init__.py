"""规则兜底：没有可用模型时按关键词返回固定的操作指引。"""

from assistant_core.fallback.rules import RULE_MODEL, RULE_PROVIDER, answer

__all__ = ["RULE_MODEL", "RULE_PROVIDER", "answer"]
