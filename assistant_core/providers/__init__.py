"""LLM Provider 集成层。

该包下的模块负责：
- 定义 Provider 抽象接口与冻结配置 (base)。
- 解析各厂商响应体 (decoders)。
- 维护档位顺序与配置构造 (registry)。
- 提供各厂商的具体实现 (ollama_client、gemini_client、openai_client)。
"""

from assistant_core.providers.base import ProviderClient, ProviderConfig
from assistant_core.providers.registry import get_descriptor


def create_provider(name: str) -> ProviderClient:
    """根据档位名称创建 Provider 实例。"""

    return get_descriptor(name).client_factory()


__all__ = ["ProviderClient", "ProviderConfig", "create_provider"]
