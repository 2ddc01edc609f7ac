"""Provider 档位注册表。

本模块把“按配置是否存在依次判断”的档位选择收敛成一张有序表：

- PROVIDER_REGISTRY 的顺序即优先级：ollama > gemini > openai；
- 每个 ProviderDescriptor 知道如何从 Settings 中构造自己的 ProviderConfig，
  缺少地址/密钥时返回 None，表示该档位整体跳过；
- 所有档位都未配置时，由编排层走规则兜底。

新增厂商只需在表中追加一项，不需要改编排代码。
"""

from dataclasses import dataclass
from typing import Callable, Optional, Tuple

from assistant_core.providers.base import ProviderClient, ProviderConfig
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.ollama_client import OllamaClient
from assistant_core.providers.openai_client import OpenAIClient


@dataclass(frozen=True)
class ProviderDescriptor:
    """单个档位的描述。"""

    name: str
    client_factory: Callable[[], ProviderClient]
    build_config: Callable[[object], Optional[ProviderConfig]]


def _ollama_config(cfg) -> Optional[ProviderConfig]:
    base_url = (getattr(cfg, "ollama_base_url", "") or "").strip().rstrip("/")
    if not base_url:
        return None
    return ProviderConfig(
        kind="ollama",
        base_url=base_url,
        model=getattr(cfg, "ollama_model", None) or "llama3",
        timeout=float(getattr(cfg, "ollama_timeout", 60.0)),
    )


def _gemini_config(cfg) -> Optional[ProviderConfig]:
    api_key = getattr(cfg, "gemini_api_key", None)
    if not api_key:
        return None
    return ProviderConfig(
        kind="gemini",
        base_url=(getattr(cfg, "gemini_base_url", None) or "https://generativelanguage.googleapis.com/v1beta").rstrip("/"),
        model=getattr(cfg, "gemini_model", None) or "gemini-2.0-flash",
        timeout=float(getattr(cfg, "http_timeout", 30.0)),
        api_key=api_key,
    )


def _openai_config(cfg) -> Optional[ProviderConfig]:
    api_key = getattr(cfg, "openai_api_key", None)
    if not api_key:
        return None
    return ProviderConfig(
        kind="openai",
        base_url=(getattr(cfg, "openai_base_url", None) or "https://api.openai.com/v1").rstrip("/"),
        model=getattr(cfg, "openai_model", None) or "gpt-4o-mini",
        timeout=float(getattr(cfg, "http_timeout", 30.0)),
        api_key=api_key,
        max_output_tokens=getattr(cfg, "openai_max_output_tokens", None),
    )


PROVIDER_REGISTRY: Tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(name="ollama", client_factory=OllamaClient, build_config=_ollama_config),
    ProviderDescriptor(name="gemini", client_factory=GeminiClient, build_config=_gemini_config),
    ProviderDescriptor(name="openai", client_factory=OpenAIClient, build_config=_openai_config),
)


def load_provider_configs(cfg) -> Tuple[ProviderConfig, ...]:
    """按优先级收集已配置档位的 ProviderConfig，只在启动时调用一次。"""

    configs = []
    for descriptor in PROVIDER_REGISTRY:
        provider_cfg = descriptor.build_config(cfg)
        if provider_cfg is not None:
            configs.append(provider_cfg)
    return tuple(configs)


def get_descriptor(name: str) -> ProviderDescriptor:
    """根据名称获取 ProviderDescriptor，名称不区分大小写。"""

    key = name.lower()
    for descriptor in PROVIDER_REGISTRY:
        if descriptor.name == key:
            return descriptor
    raise KeyError(f"Unknown provider: {name!r}")
