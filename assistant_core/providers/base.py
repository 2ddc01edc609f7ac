"""Provider 抽象接口。

上层 ChatOrchestrator 不直接依赖具体厂商的 HTTP 细节，而是依赖此协议：

- 每个厂商实现一个 ProviderClient（如 OllamaClient）。
- 负责：将系统提示词与 ChatTurn 序列转成具体 API 请求，
  并把响应 JSON 交给 decoders 中对应的解码函数，得到 ProviderReply。

这样可以在不改编排代码的前提下接入更多厂商。
"""

from dataclasses import dataclass
from typing import Optional, Protocol, Sequence

import httpx

from assistant_core.domain.exceptions import UpstreamError
from assistant_core.domain.models import ChatTurn, ProviderReply
from assistant_core.providers.decoders import extract_error_message

# 上游成功但解析不出文本时的固定回复
APOLOGY_TEXT = "Sorry, I couldn't generate a response."
MISSING_KEY_MESSAGE = "Missing GEMINI_API_KEY or OPENAI_API_KEY on backend"


@dataclass(frozen=True)
class ProviderConfig:
    """某个档位在启动时冻结下来的配置。

    - kind: 档位名，对应 registry 中的 ProviderDescriptor。
    - base_url: 服务基础地址。
    - api_key: 托管服务的密钥，自建服务为 None。
    - model: 厂商模型名。
    - timeout: 超时（秒）。
    """

    kind: str
    base_url: str
    model: str
    timeout: float
    api_key: Optional[str] = None
    max_output_tokens: Optional[int] = None


class ProviderClient(Protocol):
    """Provider 客户端协议。

    实现者需要提供：
    - name: Provider 名称，用于日志与响应中的 provider 字段。
    - generate(...): 执行一次对话调用，返回统一的 ProviderReply。
    """

    name: str

    async def generate(
        self,
        instruction: str,
        turns: Sequence[ChatTurn],
        config: ProviderConfig,
    ) -> ProviderReply:
        ...


def safe_json(resp: httpx.Response) -> Optional[object]:
    """解析响应体，非 JSON 时返回 None。"""

    try:
        return resp.json()
    except ValueError:
        return None


def raise_for_upstream(resp: httpx.Response, provider: str, label: str) -> object:
    """非 2xx 时抛出 UpstreamError，否则返回解析后的 JSON（可能为 None）。"""

    data = safe_json(resp)
    if resp.status_code >= 400:
        message = extract_error_message(data) or f"{label} request failed ({resp.status_code})"
        raise UpstreamError(
            code="API_ERROR",
            message=message,
            provider=provider,
            status=resp.status_code,
        )
    return data
