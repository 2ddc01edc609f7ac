"""OpenAI Provider 适配器（Responses API）。

- URL: {base_url}/responses
- 认证: Authorization: Bearer <api_key>

系统提示词放在 instructions 字段，历史消息按 input 消息列表传递，
不在服务端存储对话（store=false）。
"""

from typing import Any, Dict, Sequence

import httpx

from assistant_core.domain.exceptions import ConfigurationError, UpstreamError
from assistant_core.domain.models import ChatTurn, ProviderReply
from assistant_core.providers.base import APOLOGY_TEXT, MISSING_KEY_MESSAGE, ProviderConfig, raise_for_upstream
from assistant_core.providers.decoders import extract_openai_text

DEFAULT_MAX_OUTPUT_TOKENS = 500


def _segment_type(role: str) -> str:
    # 历史中的助手回复按模型输出回传
    return "output_text" if role == "assistant" else "input_text"


class OpenAIClient:
    """OpenAI Provider 客户端实现。"""

    name = "openai"

    async def generate(
        self,
        instruction: str,
        turns: Sequence[ChatTurn],
        config: ProviderConfig,
    ) -> ProviderReply:
        if not config.api_key:
            raise ConfigurationError(code="MISSING_API_KEY", message=MISSING_KEY_MESSAGE, provider=self.name)
        try:
            async with httpx.AsyncClient(timeout=config.timeout, trust_env=False) as client:
                resp = await client.post(
                    f"{config.base_url}/responses",
                    json=self._build_payload(instruction, turns, config),
                    headers={
                        "Authorization": f"Bearer {config.api_key}",
                        "Content-Type": "application/json",
                    },
                )
        except httpx.TimeoutException:
            raise UpstreamError(
                code="UPSTREAM_TIMEOUT",
                message=f"OpenAI request timed out after {config.timeout:g}s",
                provider=self.name,
            )
        except httpx.RequestError as e:
            raise UpstreamError(
                code="NETWORK_ERROR",
                message=str(e) or "OpenAI request failed (network error)",
                provider=self.name,
            )
        data = raise_for_upstream(resp, self.name, "OpenAI")
        text = extract_openai_text(data)
        return ProviderReply(text=text or APOLOGY_TEXT, provider=self.name, model=config.model)

    @staticmethod
    def _build_payload(instruction: str, turns: Sequence[ChatTurn], config: ProviderConfig) -> Dict[str, Any]:
        return {
            "model": config.model,
            "instructions": instruction,
            "input": [
                {
                    "type": "message",
                    "role": t.role,
                    "content": [{"type": _segment_type(t.role), "text": t.content}],
                }
                for t in turns
            ],
            "max_output_tokens": config.max_output_tokens or DEFAULT_MAX_OUTPUT_TOKENS,
            "store": False,
        }
