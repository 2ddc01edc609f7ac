"""Gemini Provider 适配器。

- URL: {base_url}/models/{model}:generateContent
- 认证: X-goog-api-key: <api_key>

请求体只使用一个 text part，内容是拼接后的纯文本对话记录；
回复取第一个 candidate 的全部非空 text part。
"""

from typing import Any, Dict, Sequence
from urllib.parse import quote

import httpx

from assistant_core.domain.exceptions import ConfigurationError, UpstreamError
from assistant_core.domain.history import flatten_transcript
from assistant_core.domain.models import ChatTurn, ProviderReply
from assistant_core.providers.base import APOLOGY_TEXT, MISSING_KEY_MESSAGE, ProviderConfig, raise_for_upstream
from assistant_core.providers.decoders import extract_gemini_text


class GeminiClient:
    """Gemini Provider 客户端实现。"""

    name = "gemini"

    async def generate(
        self,
        instruction: str,
        turns: Sequence[ChatTurn],
        config: ProviderConfig,
    ) -> ProviderReply:
        if not config.api_key:
            raise ConfigurationError(code="MISSING_API_KEY", message=MISSING_KEY_MESSAGE, provider=self.name)
        url = f"{config.base_url}/models/{quote(config.model, safe='')}:generateContent"
        try:
            async with httpx.AsyncClient(timeout=config.timeout, trust_env=False) as client:
                resp = await client.post(
                    url,
                    json=self._build_payload(instruction, turns),
                    headers={
                        "X-goog-api-key": config.api_key,
                        "Content-Type": "application/json",
                    },
                )
        except httpx.TimeoutException:
            raise UpstreamError(
                code="UPSTREAM_TIMEOUT",
                message=f"Gemini request timed out after {config.timeout:g}s",
                provider=self.name,
            )
        except httpx.RequestError as e:
            raise UpstreamError(
                code="NETWORK_ERROR",
                message=str(e) or "Gemini request failed (network error)",
                provider=self.name,
            )
        data = raise_for_upstream(resp, self.name, "Gemini")
        text = extract_gemini_text(data)
        return ProviderReply(text=text or APOLOGY_TEXT, provider=self.name, model=config.model)

    @staticmethod
    def _build_payload(instruction: str, turns: Sequence[ChatTurn]) -> Dict[str, Any]:
        return {"contents": [{"parts": [{"text": flatten_transcript(instruction, turns)}]}]}
