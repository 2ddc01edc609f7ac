"""Ollama（自建模型）Provider 适配器。

调用顺序：
1. POST {base_url}/api/chat，携带带角色的完整消息列表；
2. 若第 1 步失败（非 2xx、网络错误或超时），退回
   POST {base_url}/api/generate，携带拼接后的纯文本对话记录；
3. 两步都失败时抛出 UpstreamError，错误信息取自第 2 步。

两次调用各自独立受 config.timeout 约束，超时即取消正在进行的请求。
"""

import asyncio
from typing import Any, Dict, Optional, Sequence

import httpx

from assistant_core.domain.exceptions import UpstreamError
from assistant_core.domain.history import flatten_transcript
from assistant_core.domain.models import ChatTurn, ProviderReply
from assistant_core.infrastructure.logging.logger import logger
from assistant_core.providers.base import APOLOGY_TEXT, ProviderConfig, raise_for_upstream
from assistant_core.providers.decoders import extract_ollama_chat_text, extract_ollama_generate_text


class OllamaClient:
    """Ollama Provider 客户端实现。"""

    name = "ollama"

    async def generate(
        self,
        instruction: str,
        turns: Sequence[ChatTurn],
        config: ProviderConfig,
    ) -> ProviderReply:
        text: Optional[str]
        try:
            data = await self._post(f"{config.base_url}/api/chat", self._chat_payload(instruction, turns, config), config)
            text = extract_ollama_chat_text(data)
        except UpstreamError as e:
            logger.warning(
                "ollama.chat_failed",
                extra={"extra": {"code": e.code, "error": e.message, "status": e.extra.get("status")}},
            )
            text = await self._generate_fallback(instruction, turns, config)
        return ProviderReply(text=text or APOLOGY_TEXT, provider=self.name, model=config.model)

    async def _generate_fallback(
        self,
        instruction: str,
        turns: Sequence[ChatTurn],
        config: ProviderConfig,
    ) -> Optional[str]:
        payload = {
            "model": config.model,
            "prompt": flatten_transcript(instruction, turns),
            "stream": False,
        }
        data = await self._post(f"{config.base_url}/api/generate", payload, config)
        return extract_ollama_generate_text(data)

    async def _post(self, url: str, payload: Dict[str, Any], config: ProviderConfig) -> Any:
        try:
            async with httpx.AsyncClient(timeout=config.timeout, trust_env=False) as client:
                resp = await asyncio.wait_for(client.post(url, json=payload), timeout=config.timeout)
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise UpstreamError(
                code="UPSTREAM_TIMEOUT",
                message=f"Ollama request timed out after {config.timeout:g}s",
                provider=self.name,
            )
        except httpx.RequestError as e:
            # 网络错误：DNS 失败、连接被拒绝等
            raise UpstreamError(
                code="NETWORK_ERROR",
                message=str(e) or "Ollama request failed (network error)",
                provider=self.name,
            )
        return raise_for_upstream(resp, self.name, "Ollama")

    @staticmethod
    def _chat_payload(instruction: str, turns: Sequence[ChatTurn], config: ProviderConfig) -> Dict[str, Any]:
        messages = [{"role": "system", "content": instruction}]
        messages.extend({"role": t.role, "content": t.content} for t in turns)
        return {"model": config.model, "messages": messages, "stream": False}
