"""各厂商响应体的解码函数。

每个函数只负责从一种 JSON 形状中取出回复文本，取不到时返回 None，
不抛异常；是否替换为固定致歉文案由调用方决定。
"""

from typing import Any, List, Optional


def _joined(parts: List[str]) -> Optional[str]:
    text = "\n".join(parts).strip()
    return text or None


def extract_error_message(data: Any) -> Optional[str]:
    """从错误响应体中提取可读的错误信息。

    兼容 {"error": {"message": "..."}}（OpenAI/Gemini）与
    {"error": "..."}（Ollama）两种形状。
    """

    if not isinstance(data, dict):
        return None
    error = data.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message.strip()
        return None
    if isinstance(error, str) and error.strip():
        return error.strip()
    return None


def extract_ollama_chat_text(data: Any) -> Optional[str]:
    """Ollama /api/chat: {"message": {"role": "assistant", "content": "..."}}"""

    if not isinstance(data, dict):
        return None
    message = data.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if not isinstance(content, str):
        return None
    return content.strip() or None


def extract_ollama_generate_text(data: Any) -> Optional[str]:
    """Ollama /api/generate: {"response": "..."}"""

    if not isinstance(data, dict):
        return None
    text = data.get("response")
    if not isinstance(text, str):
        return None
    return text.strip() or None


def extract_gemini_text(data: Any) -> Optional[str]:
    """取第一个 candidate，按顺序拼接其全部非空 text part。"""

    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    content = first.get("content") if isinstance(first, dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return None
    texts = [p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str) and p["text"]]
    return _joined(texts)


def extract_openai_text(data: Any) -> Optional[str]:
    """Responses API: 只取 type == "message" 的 output 项中的 output_text 片段。"""

    if not isinstance(data, dict):
        return None
    output = data.get("output")
    if not isinstance(output, list):
        return None

    parts: List[str] = []
    for item in output:
        if not isinstance(item, dict) or item.get("type") != "message":
            continue
        content = item.get("content")
        if not isinstance(content, list):
            continue
        for segment in content:
            if not isinstance(segment, dict):
                continue
            if segment.get("type") in ("output_text", "text") and isinstance(segment.get("text"), str):
                parts.append(segment["text"])
    return _joined(parts)
