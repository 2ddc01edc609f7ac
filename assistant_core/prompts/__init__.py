"""系统提示词加载工具。

按语言(locale) 从 prompts/<locale> 目录读取运营方维护的系统提示词，
各 Provider 在请求中自行注入，调用方传入的 system 消息不会被采用。
"""

from functools import lru_cache
from pathlib import Path


PROMPTS_DIR = Path(__file__).resolve().parent


@lru_cache(maxsize=None)
def load_system_prompt(locale: str = "en") -> str:
    """根据语言加载系统提示词文本。"""

    fname = PROMPTS_DIR / locale / "nexabuild_system.md"
    return fname.read_text(encoding="utf-8").strip()
