"""配置管理模块。

支持从 .env、config.yaml 以及环境变量加载配置。

进程启动时只读取一次，之后视为不可变；Provider 层通过
providers.registry.load_provider_configs 拿到冻结后的配置快照，
不会在请求过程中再回头读取环境变量。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("ASSISTANT_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 自建模型（Ollama），配置 base_url 即启用，优先级最高 ----
    ollama_base_url: str = Field(default="", description="Ollama 服务地址，例如 http://127.0.0.1:11434")
    ollama_model: str = Field(default="llama3", description="Ollama 模型名")
    ollama_timeout: float = Field(default=60.0, ge=1.0, description="Ollama 单次调用超时（秒）")

    # ---- Gemini ----
    gemini_api_key: Optional[str] = Field(default=None, description="Gemini API 密钥")
    gemini_model: str = Field(default="gemini-2.0-flash", description="Gemini 模型名")
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        description="Gemini API 基础URL",
    )

    # ---- OpenAI（Responses API） ----
    openai_api_key: Optional[str] = Field(default=None, description="OpenAI API 密钥")
    openai_model: str = Field(default="gpt-4o-mini", description="OpenAI 模型名")
    openai_base_url: str = Field(default="https://api.openai.com/v1", description="OpenAI API 基础URL")
    openai_max_output_tokens: int = Field(default=500, ge=1, description="单次回复最大输出 token 数")

    http_timeout: float = Field(default=30.0, ge=1.0, description="托管 Provider 的 HTTP 超时时间（秒）")
    history_window: int = Field(default=12, ge=1, le=100, description="转发给模型的历史消息条数上限")

    # ---- 限流 ----
    rate_limit_window_seconds: float = Field(default=60.0, gt=0, description="限流窗口（秒）")
    rate_limit_max_requests: int = Field(default=20, ge=1, description="窗口内允许的最大请求数")

    # ---- 日志 / 运行环境 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")
    host: str = Field(default="127.0.0.1", description="监听地址")
    port: int = Field(default=5001, ge=1, le=65535, description="监听端口")
    cors_origins: str = Field(default="", description="允许的跨域来源，逗号分隔；为空表示全部允许")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @staticmethod
    def _config_source() -> Dict[str, Any]:
        return _load_config_from_yaml()

    @field_validator("gemini_api_key", "openai_api_key", mode="before")
    @classmethod
    def blank_key_as_missing(cls, v: Any) -> Optional[str]:
        # 空字符串等同于未配置，对应档位直接跳过
        if v is None:
            return None
        v = str(v).strip()
        return v or None

    @field_validator("ollama_base_url", mode="before")
    @classmethod
    def strip_base_url(cls, v: Any) -> str:
        return str(v or "").strip().rstrip("/")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls,
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ):
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            cls._config_source,
            file_secret_settings,
        )

    @property
    def allowed_origins(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",") if o.strip()]


settings = Settings()
