from assistant_core.config.settings import Settings
from assistant_core.providers import create_provider
from assistant_core.providers.gemini_client import GeminiClient
from assistant_core.providers.ollama_client import OllamaClient
from assistant_core.providers.openai_client import OpenAIClient
from assistant_core.providers.registry import PROVIDER_REGISTRY, load_provider_configs


class DummySettings:
    ollama_base_url = ""
    ollama_model = "llama3"
    ollama_timeout = 60.0
    gemini_api_key = None
    gemini_model = "gemini-2.0-flash"
    gemini_base_url = "https://generativelanguage.googleapis.com/v1beta/"
    openai_api_key = None
    openai_model = "gpt-4o-mini"
    openai_base_url = "https://api.openai.com/v1"
    openai_max_output_tokens = 500
    http_timeout = 30.0


def test_registry_order():
    assert [d.name for d in PROVIDER_REGISTRY] == ["ollama", "gemini", "openai"]


def test_no_configuration_yields_no_tiers():
    assert load_provider_configs(DummySettings()) == ()


def test_all_configured_in_priority_order():
    cfg = DummySettings()
    cfg.ollama_base_url = "http://127.0.0.1:11434/"
    cfg.gemini_api_key = "g"
    cfg.openai_api_key = "o"
    configs = load_provider_configs(cfg)
    assert [c.kind for c in configs] == ["ollama", "gemini", "openai"]
    assert configs[0].base_url == "http://127.0.0.1:11434"
    assert configs[0].api_key is None
    assert configs[0].timeout == 60.0
    assert configs[1].base_url == "https://generativelanguage.googleapis.com/v1beta"
    assert configs[1].timeout == 30.0
    assert configs[2].max_output_tokens == 500


def test_only_openai_configured():
    cfg = DummySettings()
    cfg.openai_api_key = "o"
    configs = load_provider_configs(cfg)
    assert [c.kind for c in configs] == ["openai"]
    assert configs[0].api_key == "o"


def test_create_provider():
    assert isinstance(create_provider("ollama"), OllamaClient)
    assert isinstance(create_provider("Gemini"), GeminiClient)
    assert isinstance(create_provider("openai"), OpenAIClient)


def test_settings_blank_values_mean_unconfigured():
    s = Settings(_env_file=None, ollama_base_url="  ", gemini_api_key="", openai_api_key="   ")
    assert s.ollama_base_url == ""
    assert s.gemini_api_key is None
    assert s.openai_api_key is None
    assert load_provider_configs(s) == ()


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://gpu-box:11434/")
    monkeypatch.setenv("OLLAMA_TIMEOUT", "15")
    monkeypatch.setenv("CORS_ORIGINS", "https://a.example, https://b.example")
    s = Settings(_env_file=None)
    assert s.ollama_base_url == "http://gpu-box:11434"
    assert s.ollama_timeout == 15.0
    assert s.allowed_origins == ["https://a.example", "https://b.example"]
    assert load_provider_configs(s)[0].kind == "ollama"
