import asyncio

from assistant_core.api import service
from assistant_core.config.settings import Settings
from assistant_core.fallback.rules import GREETING


def test_build_orchestrator_freezes_configuration():
    cfg = Settings(_env_file=None, ollama_base_url="http://ollama:11434", gemini_api_key="g", openai_api_key=None)
    orch = service.build_orchestrator(cfg)
    assert orch.selected.kind == "ollama"
    assert orch.selected.timeout == cfg.ollama_timeout


def test_run_ai_chat_with_rules_tier():
    cfg = Settings(_env_file=None, ollama_base_url="", gemini_api_key=None, openai_api_key=None)
    result = asyncio.run(service.run_ai_chat(None, None, orchestrator=service.build_orchestrator(cfg)))
    assert result == {"message": GREETING, "provider": "rules", "model": "rule-based", "fallback": True}
