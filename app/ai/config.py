import os
from dataclasses import dataclass

GROK_BASE_URL = "https://api.x.ai/v1"


@dataclass(frozen=True)
class AIConfig:
    provider: str
    model: str
    api_key: str
    base_url: str | None
    timeout_s: float
    max_retries: int
    temperature: float | None


def _float_env(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def load_ai_config() -> AIConfig:
    provider = os.getenv("AI_PROVIDER", "").strip().lower() or "grok"

    if provider == "openai":
        default_model = "gpt-4o-mini"
        api_key = os.getenv("OPENAI_API_KEY", "")
        base_url = os.getenv("OPENAI_BASE_URL", "").strip() or None
    else:
        default_model = "grok-4"
        api_key = os.getenv("GROK_API_KEY", "")
        base_url = os.getenv("GROK_BASE_URL", "").strip() or GROK_BASE_URL

    raw_temperature = os.getenv("AI_TEMPERATURE", "").strip()
    try:
        temperature = float(raw_temperature) if raw_temperature else None
    except ValueError:
        temperature = None

    return AIConfig(
        provider=provider,
        model=(os.getenv("AI_MODEL", "").strip() or default_model),
        api_key=api_key.strip(),
        base_url=base_url,
        timeout_s=_float_env("AI_TIMEOUT_S", 60.0),
        max_retries=_int_env("AI_MAX_RETRIES", 2),
        temperature=temperature,
    )
