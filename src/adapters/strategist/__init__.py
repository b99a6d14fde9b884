"""LLM strategist adapters and provider registry."""

from src.domain.phase import DEFAULT_THRESHOLDS, PhaseThresholds

PROVIDERS = {
    "openai": {
        "name": "OpenAI",
        "default_model": "gpt-4o-mini",
        "label": "OpenAI (GPT)",
        "url": "https://platform.openai.com/api-keys",
    },
    "anthropic": {
        "name": "Anthropic",
        "default_model": "claude-3-5-haiku-latest",
        "label": "Anthropic",
        "url": "https://console.anthropic.com",
    },
}

DEFAULT_PROVIDER = "openai"


def build_strategist(
    provider: str,
    api_key: str,
    model: str = "",
    timeout: float = 90.0,
    thresholds: PhaseThresholds = DEFAULT_THRESHOLDS,
):
    if provider not in PROVIDERS:
        raise ValueError(f"Unknown LLM provider: {provider}")
    model = model or PROVIDERS[provider]["default_model"]
    if provider == "anthropic":
        from src.adapters.strategist.anthropic_adapter import AnthropicStrategistAdapter

        return AnthropicStrategistAdapter(api_key=api_key, model=model, timeout=timeout, thresholds=thresholds)
    from src.adapters.strategist.openai_adapter import OpenAIStrategistAdapter

    return OpenAIStrategistAdapter(api_key=api_key, model=model, timeout=timeout, thresholds=thresholds)
