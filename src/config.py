"""Configuration: settings loaded from config.json plus environment overrides."""

import os
from dataclasses import dataclass

from src.adapters.config.json_config_adapter import JsonConfigAdapter
from src.adapters.strategist import DEFAULT_PROVIDER, PROVIDERS
from src.domain.phase import DEFAULT_THRESHOLDS, PhaseThresholds

ENV_PREFIX = "MUSIC_LEAGUE_"
DEFAULT_LLM_TIMEOUT = 90.0
COLLECTION_FILENAME = "songs_i_like.json"


def _is_truthy(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    spotify_client_id: str = ""
    spotify_client_secret: str = ""
    spotify_redirect_uri: str = "http://127.0.0.1:8888/callback"
    llm_provider: str = DEFAULT_PROVIDER
    llm_api_key: str = ""
    llm_model: str = ""
    llm_timeout: float = DEFAULT_LLM_TIMEOUT
    themes_file: str = "themes.json"
    collection_file: str = COLLECTION_FILENAME
    simulation_mode: bool = False
    thresholds: PhaseThresholds = DEFAULT_THRESHOLDS

    @property
    def resolved_model(self) -> str:
        return self.llm_model or PROVIDERS.get(self.llm_provider, PROVIDERS[DEFAULT_PROVIDER])["default_model"]

    @property
    def spotify_enabled(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)


def load_settings(adapter: JsonConfigAdapter | None = None, environ: dict | None = None) -> Settings:
    """Merge config.json (and keychain secrets) with MUSIC_LEAGUE_* overrides."""
    cfg = (adapter or JsonConfigAdapter()).load()
    env = os.environ if environ is None else environ

    themes_file = env.get(f"{ENV_PREFIX}THEMES_FILE") or cfg.get("themes_file", "themes.json")
    # The collection lives beside the themes unless placed elsewhere.
    collection_file = (
        env.get(f"{ENV_PREFIX}COLLECTION_FILE")
        or cfg.get("collection_file")
        or os.path.join(os.path.dirname(themes_file), COLLECTION_FILENAME)
    )

    simulation = bool(cfg.get("simulation_mode", False))
    if f"{ENV_PREFIX}SIMULATION" in env:
        simulation = _is_truthy(env[f"{ENV_PREFIX}SIMULATION"])

    return Settings(
        spotify_client_id=cfg.get("spotify_client_id", ""),
        spotify_client_secret=cfg.get("spotify_client_secret", ""),
        spotify_redirect_uri=cfg.get("spotify_redirect_uri", "http://127.0.0.1:8888/callback"),
        llm_provider=cfg.get("llm_provider") or DEFAULT_PROVIDER,
        llm_api_key=cfg.get("llm_api_key", ""),
        llm_model=cfg.get("llm_model", ""),
        llm_timeout=float(env.get(f"{ENV_PREFIX}LLM_TIMEOUT", DEFAULT_LLM_TIMEOUT)),
        themes_file=themes_file,
        collection_file=collection_file,
        simulation_mode=simulation,
        thresholds=PhaseThresholds(
            refine_candidates=int(cfg.get("refine_candidates_threshold", DEFAULT_THRESHOLDS.refine_candidates)),
        ),
    )
