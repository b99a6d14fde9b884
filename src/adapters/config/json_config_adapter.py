"""config.json adapter; the Spotify secret and LLM key go to the keychain."""

import json
import logging
import os
import sys
from typing import Optional, Protocol

from src.adapters.config.secret_store import KeyringSecretStore
from src.domain.ports import ConfigPort

logger = logging.getLogger("music_league.config")

CONFIG_PATH_ENV = "MUSIC_LEAGUE_CONFIG"

DEFAULTS = {
    "spotify_client_id": "",
    "spotify_client_secret": "",
    "spotify_redirect_uri": "http://127.0.0.1:8888/callback",
    "llm_provider": "openai",
    "llm_api_key": "",
    "llm_model": "",
    "themes_file": "themes.json",
    "collection_file": "",
    "simulation_mode": False,
    "refine_candidates_threshold": 8,
}
SECRET_FIELDS = ("spotify_client_secret", "llm_api_key")


def default_config_path() -> str:
    if os.environ.get(CONFIG_PATH_ENV):
        return os.environ[CONFIG_PATH_ENV]
    base = os.path.dirname(sys.executable) if getattr(sys, "frozen", False) else os.getcwd()
    return os.path.join(base, "config.json")


class SecretStore(Protocol):
    def get(self, key: str) -> Optional[str]:
        ...

    def set(self, key: str, value: str) -> bool:
        ...


class JsonConfigAdapter(ConfigPort):

    def __init__(self, path: Optional[str] = None, secret_store: Optional[SecretStore] = None):
        self.path = path or default_config_path()
        self.secrets = secret_store or KeyringSecretStore()

    def load(self) -> dict:
        cfg = dict(DEFAULTS)
        if os.path.exists(self.path):
            with open(self.path, "r", encoding="utf-8") as f:
                stored = json.load(f)
            unknown = sorted(set(stored) - set(DEFAULTS))
            if unknown:
                logger.warning("Ignoring unknown config keys in %s: %s", self.path, ", ".join(unknown))
            cfg.update({key: value for key, value in stored.items() if key in DEFAULTS})

        for key in SECRET_FIELDS:
            secret = self.secrets.get(key)
            if secret:
                cfg[key] = secret
        return cfg

    def save(self, cfg: dict) -> None:
        on_disk = {key: cfg.get(key, default) for key, default in DEFAULTS.items()}
        for key in SECRET_FIELDS:
            value = str(on_disk[key] or "")
            # Plaintext stays on disk only when no keychain backend answered.
            on_disk[key] = "" if self.secrets.set(key, value) else value

        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(on_disk, f, indent=2)
        logger.info("Saved configuration to %s", self.path)

    def update(self, **changes) -> dict:
        """Change some keys and keep the rest as loaded."""
        unknown = sorted(set(changes) - set(DEFAULTS))
        if unknown:
            raise KeyError(f"Unknown config keys: {', '.join(unknown)}")
        cfg = self.load()
        cfg.update(changes)
        self.save(cfg)
        return cfg

    def is_configured(self) -> bool:
        """An LLM key is enough to chat; Spotify is optional."""
        cfg = self.load()
        return bool(cfg.get("llm_api_key") and cfg.get("llm_provider"))

    def spotify_configured(self) -> bool:
        cfg = self.load()
        return bool(cfg.get("spotify_client_id") and cfg.get("spotify_client_secret"))
