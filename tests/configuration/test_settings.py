"""Bounded context: Configuration

Settings merge the config file with MUSIC_LEAGUE_* environment overrides.
"""

from src.config import load_settings
from tests.fakes import InMemoryConfig


class TestSettings:

    def test_defaults(self):
        settings = load_settings(InMemoryConfig(), environ={})

        assert settings.llm_provider == "openai"
        assert settings.resolved_model == "gpt-4o-mini"
        assert settings.themes_file == "themes.json"
        assert settings.collection_file == "songs_i_like.json"
        assert settings.simulation_mode is False
        assert settings.llm_timeout == 90.0
        assert not settings.spotify_enabled

    def test_anthropic_gets_its_own_default_model(self):
        settings = load_settings(InMemoryConfig({"llm_provider": "anthropic"}), environ={})

        assert settings.resolved_model == "claude-3-5-haiku-latest"

    def test_explicit_model_wins(self):
        settings = load_settings(InMemoryConfig({"llm_model": "gpt-4o"}), environ={})

        assert settings.resolved_model == "gpt-4o"

    def test_environment_overrides_file(self):
        config = InMemoryConfig({"simulation_mode": False, "themes_file": "from-file.json"})
        environ = {
            "MUSIC_LEAGUE_SIMULATION": "yes",
            "MUSIC_LEAGUE_THEMES_FILE": "/tmp/from-env.json",
            "MUSIC_LEAGUE_LLM_TIMEOUT": "12.5",
        }

        settings = load_settings(config, environ=environ)

        assert settings.simulation_mode is True
        assert settings.themes_file == "/tmp/from-env.json"
        assert settings.llm_timeout == 12.5

    def test_refine_threshold_is_configurable(self):
        settings = load_settings(InMemoryConfig({"refine_candidates_threshold": 5}), environ={})

        assert settings.thresholds.refine_candidates == 5
        assert settings.thresholds.refine_semifinalists == 8

    def test_spotify_enabled_with_credentials(self):
        config = InMemoryConfig({"spotify_client_id": "id", "spotify_client_secret": "secret"})

        assert load_settings(config, environ={}).spotify_enabled

    def test_collection_sits_beside_the_themes_by_default(self):
        environ = {"MUSIC_LEAGUE_THEMES_FILE": "/data/league/themes.json"}

        settings = load_settings(InMemoryConfig(), environ=environ)

        assert settings.collection_file == "/data/league/songs_i_like.json"

    def test_collection_file_can_be_placed_elsewhere(self):
        config = InMemoryConfig({"collection_file": "from-file.json"})

        assert load_settings(config, environ={}).collection_file == "from-file.json"
        environ = {"MUSIC_LEAGUE_COLLECTION_FILE": "/tmp/liked.json"}
        assert load_settings(config, environ=environ).collection_file == "/tmp/liked.json"
