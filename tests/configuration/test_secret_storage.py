"""Configuration security behavior for local secret storage."""

import json

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from src.adapters.config.json_config_adapter import JsonConfigAdapter
from src.adapters.config.secret_store import KeyringSecretStore

CREDENTIALS = {
    "spotify_client_id": "client-id",
    "spotify_client_secret": "spotify-secret",
    "llm_provider": "openai",
    "llm_api_key": "sk-test",
}


def test_sensitive_credentials_go_to_secret_store_when_available(tmp_path, secret_store):
    config_path = tmp_path / "config.json"
    adapter = JsonConfigAdapter(path=str(config_path), secret_store=secret_store)

    adapter.save(CREDENTIALS)

    on_disk = json.loads(config_path.read_text(encoding="utf-8"))
    loaded = adapter.load()

    assert on_disk["spotify_client_secret"] == ""
    assert on_disk["llm_api_key"] == ""
    assert on_disk["spotify_client_id"] == "client-id"
    assert secret_store.data["spotify_client_secret"] == "spotify-secret"
    assert secret_store.data["llm_api_key"] == "sk-test"
    assert loaded["spotify_client_secret"] == "spotify-secret"
    assert loaded["llm_api_key"] == "sk-test"


def test_sensitive_credentials_fallback_to_plaintext_if_secret_store_unavailable(tmp_path, secret_store):
    secret_store.available = False
    config_path = tmp_path / "config.json"
    adapter = JsonConfigAdapter(path=str(config_path), secret_store=secret_store)

    adapter.save(CREDENTIALS)

    on_disk = json.loads(config_path.read_text(encoding="utf-8"))
    loaded = adapter.load()

    assert on_disk["spotify_client_secret"] == "spotify-secret"
    assert on_disk["llm_api_key"] == "sk-test"
    assert loaded["spotify_client_secret"] == "spotify-secret"
    assert loaded["llm_api_key"] == "sk-test"


class TestKeyringSecretStore:
    """The keychain store degrades to "not stored" instead of crashing."""

    def test_round_trip_through_keyring(self, monkeypatch):
        vault = {}
        monkeypatch.setattr(keyring, "set_password", lambda s, k, v: vault.__setitem__((s, k), v))
        monkeypatch.setattr(keyring, "get_password", lambda s, k: vault.get((s, k)))
        store = KeyringSecretStore(service_name="test-service")

        assert store.set("llm_api_key", "sk-test") is True
        assert store.get("llm_api_key") == "sk-test"
        assert vault[("test-service", "llm_api_key")] == "sk-test"

    def test_unavailable_backend_reports_not_stored(self, monkeypatch):
        def broken(*args):
            raise KeyringError("no backend")

        monkeypatch.setattr(keyring, "set_password", broken)
        monkeypatch.setattr(keyring, "get_password", broken)
        store = KeyringSecretStore()

        assert store.set("llm_api_key", "sk-test") is False
        assert store.get("llm_api_key") is None

    def test_clearing_a_missing_secret_is_fine(self, monkeypatch):
        def missing(*args):
            raise PasswordDeleteError("not found")

        monkeypatch.setattr(keyring, "delete_password", missing)

        assert KeyringSecretStore().set("llm_api_key", "") is True
