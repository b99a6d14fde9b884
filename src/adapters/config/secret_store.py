"""Secret storage for API credentials in the OS keychain."""

from __future__ import annotations

import logging
from typing import Optional

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

logger = logging.getLogger("music_league.config.secrets")

DEFAULT_SERVICE_NAME = "music-league-strategist"


class KeyringSecretStore:
    """Store and retrieve secrets from the OS keychain.

    When no keychain backend is usable every call degrades to "not stored"
    and the config adapter keeps the value in plaintext instead.
    """

    def __init__(self, service_name: str = DEFAULT_SERVICE_NAME):
        self.service_name = service_name

    def get(self, key: str) -> Optional[str]:
        try:
            return keyring.get_password(self.service_name, key)
        except KeyringError:
            logger.warning("Keychain unavailable while reading %s", key)
            return None

    def set(self, key: str, value: str) -> bool:
        try:
            if value:
                keyring.set_password(self.service_name, key, value)
            else:
                self.delete(key)
            return True
        except KeyringError:
            logger.warning("Keychain unavailable while storing %s", key)
            return False

    def delete(self, key: str) -> bool:
        try:
            keyring.delete_password(self.service_name, key)
            return True
        except PasswordDeleteError:
            # Nothing stored under this key.
            return True
