"""Shared fixtures for all bounded contexts."""

import pytest

from src.domain.model import Theme
from tests.fakes import FakeSecretStore, InMemoryCollection, InMemoryPlaylist, InMemoryThemes


# ── Shared fixtures ─────────────────────────────────────────────────


@pytest.fixture
def theme():
    return Theme.new("Songs about the weather\nAnything goes as long as it rains", theme_id="theme-1")


@pytest.fixture
def themes():
    return InMemoryThemes()


@pytest.fixture
def stored_theme(theme, themes):
    themes.save(theme)
    return theme


@pytest.fixture
def collection():
    return InMemoryCollection()


@pytest.fixture
def playlist():
    return InMemoryPlaylist()


@pytest.fixture
def secret_store():
    return FakeSecretStore()
