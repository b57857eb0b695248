"""Shared pytest fixtures for daily viewer tests."""

from pathlib import Path

import pytest
import yaml

from daily_viewer.config import Config, ConfigProvider
from daily_viewer.rendering.markdown_renderer import MarkdownRenderer
from daily_viewer.storage.vault import VaultStore
from daily_viewer.view.daily_view import DailyView
from daily_viewer.view.navigator import NavigationQueue

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Keep a developer's .env from leaking into tests."""
    monkeypatch.delenv("VAULT_PATH", raising=False)
    monkeypatch.delenv("DAILY_VIEWER_DATE_FORMAT", raising=False)


@pytest.fixture
def vault(tmp_path) -> Path:
    """A small vault with dated notes, other notes and an attachment."""
    root = tmp_path / "vault"
    files = {
        "2023-01-10.md": "Cold day #weather",
        "2023-03-01.md": "Spring ![[photo.png]] and [[ideas]]",
        "journal/2023-02-20.md": "# Middle\n\nNothing much.",
        "2023-1-5.md": "Not padded",
        "notes.md": "Undated #weather",
        "ideas.md": "Some ideas",
        ".obsidian/2023-04-01.md": "Hidden",
    }
    for name, content in files.items():
        path = root / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    (root / "attachments").mkdir()
    (root / "attachments" / "photo.png").write_bytes(PNG_BYTES)
    return root


@pytest.fixture
def config_file(tmp_path, vault) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(
        yaml.safe_dump({"vault_path": str(vault), "date_format": "YYYY-MM-DD"}),
        encoding="utf-8",
    )
    return path


@pytest.fixture
def provider(vault, config_file) -> ConfigProvider:
    return ConfigProvider(Config(vault_path=vault), config_file)


@pytest.fixture
def store(vault) -> VaultStore:
    return VaultStore(vault, resource_base="/resource")


@pytest.fixture
def navigator() -> NavigationQueue:
    return NavigationQueue()


@pytest.fixture
def view(store, navigator, provider) -> DailyView:
    return DailyView(store, MarkdownRenderer(), navigator, provider)
