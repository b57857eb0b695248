"""Tests for configuration loading and the settings provider."""

import pytest
import yaml

from daily_viewer.config import Config, ConfigProvider
from daily_viewer.storage.models import SortDirection


class TestConfig:
    def test_from_yaml_defaults(self, tmp_path, vault):
        path = tmp_path / "c.yaml"
        path.write_text(f"vault_path: {vault}\n", encoding="utf-8")
        cfg = Config.from_yaml(path)
        assert cfg.vault_path == vault
        assert cfg.date_format == "YYYY-MM-DD"
        assert cfg.sort_order is SortDirection.DESCENDING
        assert cfg.extension == "md"

    def test_environment_takes_precedence(self, tmp_path, vault, monkeypatch):
        path = tmp_path / "c.yaml"
        path.write_text("vault_path: /elsewhere\ndate_format: YYYYMMDD\n", encoding="utf-8")
        monkeypatch.setenv("VAULT_PATH", str(vault))
        monkeypatch.setenv("DAILY_VIEWER_DATE_FORMAT", "DD.MM.YYYY")
        cfg = Config.from_yaml(path)
        assert cfg.vault_path == vault
        assert cfg.date_format == "DD.MM.YYYY"

    def test_missing_file_uses_environment(self, tmp_path, vault, monkeypatch):
        monkeypatch.setenv("VAULT_PATH", str(vault))
        cfg = Config.from_yaml(tmp_path / "absent.yaml")
        assert cfg.vault_path == vault

    def test_vault_path_is_required(self, tmp_path):
        with pytest.raises(ValueError, match="vault_path"):
            Config.from_yaml(tmp_path / "absent.yaml")

    def test_invalid_sort_order(self, tmp_path, vault):
        path = tmp_path / "c.yaml"
        path.write_text(f"vault_path: {vault}\nsort_order: sideways\n", encoding="utf-8")
        with pytest.raises(ValueError, match="sort_order"):
            Config.from_yaml(path)

    def test_save_settings_keeps_other_keys(self, config_file, vault):
        cfg = Config(vault_path=vault, date_format="YYYYMMDD", sort_order=SortDirection.ASCENDING)
        cfg.save_settings(config_file)
        data = yaml.safe_load(config_file.read_text(encoding="utf-8"))
        assert data == {
            "vault_path": str(vault),
            "date_format": "YYYYMMDD",
            "sort_order": "old-to-new",
        }


class TestConfigProvider:
    @pytest.mark.asyncio
    async def test_update_persists_and_notifies(self, provider, config_file):
        seen = []

        async def listener(cfg):
            seen.append(cfg.date_format)

        provider.subscribe(listener)
        cfg = await provider.update(date_format="D MMM YYYY")

        assert cfg.date_format == "D MMM YYYY"
        assert provider.config.date_format == "D MMM YYYY"
        assert seen == ["D MMM YYYY"]
        assert Config.from_yaml(config_file).date_format == "D MMM YYYY"

    @pytest.mark.asyncio
    async def test_sync_listener_and_unsubscribe(self, provider):
        seen = []
        unsubscribe = provider.subscribe(lambda cfg: seen.append(cfg.sort_order))
        await provider.update(sort_order="old-to-new")
        unsubscribe()
        await provider.update(sort_order=SortDirection.DESCENDING)
        assert seen == [SortDirection.ASCENDING]

    @pytest.mark.asyncio
    async def test_rejects_format_without_date_tokens(self, provider):
        seen = []
        provider.subscribe(lambda cfg: seen.append(cfg))
        with pytest.raises(ValueError, match="Invalid date format"):
            await provider.update(date_format="notes")
        assert provider.config.date_format == "YYYY-MM-DD"
        assert seen == []

    @pytest.mark.asyncio
    async def test_rejects_unknown_sort_order(self, provider):
        with pytest.raises(ValueError):
            await provider.update(sort_order="sideways")

    @pytest.mark.asyncio
    async def test_no_changes_does_not_notify(self, provider):
        seen = []
        provider.subscribe(lambda cfg: seen.append(cfg))
        await provider.update()
        assert seen == []

    def test_from_yaml(self, config_file, vault):
        provider = ConfigProvider.from_yaml(config_file)
        assert provider.config.vault_path == vault
        assert provider.path == config_file
