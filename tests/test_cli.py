"""Tests for the command-line interface."""

import yaml
from click.testing import CliRunner

from daily_viewer.main import cli

runner = CliRunner()


class TestListCommand:
    def test_lists_notes_newest_first(self, config_file):
        result = runner.invoke(cli, ["list", "-c", str(config_file)])
        assert result.exit_code == 0
        lines = [line for line in result.output.splitlines() if line.startswith("[")]
        assert lines == [
            "[2023-03-01] 2023-03-01.md",
            "[2023-02-20] journal/2023-02-20.md",
            "[2023-01-10] 2023-01-10.md",
        ]

    def test_order_and_format_overrides(self, config_file, vault):
        (vault / "05.01.2023.md").write_text("", encoding="utf-8")
        result = runner.invoke(
            cli, ["list", "-c", str(config_file), "--format", "DD.MM.YYYY", "--order", "old-to-new"]
        )
        assert result.exit_code == 0
        assert "[2023-01-05] 05.01.2023.md" in result.output
        assert "2023-03-01.md" not in result.output

    def test_no_matches(self, config_file):
        result = runner.invoke(cli, ["list", "-c", str(config_file), "--format", "YYYYMMDD"])
        assert result.exit_code == 0
        assert "No notes match" in result.output

    def test_missing_vault_path(self, tmp_path):
        result = runner.invoke(cli, ["list", "-c", str(tmp_path / "absent.yaml")])
        assert result.exit_code != 0
        assert "vault_path must be set" in result.output


class TestCheckCommand:
    def test_reports_matches(self):
        result = runner.invoke(cli, ["check", "YYYY-MM-DD", "2024-01-05", "2024-1-5"])
        assert result.exit_code == 0
        assert "2024-01-05: 2024-01-05 00:00:00" in result.output
        assert "2024-1-5: no match" in result.output

    def test_warns_on_malformed_format(self):
        result = runner.invoke(cli, ["check", "notes", "notes"])
        assert result.exit_code == 0
        assert "Warning" in result.output
        assert "notes: no match" in result.output


class TestSettingsCommands:
    def test_show(self, config_file, vault):
        result = runner.invoke(cli, ["settings", "show", "-c", str(config_file)])
        assert result.exit_code == 0
        assert "YYYY-MM-DD" in result.output
        assert "new-to-old" in result.output

    def test_set_format_persists(self, config_file):
        result = runner.invoke(cli, ["settings", "set-format", "YYYYMMDD", "-c", str(config_file)])
        assert result.exit_code == 0
        assert yaml.safe_load(config_file.read_text())["date_format"] == "YYYYMMDD"

    def test_set_format_rejects_malformed(self, config_file):
        result = runner.invoke(cli, ["settings", "set-format", "notes", "-c", str(config_file)])
        assert result.exit_code != 0
        assert "Invalid date format" in result.output
        assert yaml.safe_load(config_file.read_text())["date_format"] == "YYYY-MM-DD"

    def test_set_order(self, config_file):
        result = runner.invoke(cli, ["settings", "set-order", "old-to-new", "-c", str(config_file)])
        assert result.exit_code == 0
        assert yaml.safe_load(config_file.read_text())["sort_order"] == "old-to-new"

    def test_set_order_rejects_unknown(self, config_file):
        result = runner.invoke(cli, ["settings", "set-order", "sideways", "-c", str(config_file)])
        assert result.exit_code != 0
