"""Tests for imgup CLI config commands."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from imgup.cli.main import cli
from imgup.core.config import Config, Profile


def _flat(output: str) -> str:
    return " ".join(output.split())


@pytest.fixture
def runner() -> CliRunner:
    """Create a CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    for name in ("IMGUP_URL", "IMGUP_PROFILE", "IMGUP_VERIFY_SSL", "IMGUP_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    """Point the config commands at a temporary file."""
    path = tmp_path / "config.yaml"
    with patch("imgup.cli.config_cmd.CONFIG_FILE", path):
        yield path


def _write_config(path: Path) -> Config:
    cfg = Config(
        default_profile="default",
        profiles={
            "default": Profile(url="https://img.example.org"),
            "dev": Profile(url="http://localhost:3333", verify_ssl=False, workers=2),
        },
    )
    cfg.save(path)
    return cfg


class TestConfigInit:
    """Tests for config init command."""

    def test_config_init_new(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(
            cli,
            ["config", "init", "--url", "https://img.example.org/", "--quality", "0.5"],
        )

        assert result.exit_code == 0, result.output
        assert "Configuration saved" in result.output
        cfg = Config.load(config_file)
        assert cfg.default_profile == "default"
        profile = cfg.get_profile()
        assert profile.url == "https://img.example.org"
        assert profile.quality == 0.5
        assert profile.image_format == "WEBP"

    def test_config_init_second_profile_keeps_default(
        self, runner: CliRunner, config_file: Path
    ) -> None:
        _write_config(config_file)

        result = runner.invoke(
            cli,
            [
                "config",
                "init",
                "--url",
                "https://staging.example.org",
                "--profile",
                "staging",
                "--format",
                "png",
                "--no-verify-ssl",
            ],
        )

        assert result.exit_code == 0, result.output
        cfg = Config.load(config_file)
        assert cfg.default_profile == "default"
        staging = cfg.get_profile("staging")
        assert staging.image_format == "PNG"
        assert staging.verify_ssl is False

    def test_config_init_existing_profile_no_force(
        self, runner: CliRunner, config_file: Path
    ) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "init", "--url", "https://new.example.org"])

        assert result.exit_code == 1
        assert "already exists" in _flat(result.output)
        assert Config.load(config_file).get_profile().url == "https://img.example.org"

    def test_config_init_with_force(self, runner: CliRunner, config_file: Path) -> None:
        _write_config(config_file)

        result = runner.invoke(
            cli, ["config", "init", "--url", "https://new.example.org", "--force"]
        )

        assert result.exit_code == 0, result.output
        assert Config.load(config_file).get_profile().url == "https://new.example.org"

    def test_config_init_invalid_url(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["config", "init", "--url", "not-a-url"])

        assert result.exit_code == 1
        assert "Invalid URL" in _flat(result.output)
        assert not config_file.exists()

    def test_config_init_prompts_for_url(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["config", "init"], input="https://typed.example.org\n")

        assert result.exit_code == 0, result.output
        assert Config.load(config_file).get_profile().url == "https://typed.example.org"


class TestConfigShow:
    """Tests for config show command."""

    def test_show_without_config(self, runner: CliRunner, config_file: Path) -> None:
        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 1
        assert "No configuration found" in result.output

    def test_show_table(self, runner: CliRunner, config_file: Path) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 0, result.output
        assert "Profile: default (default)" in result.output
        assert "Profile: dev" in result.output
        assert "https://img.example.org/uploads" in result.output

    def test_show_json(self, runner: CliRunner, config_file: Path) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "show", "-o", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["default_profile"] == "default"
        assert data["profiles"] == ["default", "dev"]
        assert data["profile_details"]["dev"]["workers"] == 2

    def test_show_malformed_config(self, runner: CliRunner, config_file: Path) -> None:
        config_file.write_text("profiles: [broken\n")

        result = runner.invoke(cli, ["config", "show"])

        assert result.exit_code == 1
        assert "Failed to load config" in _flat(result.output)


class TestConfigProfiles:
    """Tests for use-profile and remove-profile commands."""

    def test_use_profile(self, runner: CliRunner, config_file: Path) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "use-profile", "dev"])

        assert result.exit_code == 0, result.output
        assert Config.load(config_file).default_profile == "dev"

    def test_use_missing_profile(self, runner: CliRunner, config_file: Path) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "use-profile", "prod"])

        assert result.exit_code == 1
        assert "Available profiles: default, dev" in result.output

    def test_remove_default_profile_promotes_next(
        self, runner: CliRunner, config_file: Path
    ) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "remove-profile", "default"])

        assert result.exit_code == 0, result.output
        cfg = Config.load(config_file)
        assert list(cfg.profiles) == ["dev"]
        assert cfg.default_profile == "dev"

    def test_remove_missing_profile(self, runner: CliRunner, config_file: Path) -> None:
        _write_config(config_file)

        result = runner.invoke(cli, ["config", "remove-profile", "nope"])

        assert result.exit_code == 1
