"""Tests for environment-backed settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from quiesce.config import ConfigurationError, QuiesceSettings, reset_default_values


def test_defaults_without_environment():
    settings = QuiesceSettings.from_env()

    assert settings.logon_warmup_seconds == 300
    assert settings.teardown_delay_seconds == 90
    assert settings.catalog_path is None
    assert settings.snapshot_path == Path("quiesce_snapshot.json")
    assert settings.powershell == "powershell.exe"
    assert settings.command_timeout_seconds is None


def test_environment_overrides(monkeypatch, tmp_path):
    monkeypatch.setenv("QUIESCE_LOGON_WARMUP_SECONDS", "60")
    monkeypatch.setenv("QUIESCE_TEARDOWN_DELAY_SECONDS", "0")
    monkeypatch.setenv("QUIESCE_CATALOG_PATH", str(tmp_path / "catalog.json"))
    monkeypatch.setenv("QUIESCE_POWERSHELL", "pwsh")
    monkeypatch.setenv("QUIESCE_COMMAND_TIMEOUT_SECONDS", "120")

    settings = QuiesceSettings.from_env()

    assert settings.logon_warmup_seconds == 60
    assert settings.teardown_delay_seconds == 0
    assert settings.catalog_path == tmp_path / "catalog.json"
    assert settings.powershell == "pwsh"
    assert settings.command_timeout_seconds == 120


def test_negative_delay_is_rejected(monkeypatch):
    monkeypatch.setenv("QUIESCE_TEARDOWN_DELAY_SECONDS", "-5")

    with pytest.raises(ConfigurationError, match="non-negative"):
        QuiesceSettings.from_env()


def test_dotenv_file_supplies_defaults(tmp_path):
    (tmp_path / ".env").write_text("# quiesce\nexport QUIESCE_POWERSHELL='pwsh.exe'\nQUIESCE_LOGON_WARMUP_SECONDS=120\n")
    reset_default_values()

    settings = QuiesceSettings.from_env()

    assert settings.powershell == "pwsh.exe"
    assert settings.logon_warmup_seconds == 120


def test_environment_wins_over_dotenv(monkeypatch, tmp_path):
    (tmp_path / ".env").write_text("QUIESCE_POWERSHELL=pwsh.exe\n")
    monkeypatch.setenv("QUIESCE_POWERSHELL", "powershell.exe")
    reset_default_values()

    assert QuiesceSettings.from_env().powershell == "powershell.exe"
