"""
Tests for the wizard CLI.
"""

import pytest
from typer.testing import CliRunner

from wizard_app.config import get_settings
from wizard_app.main import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_version():
    result = runner.invoke(app, ["version"])
    assert result.exit_code == 0
    assert "Onboarding Wizard version 1.0.0" in result.output


def test_presets_table():
    result = runner.invoke(app, ["presets"])
    assert result.exit_code == 0
    assert "Component Presets" in result.output
    assert "default" in result.output


def test_health_in_memory(monkeypatch):
    monkeypatch.delenv("RECORD_STORE_URL", raising=False)
    result = runner.invoke(app, ["health"])
    assert result.exit_code == 0
    assert "All checks passed!" in result.output


def test_health_bad_record_store_url(monkeypatch):
    monkeypatch.setenv("RECORD_STORE_URL", "records.local")
    result = runner.invoke(app, ["health"])
    assert result.exit_code == 1
    assert "must start with http" in result.output


def test_health_unknown_default_preset(monkeypatch):
    monkeypatch.setenv("DEFAULT_PRESET", "sideways")
    result = runner.invoke(app, ["health"])
    assert result.exit_code == 1


def test_run_rejects_unknown_preset():
    result = runner.invoke(app, ["run", "--preset", "sideways"])
    assert result.exit_code == 1
    assert "Unknown preset: sideways" in result.output
