"""Settings tests."""

import os
from pathlib import Path

import pytest

from globwatch.config import Settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Isolate settings from the developer's environment and .env file."""
    for key in list(os.environ):
        if key.startswith("GLOBWATCH_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


def test_defaults() -> None:
    """Defaults watch everything under the current directory."""
    settings = Settings()

    assert settings.pattern == "**/*"
    assert settings.recursive is True
    assert settings.threshold_ms == 150.0
    assert settings.modify_threshold_ms is None
    assert settings.strict_delete_dedup is False
    assert settings.root_path == Path(os.getcwd())


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Prefixed environment variables configure the watch."""
    monkeypatch.setenv("GLOBWATCH_PATTERN", "src/**/*.py")
    monkeypatch.setenv("GLOBWATCH_ROOT", str(tmp_path / "project"))
    monkeypatch.setenv("GLOBWATCH_RECURSIVE", "false")
    monkeypatch.setenv("GLOBWATCH_THRESHOLD_MS", "250")
    monkeypatch.setenv("GLOBWATCH_STRICT_DELETE_DEDUP", "true")

    settings = Settings()

    assert settings.pattern == "src/**/*.py"
    assert settings.root_path == tmp_path / "project"
    assert settings.recursive is False
    assert settings.threshold_ms == 250.0
    assert settings.strict_delete_dedup is True


def test_env_file(tmp_path: Path) -> None:
    """Settings are read from a .env file in the working directory."""
    (tmp_path / ".env").write_text("GLOBWATCH_MODIFY_THRESHOLD_MS=900\n")

    assert Settings().modify_threshold_ms == 900.0
