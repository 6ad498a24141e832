from __future__ import annotations

from pathlib import Path

import pytest

from generativeai_client.common.config import ClientSettings, load_settings


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("GENAI_BASE_URL", "GENAI_API_VERSION", "GENAI_MODEL", "GENAI_API_KEY", "GENAI_TIMEOUT"):
        monkeypatch.delenv(var, raising=False)


def test_missing_file_uses_defaults(tmp_path: Path) -> None:
    assert load_settings(str(tmp_path / "absent.yaml")) == ClientSettings()


def test_yaml_values_are_read(tmp_path: Path) -> None:
    cfg = tmp_path / "client.yaml"
    cfg.write_text("model: gemini-1.5-flash\ntimeout: 30\nextra_key: 1\n", encoding="utf-8")
    settings = load_settings(str(cfg))
    assert settings.model == "gemini-1.5-flash"
    assert settings.timeout == 30.0
    assert settings.api_version == "v1beta"


def test_env_overrides_yaml(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    cfg = tmp_path / "client.yaml"
    cfg.write_text("model: from-yaml\n", encoding="utf-8")
    monkeypatch.setenv("GENAI_MODEL", "from-env")
    monkeypatch.setenv("GENAI_API_KEY", "k")
    monkeypatch.setenv("GENAI_TIMEOUT", "2.5")
    settings = load_settings(str(cfg))
    assert settings.model == "from-env"
    assert settings.api_key == "k"
    assert settings.timeout == 2.5


def test_empty_yaml_is_defaults(tmp_path: Path) -> None:
    cfg = tmp_path / "client.yaml"
    cfg.write_text("", encoding="utf-8")
    assert load_settings(str(cfg)) == ClientSettings()


def test_endpoint_joins_model_method() -> None:
    settings = ClientSettings(base_url="https://example.test/", api_version="v1", model="m")
    assert settings.endpoint("countTokens") == "https://example.test/v1/models/m:countTokens"


def test_repo_config_loads() -> None:
    settings = load_settings()
    assert settings.model == "gemini-pro"


def test_non_mapping_yaml_is_rejected(tmp_path: Path) -> None:
    cfg = tmp_path / "client.yaml"
    cfg.write_text("- model\n- timeout\n", encoding="utf-8")
    with pytest.raises(ValueError, match="must be a mapping"):
        load_settings(str(cfg))


def test_null_timeout_is_rejected(tmp_path: Path) -> None:
    cfg = tmp_path / "client.yaml"
    cfg.write_text("timeout:\n", encoding="utf-8")
    with pytest.raises(ValueError, match="timeout"):
        load_settings(str(cfg))


def test_null_api_key_means_no_key(tmp_path: Path) -> None:
    cfg = tmp_path / "client.yaml"
    cfg.write_text("api_key:\n", encoding="utf-8")
    assert load_settings(str(cfg)).api_key is None


def test_non_numeric_timeout_env_is_rejected(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("GENAI_TIMEOUT", "soon")
    with pytest.raises(ValueError, match="GENAI_TIMEOUT"):
        load_settings(str(tmp_path / "absent.yaml"))
