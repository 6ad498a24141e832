"""Client settings loaded from YAML with environment overrides."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

import yaml

LOGGER = logging.getLogger("genai.config")

DEFAULT_CONFIG_PATH = "configs/client.yaml"

_ENV_OVERRIDES = {
    "base_url": "GENAI_BASE_URL",
    "api_version": "GENAI_API_VERSION",
    "model": "GENAI_MODEL",
    "api_key": "GENAI_API_KEY",
    "timeout": "GENAI_TIMEOUT",
}


@dataclass(frozen=True)
class ClientSettings:
    """Where and how to reach the generation endpoint."""
    base_url: str = "https://generativelanguage.googleapis.com"
    api_version: str = "v1beta"
    model: str = "gemini-pro"
    api_key: str | None = None
    timeout: float = 120.0

    def endpoint(self, method: str) -> str:
        """URL for a model method such as ``generateContent``."""
        return f"{self.base_url.rstrip('/')}/{self.api_version}/models/{self.model}:{method}"


def load_cfg(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"Config {path} must be a mapping, got {type(cfg).__name__}")
    return cfg


def load_settings(path: str = DEFAULT_CONFIG_PATH) -> ClientSettings:
    """
    Build settings from a YAML file, then apply GENAI_* environment overrides.

    Args:
        path: YAML config path. A missing file means built-in defaults.

    Raises:
        ValueError: the file is not a mapping, a key is null, or timeout is not a number.
    """
    settings = ClientSettings()
    if Path(path).exists():
        cfg = load_cfg(path)
        unknown = set(cfg) - set(_ENV_OVERRIDES)
        if unknown:
            LOGGER.warning("Ignoring unknown config keys in %s: %s", path, sorted(unknown))
        known = {k: v for k, v in cfg.items() if k in _ENV_OVERRIDES}
        nulls = sorted(k for k, v in known.items() if v is None and k != "api_key")
        if nulls:
            raise ValueError(f"Config {path} leaves {', '.join(nulls)} empty")
        settings = replace(settings, **known)
    else:
        LOGGER.debug("Config file %s not found; using defaults", path)

    env = {field: os.getenv(var) for field, var in _ENV_OVERRIDES.items()}
    settings = replace(settings, **{k: v for k, v in env.items() if v is not None})
    try:
        timeout = float(settings.timeout)
    except (TypeError, ValueError) as e:
        raise ValueError(f"timeout must be a number (config {path} or GENAI_TIMEOUT), got {settings.timeout!r}") from e
    return replace(settings, timeout=timeout)
