"""User settings and their YAML persistence."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from .redact import redact

LOGGER = logging.getLogger(__name__)

SETTINGS_FILE = "settings.yaml"
TRACKED_FILE = "tracked_prs.json"


class AppSettings(BaseModel):
    """Credentials and CLI command templates chosen by the user."""

    github_token: str = Field("", description="Token for the GitHub REST API")
    minimax_api_key: str = Field("", description="Key for the analysis endpoint")
    primary_cli_label: str = "Claude CLI"
    primary_cli_template: str = "claude -p {context}"
    secondary_cli_label: str = "Kimi CLI"
    secondary_cli_template: str = "kimi -y -p {context}"


def home_dir() -> Path:
    """Return the directory holding settings and tracked PRs."""

    configured = os.environ.get("PRTRACKER_HOME")
    if configured:
        return Path(configured)
    return Path.home() / ".config" / "pr-tracker"


def normalize_settings(raw: dict[str, Any] | None) -> AppSettings:
    """Return settings from ``raw`` with values stripped and defaults filled.

    Blank labels fall back to their defaults; blank templates are kept so the
    dispatch layer can report them.
    """

    defaults = AppSettings()
    raw = raw or {}
    values: dict[str, str] = {}
    for name, default in defaults.model_dump().items():
        value = raw.get(name)
        text = str(value).strip() if value is not None else default.strip()
        if name.endswith("_label") and not text:
            text = default
        values[name] = text
    return AppSettings.model_validate(values)


def load_settings(path: Path | None = None) -> AppSettings:
    """Load settings from ``path``; unreadable files yield the defaults."""

    path = path or home_dir() / SETTINGS_FILE
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return normalize_settings(None)
    except (OSError, yaml.YAMLError) as exc:
        LOGGER.warning("ignoring unreadable settings file %s: %s", path, exc)
        return normalize_settings(None)
    if not isinstance(raw, dict):
        LOGGER.warning("ignoring settings file %s: expected a mapping", path)
        return normalize_settings(None)
    settings = normalize_settings(raw)
    LOGGER.debug("loaded settings from %s: %s", path, redact(settings.model_dump()))
    return settings


def save_settings(settings: AppSettings, path: Path | None = None) -> Path:
    """Write normalized ``settings`` to ``path`` and return the path."""

    path = path or home_dir() / SETTINGS_FILE
    normalized = normalize_settings(settings.model_dump())
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(
        yaml.safe_dump(normalized.model_dump(), sort_keys=True), encoding="utf-8"
    )
    return path


def resolve_api_key(settings: AppSettings) -> str:
    """Return the analysis key from settings or ``MINIMAX_API_KEY``."""

    return settings.minimax_api_key or os.environ.get("MINIMAX_API_KEY", "").strip()


def resolve_github_token(settings: AppSettings) -> str:
    """Return the GitHub token from settings or ``GITHUB_TOKEN``."""

    return settings.github_token or os.environ.get("GITHUB_TOKEN", "").strip()


__all__ = [
    "AppSettings",
    "home_dir",
    "load_settings",
    "normalize_settings",
    "resolve_api_key",
    "resolve_github_token",
    "save_settings",
]
