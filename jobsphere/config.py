"""Load env and YAML configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from jobsphere.errors import ConfigError
from jobsphere.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "jobsphere.yaml"
SEED_PATH: Path = CONFIG_DIR / "seed.yaml"

BACKEND_MODES: tuple[str, ...] = ("auto", "supabase", "memory")

DEFAULT_SETTINGS: dict[str, Any] = {
    "app": {
        "title": "JobSphere",
    },
    "backend": {
        "request_timeout": 15,
    },
    "jobs": {
        "types": ["Full-time", "Part-time", "Contract", "Internship", "Remote"],
        "recommended_limit": 4,
        "description_preview": 150,
    },
    "applicants": {
        "experience_preview": 200,
    },
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Recursively overlay *override* onto a copy of *base*."""
    merged = copy.deepcopy(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _merge(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Built-in defaults overlaid with ``config/jobsphere.yaml`` when present."""
    path = path or SETTINGS_PATH
    if not path.exists():
        log.debug("No settings file at %s, using defaults", path)
        return copy.deepcopy(DEFAULT_SETTINGS)

    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the top level")

    return _merge(DEFAULT_SETTINGS, data)


def load_seed(path: Path | None = None) -> dict[str, Any]:
    """Demo accounts and records for the in-memory backend."""
    path = path or SEED_PATH
    if not path.exists():
        log.warning("Seed file %s not found; demo backend starts empty", path)
        return {}
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def backend_mode() -> str:
    mode = get_env("JOBSPHERE_BACKEND", "auto").lower()
    if mode not in BACKEND_MODES:
        raise ConfigError(
            f"JOBSPHERE_BACKEND must be one of {', '.join(BACKEND_MODES)} (got {mode!r})"
        )
    return mode


def supabase_credentials() -> tuple[str, str]:
    return get_env("SUPABASE_URL"), get_env("SUPABASE_ANON_KEY")


def supabase_configured() -> bool:
    url, key = supabase_credentials()
    return bool(url and key)
