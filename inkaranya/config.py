"""Load environment and UI vocabulary configuration."""
from __future__ import annotations

import copy
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from inkaranya.log import get_logger

log = get_logger(__name__)

load_dotenv()

ROOT_DIR: Path = Path(__file__).resolve().parent.parent
CONFIG_DIR: Path = ROOT_DIR / "config"
SETTINGS_PATH: Path = CONFIG_DIR / "settings.yaml"

DEFAULT_API_URL = "https://service-2-backend-production.up.railway.app/api"
DEFAULT_TIMEOUT = 15.0
TOKEN_FILE_NAME = "session.json"
TOKEN_KEY = "token"

# Used when settings.yaml is missing or omits a key.
DEFAULT_SETTINGS: dict[str, Any] = {
    "opportunity_types": [
        "full-time", "part-time", "contract", "internship", "volunteer",
        "project", "research", "mentorship", "workshop",
    ],
    "categories": [
        "technology", "business", "design", "marketing", "education",
        "healthcare", "non-profit",
    ],
    "location_types": ["remote", "on-site", "hybrid"],
    "industries": [
        "Technology", "Finance", "Healthcare", "Education", "Entertainment",
        "Automotive",
    ],
    "sort_options": {
        "recent": "Most Recent",
        "popular": "Most Popular",
        "salary": "Highest Salary",
        "deadline": "Deadline",
    },
    "work_modes": ["remote", "on-site", "hybrid"],
    "interview_types": ["video", "phone", "in-person"],
    "skill_levels": ["beginner", "intermediate", "advanced", "expert"],
    "skill_categories": ["technical", "soft", "language", "creative", "other"],
    "interest_categories": [
        "technology", "business", "arts", "science", "social-impact", "other",
    ],
    "interest_levels": ["casual", "moderate", "passionate", "professional"],
}


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def api_base_url() -> str:
    return (get_env("INKARANYA_API_URL") or DEFAULT_API_URL).rstrip("/")


def request_timeout() -> float:
    raw = get_env("INKARANYA_TIMEOUT")
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        return float(raw)
    except ValueError:
        log.warning("Ignoring non-numeric INKARANYA_TIMEOUT=%r", raw)
        return DEFAULT_TIMEOUT


def data_dir() -> Path:
    override = get_env("INKARANYA_DATA_DIR")
    return Path(override) if override else ROOT_DIR / "data"


def token_path() -> Path:
    return data_dir() / TOKEN_FILE_NAME


def persist_token() -> bool:
    """Keep the token in a shared file instead of per session (single-user only)."""
    return get_env("INKARANYA_PERSIST_TOKEN").lower() in ("1", "true", "yes")


def load_settings(path: Path | None = None) -> dict[str, Any]:
    """Built-in vocabularies, overridden key by key from settings.yaml."""
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    path = path or SETTINGS_PATH
    if not path.exists():
        return settings
    with open(path, "r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        log.warning("%s is not a mapping; using defaults", path.name)
        return settings
    settings.update(data)
    return settings
