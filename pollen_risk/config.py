from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


def _project_root() -> Path:
    # pollen_risk/config.py -> pollen_risk -> project root
    return Path(__file__).resolve().parents[1]


def _getenv_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return default if value is None or value == "" else value


def _getenv_path(name: str, default: Path) -> Path:
    value = os.getenv(name, "").strip()
    if not value:
        return default
    return Path(value).expanduser()


@dataclass(frozen=True)
class Settings:
    profile_path: Path
    journal_path: Path
    log_level: str
    lang: str


def load_settings() -> Settings:
    data_dir = _project_root() / "db"
    return Settings(
        profile_path=_getenv_path("POLLEN_RISK_PROFILE_PATH", data_dir / "profile.json"),
        journal_path=_getenv_path("POLLEN_RISK_JOURNAL_PATH", data_dir / "journal.csv"),
        log_level=_getenv_str("POLLEN_RISK_LOG_LEVEL", "WARNING").upper(),
        lang=_getenv_str("POLLEN_RISK_LANG", "en"),
    )
