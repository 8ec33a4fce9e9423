"""Centralized application configuration."""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional
import os
import sys


def get_default_data_dir(
    app_name: str,
    *,
    platform: Optional[str] = None,
    env: Optional[Mapping[str, str]] = None,
    home: Optional[Path] = None,
) -> Path:
    """Return an OS-specific user data directory for ``app_name``."""

    platform_id = (platform or sys.platform).lower()
    environ = dict(env or os.environ)
    home_dir = Path(home or Path.home())
    sanitized = app_name.strip() or "app"
    sanitized = sanitized.replace("/", "-").replace("\\", "-")

    if platform_id.startswith("win"):
        base = Path(environ.get("APPDATA") or home_dir / "AppData" / "Roaming")
    elif platform_id == "darwin":
        base = Path(environ.get("APPDATA") or home_dir / "Library" / "Application Support")
    else:
        base = Path(environ.get("XDG_DATA_HOME") or home_dir / ".local" / "share")

    return (base.expanduser() / sanitized)


APP_NAME = "MotiOn"


DATA_DIR = Path(os.environ.get("MOTION_DATA_DIR") or get_default_data_dir(APP_NAME))
LOG_DIR = DATA_DIR / "logs"
BACKUP_DIR = DATA_DIR / "backups"

for _dir in (DATA_DIR, LOG_DIR, BACKUP_DIR):
    _dir.mkdir(parents=True, exist_ok=True)


DB_PATH = DATA_DIR / "app.db"
CONFIG_PATH = DATA_DIR / "config.json"
LOG_PATH = LOG_DIR / "motion.log"


@dataclass(frozen=True)
class ThemeColors:
    safe_surface_bg: str = "#F1F5F9"
    text_subtle: str = "#64748B"
    accent: str = "#4F46E5"
    done_text: str = "#94A3B8"
    # heatmap levels 0..4
    heat_levels: tuple[str, ...] = ("#E2E8F0", "#C7D2FE", "#A5B4FC", "#818CF8", "#4F46E5")


@dataclass(frozen=True)
class UISettings:
    app_title: str = APP_NAME
    theme_mode: str = "system"
    color_scheme_seed: str = "#4F46E5"
    window_min_width: int = 420
    window_min_height: int = 640
    theme: ThemeColors = ThemeColors()


UI = UISettings()


@dataclass(frozen=True)
class TaskSettings:
    max_text_length: int = 100
    untimed_sort_key: str = "23:59"


TASKS = TaskSettings()


@dataclass(frozen=True)
class AlarmSettings:
    tick_interval_ms: int = 1000
    auto_stop_sec: float = 60.0
    pattern_period_sec: float = 2.0
    volume: float = 0.1
    sample_rate: int = 44100
    notification_title: str = "MOTI-ON: It's Time!"


ALARMS = AlarmSettings()


@dataclass(frozen=True)
class HistorySettings:
    heatmap_days: int = 28
    xp_per_level: int = 10


HISTORY = HistorySettings()


@dataclass(frozen=True)
class BackupSettings:
    enabled: bool = True
    directory: Path = BACKUP_DIR
    keep_days: int = 7


BACKUP = BackupSettings()


__all__ = [
    "APP_NAME",
    "DATA_DIR",
    "LOG_DIR",
    "BACKUP_DIR",
    "DB_PATH",
    "CONFIG_PATH",
    "LOG_PATH",
    "UI",
    "TASKS",
    "ALARMS",
    "HISTORY",
    "BACKUP",
    "get_default_data_dir",
]
