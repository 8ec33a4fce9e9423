"""Simple JSON-backed configuration store."""
from __future__ import annotations

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from core.settings import CONFIG_PATH

VIEWS = ("day", "week", "history")


@dataclass
class AppConfig:
    """User preferences persisted to ``config.json``."""

    # the user allowed host notifications at some point
    notifications_enabled: bool = False
    sound_enabled: bool = True
    last_view: str = "day"


def _ensure_parent(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def _load_raw(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


def load_config(path: Optional[Path] = None) -> AppConfig:
    target = path or CONFIG_PATH
    data = _load_raw(target)
    defaults = AppConfig()
    last_view = data.get("last_view")
    return AppConfig(
        notifications_enabled=bool(data.get("notifications_enabled", defaults.notifications_enabled)),
        sound_enabled=bool(data.get("sound_enabled", defaults.sound_enabled)),
        last_view=last_view if last_view in VIEWS else defaults.last_view,
    )


def save_config(config: AppConfig, path: Optional[Path] = None) -> None:
    target = path or CONFIG_PATH
    _ensure_parent(target)
    payload = json.dumps(asdict(config), ensure_ascii=False, indent=2, sort_keys=True)
    tmp = target.with_suffix(".tmp")
    try:
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(target)
    finally:
        if tmp.exists():
            try:
                tmp.unlink()
            except OSError:
                pass


def update_config(path: Optional[Path] = None, **changes: Any) -> AppConfig:
    target = path or CONFIG_PATH
    cfg = load_config(target)
    known = {f.name for f in fields(AppConfig)}
    for key, value in changes.items():
        if key in known:
            setattr(cfg, key, value)
    save_config(cfg, target)
    return cfg


__all__ = ["AppConfig", "VIEWS", "load_config", "save_config", "update_config"]
