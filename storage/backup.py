"""Daily JSON snapshots of the task collection."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from pathlib import Path

SNAPSHOT_PREFIX = "tasks_"
SNAPSHOT_SUFFIX = ".json"


def _snapshot_date(path: Path) -> date | None:
    stem = path.stem
    if not stem.startswith(SNAPSHOT_PREFIX):
        return None
    try:
        return datetime.strptime(stem[len(SNAPSHOT_PREFIX):], "%Y-%m-%d").date()
    except ValueError:
        return None


def write_daily_snapshot(
    payload: str,
    backup_dir: str | Path,
    *,
    keep_days: int = 7,
) -> Path | None:
    """Write today's snapshot once and drop snapshots older than ``keep_days``.

    Returns the created file, or ``None`` when today's snapshot already exists.
    """

    folder = Path(backup_dir)
    folder.mkdir(parents=True, exist_ok=True)

    today = datetime.now().date()
    destination = folder / f"{SNAPSHOT_PREFIX}{today.isoformat()}{SNAPSHOT_SUFFIX}"

    created: Path | None = None
    if not destination.exists():
        tmp = destination.with_suffix(".tmp")
        tmp.write_text(payload, encoding="utf-8")
        tmp.replace(destination)
        created = destination

    if keep_days > 0:
        cutoff = today - timedelta(days=keep_days - 1)
        for file in folder.glob(f"{SNAPSHOT_PREFIX}*{SNAPSHOT_SUFFIX}"):
            taken = _snapshot_date(file)
            if taken and taken < cutoff:
                try:
                    file.unlink()
                except OSError:
                    pass

    return created


__all__ = ["write_daily_snapshot"]
