"""SQLite state store, JSON config and snapshots."""
