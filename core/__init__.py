"""Application settings, metadata tables and logging."""
