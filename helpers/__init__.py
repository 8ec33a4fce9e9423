"""Date and text parsing helpers."""
