"""Top-level devserve commands."""
