"""Internal helpers for docs2json."""
