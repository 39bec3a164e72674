"""Per-locale dictionary documents shipped with the package."""
