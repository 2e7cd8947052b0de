"""Configuration modules (plain dicts)."""
