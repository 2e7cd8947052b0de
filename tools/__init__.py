"""Offline tools: headless recording."""
