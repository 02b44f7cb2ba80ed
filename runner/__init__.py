"""Smoke runner for a live static server (`python -m runner.smoke`)."""
