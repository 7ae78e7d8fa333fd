"""CLI layer for autobooks application."""
