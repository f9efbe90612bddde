"""Core configuration, error and logging helpers."""
