"""Configuration package exports."""

from .models import DEFAULT_TIMEOUT, STDOUT_DESTINATION, SyncSettings

__all__ = ["DEFAULT_TIMEOUT", "STDOUT_DESTINATION", "SyncSettings"]
