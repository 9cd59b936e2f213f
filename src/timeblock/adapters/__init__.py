"""Adapters - I/O implementations of ports."""

from .craft_api import CraftAdapter, CraftAPIError, ConfigurationError

__all__ = [
    "CraftAdapter",
    "CraftAPIError",
    "ConfigurationError",
]
