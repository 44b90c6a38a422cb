"""Exception types raised by the address cache."""
from __future__ import annotations


class AddressCacheError(Exception):
    """Base error for the address cache package."""


class InvalidConfigError(AddressCacheError, ValueError):
    """Raised when a cache is constructed with an unusable configuration."""
