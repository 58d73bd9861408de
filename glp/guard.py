"""Argument guards used when building request models."""

from typing import TypeVar

T = TypeVar("T")


def not_empty(value: T, name: str) -> T:
    """Return value unchanged, or raise ValueError if it is None or empty."""
    if value is None or (hasattr(value, "__len__") and len(value) == 0):  # type: ignore[arg-type]
        raise ValueError(f"{name} cannot be empty")
    return value
