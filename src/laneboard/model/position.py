"""Position normalization for ordered containers."""

from __future__ import annotations

from dataclasses import replace
from typing import Sequence, TypeVar

T = TypeVar("T")


def reindex(items: Sequence[T]) -> tuple[T, ...]:
    """Give every item a position equal to its index.

    Items whose position is already right are returned as-is, so a
    reindex of an already normalized container is identity-preserving.
    """
    return tuple(item if item.position == i else replace(item, position=i) for i, item in enumerate(items))


def is_normalized(items: Sequence) -> bool:
    """True if positions are exactly 0..n-1 in sequence order."""
    return all(item.position == i for i, item in enumerate(items))


def sort_by_position(items) -> list:
    """Stable sort by position; ties keep their input order."""
    return sorted(items, key=lambda item: item.position)
