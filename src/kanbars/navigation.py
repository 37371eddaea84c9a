"""Global selection index over the concatenated lanes of a Board."""

from __future__ import annotations


def move_up(index: int, total: int) -> int:
    """Previous ticket, wrapping from the first to the last."""
    if total <= 0:
        return index
    if index > 0:
        return index - 1
    return total - 1


def move_down(index: int, total: int) -> int:
    """Next ticket, wrapping from the last to the first."""
    if total <= 0:
        return index
    return (index + 1) % total


def clamp_selection(index: int, total: int) -> int:
    """Keep a positional selection valid after the board was replaced."""
    if total <= 0:
        return 0
    return max(0, min(index, total - 1))
