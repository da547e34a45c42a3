"""
Logical time source for vote timestamps.

Votes are stamped with a block height rather than wall-clock time.
"""

from typing import Protocol, runtime_checkable


@runtime_checkable
class BlockHeightSource(Protocol):
    """Anything that can report the current block height."""

    def current_height(self) -> int: ...


class BlockHeightCounter:
    """Manually advanced block height, starting at ``start``."""

    def __init__(self, start: int = 0):
        if start < 0:
            raise ValueError("Block height cannot be negative")
        self._height = start

    def current_height(self) -> int:
        return self._height

    def advance(self, blocks: int = 1) -> int:
        """Move the height forward and return the new height."""
        if blocks < 0:
            raise ValueError("Block height cannot move backwards")
        self._height += blocks
        return self._height
