"""
OrderedCursor abstract base class for positioned key-value cursors.
"""

from abc import ABC, abstractmethod


class OrderedCursor(ABC):
    """
    A cursor over one container of byte keys in ascending byte order.

    The range scan engine only ever drives a cursor through this
    interface, so any ordered store that can seek and step both ways
    can back a series.

    A cursor is either positioned on a record or unpositioned. Stepping
    past either end leaves it unpositioned.
    """

    @abstractmethod
    def seek(self, key: bytes) -> bool:
        """
        Position on the first key greater than or equal to ``key``.

        Args:
            key: The key to seek to.

        Returns:
            True if positioned, False if every stored key is smaller.
        """
        pass

    @abstractmethod
    def key(self) -> bytes:
        """Return the key at the current position."""
        pass

    @abstractmethod
    def value(self) -> bytes:
        """Return the value at the current position."""
        pass

    @abstractmethod
    def next(self) -> bool:
        """
        Step to the next larger key.

        Returns:
            True if still positioned.
        """
        pass

    @abstractmethod
    def prev(self) -> bool:
        """
        Step to the next smaller key.

        Returns:
            True if still positioned.
        """
        pass
