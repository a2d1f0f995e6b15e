"""Positional read state shared by the binary and delimited encoders."""

from typing import Generic, Optional, Sequence, TypeVar

from sockwire.errors import EncoderStateError, OutOfRangeError

T = TypeVar("T")


class Cursor(Generic[T]):
    """Read position over a parsed input sequence.

    The cursor is unloaded until ``load()`` is called for the current raw
    input. A take that would pass the end raises OutOfRangeError and leaves
    the position unchanged.
    """

    def __init__(self):
        self._items: Optional[Sequence[T]] = None
        self._position = 0

    def load(self, items: Sequence[T]) -> None:
        self._items = items
        self._position = 0

    def unload(self) -> None:
        self._items = None
        self._position = 0

    @property
    def position(self) -> int:
        return self._position

    @property
    def items(self) -> Sequence[T]:
        if self._items is None:
            raise EncoderStateError("read() must be called before reading input")
        return self._items

    @property
    def remaining(self) -> int:
        return len(self.items) - self._position

    def take(self, count: int) -> Sequence[T]:
        """Consume ``count`` items and return them as a slice."""
        items = self.items
        if count < 0:
            raise ValueError(f"Cannot read a negative number of items: {count}")
        end = self._position + count
        if end > len(items):
            raise OutOfRangeError(
                f"Read of {count} item(s) at position {self._position} "
                f"exceeds input length {len(items)}"
            )
        chunk = items[self._position:end]
        self._position = end
        return chunk

    def next(self) -> T:
        """Consume a single item."""
        return self.take(1)[0]
