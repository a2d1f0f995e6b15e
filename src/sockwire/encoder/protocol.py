"""
Protocol definition for encoders.

An encoder turns a sequence of typed writes into one outgoing byte string and
turns one incoming byte string back into typed reads. Positional encoders
ignore the ``name`` argument; name-addressed encoders key fields by it.
"""

from typing import Iterable, Protocol, Union, runtime_checkable

RawInput = Union[bytes, bytearray, memoryview, str]
ByteValues = Union[bytes, bytearray, Iterable[int]]


@runtime_checkable
class Encoder(Protocol):
    """Protocol defining the interface for wire encoders."""

    def set_input_buffer(self, data: RawInput) -> None:
        """Store the raw response bytes; parsing is deferred to read().

        Args:
            data: The raw response. Text is encoded with the encoder's codec.
        """
        ...

    def read(self) -> None:
        """Parse the stored raw input and rewind the read position."""
        ...

    def write(self) -> None:
        """Start a write cycle by emptying the output buffer."""
        ...

    def get_output_bytes(self) -> bytes:
        """Render the output buffer to its transmittable form.

        Returns:
            The bytes to put on the wire.
        """
        ...

    def write_string(self, value: str, name: str = "") -> None: ...

    def write_short(self, value: int, name: str = "") -> None: ...

    def write_integer(self, value: int, name: str = "") -> None: ...

    def write_boolean(self, value: bool, name: str = "") -> None: ...

    def write_byte(self, value: int, name: str = "") -> None: ...

    def write_byte_array(self, value: ByteValues, name: str = "") -> None: ...

    def read_string(self, name: str = "") -> str: ...

    def read_short(self, name: str = "") -> int: ...

    def read_integer(self, name: str = "") -> int: ...

    def read_boolean(self, name: str = "") -> bool: ...

    def read_byte(self, name: str = "") -> int: ...

    def read_byte_array(self, length: int, name: str = "") -> bytes:
        """Read ``length`` bytes.

        Args:
            length: Number of bytes to read; positional formats carry no
                length prefix for byte arrays.
            name: Field name for name-addressed formats.

        Returns:
            The bytes read.
        """
        ...


def to_bytes(data: RawInput, encoding: str = "utf-8") -> bytes:
    """Normalize raw input to an immutable bytes object."""
    if isinstance(data, str):
        return data.encode(encoding)
    return bytes(data)
