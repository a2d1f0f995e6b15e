"""
Fixed-width binary encoder.

Integers are two's-complement: a short is 2 bytes and an integer 4 bytes, laid
out in the encoder's byte order. Strings carry a 2-byte length prefix in the
same byte order followed by one latin-1 byte per character. Byte arrays are
written raw, so readers must know their length out of band.

Example (big endian)::

    encoder = BigEndianEncoder()
    encoder.write()
    encoder.write_short(1)          # 00 01
    encoder.write_integer(123456)   # 00 01 e2 40
    encoder.write_string("test")    # 00 04 74 65 73 74
"""

from typing import List, Literal

from sockwire.encoder.cursor import Cursor
from sockwire.encoder.protocol import ByteValues, RawInput, to_bytes
from sockwire.errors import SerializationError

ByteOrder = Literal["big", "little"]

SHORT_SIZE = 2
INTEGER_SIZE = 4
STRING_ENCODING = "latin-1"
MAX_STRING_LENGTH = 0xFFFF


class BinaryEncoder:
    """Binary encoder parameterised by byte order."""

    def __init__(self, byteorder: ByteOrder = "big"):
        """Initialize a new binary encoder.

        Args:
            byteorder: ``"big"`` for most-significant byte first or
                ``"little"`` for least-significant byte first.

        Raises:
            ValueError: If the byte order is not recognized.
        """
        if byteorder not in ("big", "little"):
            raise ValueError(f"Unknown byte order: {byteorder!r}")
        self.byteorder = byteorder
        self._raw_input = b""
        self._output = bytearray()
        self._cursor: Cursor[int] = Cursor()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(byteorder={self.byteorder!r})"

    @property
    def raw_input(self) -> bytes:
        return self._raw_input

    @property
    def input_buffer(self) -> List[int]:
        return list(self._cursor.items)

    @property
    def output_buffer(self) -> List[int]:
        return list(self._output)

    def set_input_buffer(self, data: RawInput) -> None:
        self._raw_input = to_bytes(data, STRING_ENCODING)
        self._cursor.unload()

    def read(self) -> None:
        self._cursor.load(self._raw_input)

    def write(self) -> None:
        self._output = bytearray()

    def get_output_bytes(self) -> bytes:
        return bytes(self._output)

    def _write_int(self, value: int, size: int) -> None:
        mask = (1 << (size * 8)) - 1
        self._output += (value & mask).to_bytes(size, byteorder=self.byteorder)

    def _read_int(self, size: int, signed: bool = True) -> int:
        return int.from_bytes(
            self._cursor.take(size), byteorder=self.byteorder, signed=signed
        )

    def write_string(self, value: str, name: str = "") -> None:
        try:
            data = value.encode(STRING_ENCODING)
        except UnicodeEncodeError as e:
            raise SerializationError(
                f"String is not representable one byte per character: {value!r}"
            ) from e
        if len(data) > MAX_STRING_LENGTH:
            raise SerializationError(
                f"String of {len(data)} bytes exceeds the 16-bit length prefix"
            )
        self._write_int(len(data), SHORT_SIZE)
        self._output += data

    def write_short(self, value: int, name: str = "") -> None:
        self._write_int(value, SHORT_SIZE)

    def write_integer(self, value: int, name: str = "") -> None:
        self._write_int(value, INTEGER_SIZE)

    def write_boolean(self, value: bool, name: str = "") -> None:
        self._output.append(1 if value else 0)

    def write_byte(self, value: int, name: str = "") -> None:
        self._output.append(value & 0xFF)

    def write_byte_array(self, value: ByteValues, name: str = "") -> None:
        self._output += bytes(b & 0xFF for b in value)

    def read_string(self, name: str = "") -> str:
        length = self._read_int(SHORT_SIZE, signed=False)
        return bytes(self._cursor.take(length)).decode(STRING_ENCODING)

    def read_short(self, name: str = "") -> int:
        return self._read_int(SHORT_SIZE)

    def read_integer(self, name: str = "") -> int:
        return self._read_int(INTEGER_SIZE)

    def read_boolean(self, name: str = "") -> bool:
        return self._cursor.next() == 1

    def read_byte(self, name: str = "") -> int:
        return self._cursor.next()

    def read_byte_array(self, length: int, name: str = "") -> bytes:
        return bytes(self._cursor.take(length))


def BigEndianEncoder() -> BinaryEncoder:
    """Create a binary encoder writing the most-significant byte first."""
    return BinaryEncoder("big")


def LittleEndianEncoder() -> BinaryEncoder:
    """Create a binary encoder writing the least-significant byte first."""
    return BinaryEncoder("little")
