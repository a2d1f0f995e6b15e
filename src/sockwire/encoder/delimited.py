"""
Delimited text encoder.

Every value is rendered to text and the fields are joined with a delimiter,
``|`` by default::

    encoder = StringEncoder()
    encoder.write()
    encoder.write_short(1)
    encoder.write_integer(123456)
    encoder.write_string("test")
    encoder.get_output_bytes()  # b"1|123456|test"
"""

from typing import List

from sockwire.encoder.cursor import Cursor
from sockwire.encoder.protocol import ByteValues, RawInput, to_bytes
from sockwire.errors import DeserializationError

DEFAULT_DELIMITER = "|"
TEXT_ENCODING = "utf-8"

FALSE_TOKENS = ("0", "false")


class StringEncoder:
    """Positional encoder joining stringified fields with a delimiter."""

    def __init__(self, delimiter: str = DEFAULT_DELIMITER):
        """Initialize a new string encoder.

        Args:
            delimiter: Field separator. An empty value falls back to ``|``.
        """
        self.delimiter = delimiter or DEFAULT_DELIMITER
        self._raw_input = b""
        self._output: List[str] = []
        self._cursor: Cursor[str] = Cursor()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(delimiter={self.delimiter!r})"

    @property
    def raw_input(self) -> bytes:
        return self._raw_input

    @property
    def input_buffer(self) -> List[str]:
        return list(self._cursor.items)

    @property
    def output_buffer(self) -> List[str]:
        return list(self._output)

    def set_input_buffer(self, data: RawInput) -> None:
        self._raw_input = to_bytes(data, TEXT_ENCODING)
        self._cursor.unload()

    def read(self) -> None:
        try:
            text = self._raw_input.decode(TEXT_ENCODING)
        except UnicodeDecodeError as e:
            raise DeserializationError(f"Input is not valid {TEXT_ENCODING}: {e}") from e
        self._cursor.load(text.split(self.delimiter))

    def write(self) -> None:
        self._output = []

    def get_output_bytes(self) -> bytes:
        return self.delimiter.join(self._output).encode(TEXT_ENCODING)

    def write_string(self, value: str, name: str = "") -> None:
        self._output.append(str(value))

    def write_short(self, value: int, name: str = "") -> None:
        self._output.append(str(int(value)))

    def write_integer(self, value: int, name: str = "") -> None:
        self._output.append(str(int(value)))

    def write_boolean(self, value: bool, name: str = "") -> None:
        self._output.append("1" if value else "0")

    def write_byte(self, value: int, name: str = "") -> None:
        self._output.append(str(int(value)))

    def write_byte_array(self, value: ByteValues, name: str = "") -> None:
        # One token per byte keeps the format flat and positional
        self._output.extend(str(b) for b in value)

    def _read_int(self) -> int:
        token = self._cursor.next()
        try:
            return int(token)
        except ValueError as e:
            raise DeserializationError(f"Token {token!r} is not an integer") from e

    def read_string(self, name: str = "") -> str:
        return self._cursor.next()

    def read_short(self, name: str = "") -> int:
        return self._read_int()

    def read_integer(self, name: str = "") -> int:
        return self._read_int()

    def read_boolean(self, name: str = "") -> bool:
        return self._cursor.next() not in FALSE_TOKENS

    def read_byte(self, name: str = "") -> int:
        return self._read_int()

    def read_byte_array(self, length: int, name: str = "") -> bytes:
        tokens = self._cursor.take(length)
        try:
            return bytes(int(token) for token in tokens)
        except ValueError as e:
            raise DeserializationError(f"Tokens {list(tokens)!r} are not byte values") from e
