"""
JSON encoder.

Fields are addressed by name: every write stores ``output[name] = value`` and
the whole mapping goes out as a single JSON object. Reads look fields up by the
same names in the decoded response object::

    encoder = JSONEncoder()
    encoder.write()
    encoder.write_short(1, "id")
    encoder.write_string("test", "name")
    encoder.get_output_bytes()  # b'{"id":1,"name":"test"}'
"""

import json
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sockwire.encoder.delimited import FALSE_TOKENS
from sockwire.encoder.protocol import ByteValues, RawInput, to_bytes
from sockwire.errors import (
    DeserializationError,
    EncoderStateError,
    MissingFieldError,
    OutOfRangeError,
    SerializationError,
)

T = TypeVar("T")

TEXT_ENCODING = "utf-8"


def _integer(value: Any) -> int:
    if isinstance(value, float) and not value.is_integer():
        raise ValueError(f"{value!r} is not a whole number")
    return int(value)


def _boolean(value: Any) -> bool:
    # Same false spellings as the delimited format
    if isinstance(value, str):
        return value.strip().lower() not in FALSE_TOKENS
    return bool(value)


def _byte_values(value: Any) -> bytes:
    if not isinstance(value, list):
        raise TypeError(f"expected a list of byte values, got {type(value).__name__}")
    return bytes(value)


class JSONEncoder:
    """Name-addressed encoder producing one JSON object per message."""

    def __init__(self):
        self._raw_input = b""
        self._input: Optional[Dict[str, Any]] = None
        self._output: Dict[str, Any] = {}

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"

    @property
    def raw_input(self) -> bytes:
        return self._raw_input

    @property
    def input_buffer(self) -> Dict[str, Any]:
        return dict(self._parsed())

    @property
    def output_buffer(self) -> Dict[str, Any]:
        return dict(self._output)

    def set_input_buffer(self, data: RawInput) -> None:
        self._raw_input = to_bytes(data, TEXT_ENCODING)
        self._input = None

    def read(self) -> None:
        """Decode the raw input into a mapping.

        Raises:
            DeserializationError: If the input is not valid UTF-8 JSON or the
                top-level value is not an object.
        """
        try:
            document = json.loads(self._raw_input.decode(TEXT_ENCODING))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DeserializationError(f"Invalid JSON input: {e}") from e
        if not isinstance(document, dict):
            raise DeserializationError(
                f"Expected a JSON object, got {type(document).__name__}"
            )
        self._input = document

    def write(self) -> None:
        self._output = {}

    def get_output_bytes(self) -> bytes:
        """Serialize the output mapping.

        Raises:
            SerializationError: If a stored value cannot be rendered as JSON.
        """
        try:
            return json.dumps(self._output, separators=(",", ":")).encode(TEXT_ENCODING)
        except (TypeError, ValueError) as e:
            raise SerializationError(f"Failed to serialize output buffer: {e}") from e

    def write_string(self, value: str, name: str = "") -> None:
        self._output[name] = value

    def write_short(self, value: int, name: str = "") -> None:
        self._output[name] = value

    def write_integer(self, value: int, name: str = "") -> None:
        self._output[name] = value

    def write_boolean(self, value: bool, name: str = "") -> None:
        self._output[name] = value

    def write_byte(self, value: int, name: str = "") -> None:
        self._output[name] = value

    def write_byte_array(self, value: ByteValues, name: str = "") -> None:
        """Store a byte array as a list of integers under ``name``."""
        self._output[name] = [b & 0xFF for b in value]

    def write_array(self, value: List[Any], name: str = "") -> None:
        """Store an untyped, possibly nested, array under ``name``."""
        self._output[name] = list(value)

    def _parsed(self) -> Dict[str, Any]:
        if self._input is None:
            raise EncoderStateError("read() must be called before reading input")
        return self._input

    def _field(self, name: str, convert: Callable[[Any], T]) -> T:
        document = self._parsed()
        if name not in document:
            raise MissingFieldError(name)
        value = document[name]
        try:
            return convert(value)
        except (TypeError, ValueError) as e:
            raise DeserializationError(f"Field {name!r} holds an unusable value {value!r}") from e

    def read_string(self, name: str = "") -> str:
        return self._field(name, str)

    def read_short(self, name: str = "") -> int:
        return self._field(name, _integer)

    def read_integer(self, name: str = "") -> int:
        return self._field(name, _integer)

    def read_boolean(self, name: str = "") -> bool:
        return self._field(name, _boolean)

    def read_byte(self, name: str = "") -> int:
        return self._field(name, _integer)

    def read_byte_array(self, length: int, name: str = "") -> bytes:
        data = self._field(name, _byte_values)
        if len(data) < length:
            raise OutOfRangeError(
                f"Field {name!r} holds {len(data)} byte(s), {length} requested"
            )
        return data[:length]

    def read_array(self, name: str = "") -> List[Any]:
        return self._field(name, list)
