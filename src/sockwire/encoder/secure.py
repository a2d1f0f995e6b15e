"""
Secure encoder.

Wraps another encoder and passes its final byte stream through a reversible
transform: on the way out the inner encoder's bytes are transformed with
``encrypting=True``, on the way in the raw response is transformed with
``encrypting=False`` before the inner encoder parses it. Field values are never
inspected, so any encoder (including another SecureEncoder) can be wrapped::

    encoder = SecureEncoder(BigEndianEncoder(), "base64")

    def rot(data: bytes, encrypting: bool) -> bytes:
        shift = 1 if encrypting else -1
        return bytes((b + shift) % 256 for b in data)

    encoder = SecureEncoder(JSONEncoder(), rot)
"""

import base64
import binascii
from typing import Any, Callable, Dict, List, Union

from sockwire.encoder.protocol import ByteValues, Encoder, RawInput, to_bytes
from sockwire.errors import DeserializationError
from sockwire.telemetry import get_telemetry

Transform = Callable[[bytes, bool], bytes]
TransformSpec = Union[str, Transform]

DEFAULT_ALGORITHM = "base64"

_, _logger = get_telemetry("sockwire.encoder.secure")


def base64_transform(data: bytes, encrypting: bool) -> bytes:
    """Base64 encode when encrypting, decode otherwise."""
    if encrypting:
        return base64.b64encode(data)
    try:
        return base64.b64decode(data)
    except (binascii.Error, ValueError) as e:
        raise DeserializationError(f"Input is not valid base64: {e}") from e


BUILTIN_TRANSFORMS: Dict[str, Transform] = {
    "base64": base64_transform,
}


def resolve_transform(spec: TransformSpec) -> Transform:
    """Resolve an algorithm name or callable to a transform function.

    Args:
        spec: A built-in algorithm name (case-insensitive) or a callable
            taking ``(data, encrypting)``.

    Returns:
        The transform function. Unknown names resolve to base64.
    """
    if isinstance(spec, str):
        transform = BUILTIN_TRANSFORMS.get(spec.lower())
        if transform is None:
            _logger.warning(
                "encoder.transform_fallback", algorithm=spec, fallback=DEFAULT_ALGORITHM
            )
            transform = BUILTIN_TRANSFORMS[DEFAULT_ALGORITHM]
        return transform
    if callable(spec):
        return spec
    raise TypeError(f"Transform must be an algorithm name or a callable, got {spec!r}")


class SecureEncoder:
    """Encoder decorator transforming the inner encoder's byte stream."""

    def __init__(self, encoder: Encoder, transform: TransformSpec = DEFAULT_ALGORITHM):
        """Initialize a new secure encoder.

        Args:
            encoder: The encoder that produces and parses the plaintext.
            transform: Built-in algorithm name or ``(data, encrypting)`` callable.
        """
        self.encoder = encoder
        self.transform = resolve_transform(transform)
        self._raw_input = b""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.encoder!r})"

    @property
    def raw_input(self) -> bytes:
        return self._raw_input

    @property
    def input_buffer(self) -> Any:
        """The inner encoder's parsed input."""
        return self.encoder.input_buffer

    @property
    def output_buffer(self) -> Any:
        """The inner encoder's output, before the transform is applied."""
        return self.encoder.output_buffer

    def set_input_buffer(self, data: RawInput) -> None:
        self._raw_input = to_bytes(data)

    def read(self) -> None:
        self.encoder.set_input_buffer(self.transform(self._raw_input, False))
        self.encoder.read()

    def write(self) -> None:
        self.encoder.write()

    def get_output_bytes(self) -> bytes:
        return self.transform(self.encoder.get_output_bytes(), True)

    def write_string(self, value: str, name: str = "") -> None:
        self.encoder.write_string(value, name)

    def write_short(self, value: int, name: str = "") -> None:
        self.encoder.write_short(value, name)

    def write_integer(self, value: int, name: str = "") -> None:
        self.encoder.write_integer(value, name)

    def write_boolean(self, value: bool, name: str = "") -> None:
        self.encoder.write_boolean(value, name)

    def write_byte(self, value: int, name: str = "") -> None:
        self.encoder.write_byte(value, name)

    def write_byte_array(self, value: ByteValues, name: str = "") -> None:
        self.encoder.write_byte_array(value, name)

    def read_string(self, name: str = "") -> str:
        return self.encoder.read_string(name)

    def read_short(self, name: str = "") -> int:
        return self.encoder.read_short(name)

    def read_integer(self, name: str = "") -> int:
        return self.encoder.read_integer(name)

    def read_boolean(self, name: str = "") -> bool:
        return self.encoder.read_boolean(name)

    def read_byte(self, name: str = "") -> int:
        return self.encoder.read_byte(name)

    def read_byte_array(self, length: int, name: str = "") -> bytes:
        return self.encoder.read_byte_array(length, name)

    def write_array(self, value: List[Any], name: str = "") -> None:
        """Forward an untyped array to encoders that support one, such as JSON."""
        self.encoder.write_array(value, name)

    def read_array(self, name: str = "") -> List[Any]:
        return self.encoder.read_array(name)
