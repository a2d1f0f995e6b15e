"""
Wire encoders for sockwire.

This package provides the Encoder protocol and its implementations: fixed-width
binary in either byte order, delimited text, JSON, and a secure decorator that
transforms the byte stream of any other encoder.
"""

from sockwire.encoder.binary import BigEndianEncoder, BinaryEncoder, LittleEndianEncoder
from sockwire.encoder.delimited import StringEncoder
from sockwire.encoder.json import JSONEncoder
from sockwire.encoder.protocol import Encoder
from sockwire.encoder.registry import EncoderRegistry, get_encoder_registry
from sockwire.encoder.secure import SecureEncoder, base64_transform

__all__ = [
    "Encoder",
    "BinaryEncoder",
    "BigEndianEncoder",
    "LittleEndianEncoder",
    "StringEncoder",
    "JSONEncoder",
    "SecureEncoder",
    "base64_transform",
    "EncoderRegistry",
    "get_encoder_registry",
]
