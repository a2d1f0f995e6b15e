"""Tests for the Packet base class."""

import pytest

from sockwire.encoder import BinaryEncoder, JSONEncoder, StringEncoder
from sockwire.errors import ConfigurationError
from sockwire.packet import Packet, default_encoder


class SetUserName(Packet):
    def on_instance(self, name):
        self.encoder.write()
        self.encoder.write_short(1, "id")
        self.encoder.write_string(name, "name")

    def on_response(self):
        self.id = self.encoder.read_short("id")
        self.name = self.encoder.read_string("name")


def test_default_encoder_is_string(monkeypatch):
    monkeypatch.delenv("SOCKWIRE_ENCODER", raising=False)

    assert isinstance(Packet().encoder, StringEncoder)


def test_explicit_encoder_is_kept():
    encoder = JSONEncoder()

    assert Packet(encoder).encoder is encoder


def test_on_instance_receives_args_in_order():
    packet = SetUserName(JSONEncoder(), args=["test"])

    assert packet.encoder.get_output_bytes() == b'{"id":1,"name":"test"}'


def test_on_response_reads_encoder():
    packet = SetUserName(JSONEncoder(), args=["before"])
    packet.encoder.set_input_buffer(b'{"id": 2, "name": "after"}')
    packet.encoder.read()
    packet.on_response()

    assert (packet.id, packet.name) == (2, "after")


def test_configured_default_encoder(monkeypatch):
    monkeypatch.setenv("SOCKWIRE_ENCODER", "little_endian")
    encoder = Packet().encoder
    assert isinstance(encoder, BinaryEncoder) and encoder.byteorder == "little"

    assert isinstance(default_encoder({"encoder": "json"}), JSONEncoder)


def test_invalid_configured_encoder():
    with pytest.raises(ConfigurationError):
        Packet(config={"encoder": "yaml"})


def test_base_hooks_are_noops():
    packet = Packet(StringEncoder())
    packet.on_instance()
    packet.on_response()

    assert packet.wait_for_response is True
