"""Tests for the positional cursor."""

import pytest

from sockwire.encoder.cursor import Cursor
from sockwire.errors import EncoderStateError, OutOfRangeError


def test_take_advances_position():
    cursor = Cursor()
    cursor.load(b"abcd")

    assert cursor.take(2) == b"ab"
    assert cursor.position == 2
    assert cursor.remaining == 2
    assert cursor.next() == ord("c")


def test_take_past_end_keeps_position():
    cursor = Cursor()
    cursor.load(["a", "b"])
    cursor.next()

    with pytest.raises(OutOfRangeError):
        cursor.take(2)
    assert cursor.position == 1


def test_load_resets_position():
    cursor = Cursor()
    cursor.load([1, 2])
    cursor.next()
    cursor.load([3])

    assert cursor.position == 0
    assert cursor.next() == 3


def test_unloaded_cursor_raises():
    cursor = Cursor()

    with pytest.raises(EncoderStateError):
        cursor.next()

    cursor.load([1])
    cursor.unload()
    with pytest.raises(EncoderStateError):
        cursor.items


def test_negative_take_rejected():
    cursor = Cursor()
    cursor.load([1])

    with pytest.raises(ValueError):
        cursor.take(-1)
