"""
Tests for signature display forms.
"""
import base58
import pytest

from leafmint_sdk.exceptions import UnexpectedSignatureFormatError
from leafmint_sdk.signatures import to_display_hash


def test_bytes_are_base58_encoded():
    raw = bytes(range(64))

    result = to_display_hash(raw)

    assert result == base58.b58encode(raw).decode("ascii")
    assert base58.b58decode(result) == raw


def test_known_encoding():
    assert to_display_hash(b"\x00\x01") == "12"
    assert to_display_hash(bytearray(b"hello")) == "Cn8eVZg"
    assert to_display_hash(memoryview(b"hello")) == "Cn8eVZg"


def test_string_passes_through():
    sig = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"

    assert to_display_hash(sig) is sig


@pytest.mark.parametrize("value", [12345, None, 1.5, ["a"], {"sig": "x"}])
def test_other_shapes_are_rejected(value):
    with pytest.raises(UnexpectedSignatureFormatError) as exc_info:
        to_display_hash(value)

    assert exc_info.value.signature_type == type(value).__name__
