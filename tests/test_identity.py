"""
Tests for signing identity helpers.
"""
from unittest.mock import MagicMock

import pytest

from leafmint_sdk.exceptions import InvalidInputError
from leafmint_sdk.identity import keypair_from_secret, require_identity

from tests.test_helpers import make_identity


def test_keypair_from_secret_bytes():
    original = make_identity(4)

    restored = keypair_from_secret(bytes(original))

    assert restored.pubkey() == original.pubkey()


def test_keypair_from_cli_int_list():
    """Secret keys written by the CLI are JSON lists of ints"""
    original = make_identity(5)

    restored = keypair_from_secret(list(bytes(original)))

    assert restored.pubkey() == original.pubkey()


@pytest.mark.parametrize("secret", [None, b"", bytes(32), bytes(65)])
def test_keypair_from_secret_rejects_bad_length(secret):
    with pytest.raises(InvalidInputError):
        keypair_from_secret(secret)


def test_keypair_from_secret_rejects_non_bytes():
    with pytest.raises(InvalidInputError, match="Invalid secret key format"):
        keypair_from_secret([1, 2, "x"])


def test_require_identity():
    identity = make_identity(1)

    assert require_identity(identity) is identity
    assert require_identity(MagicMock()) is not None


@pytest.mark.parametrize("identity", [None, "not-a-keypair", 42])
def test_require_identity_rejects(identity):
    with pytest.raises(InvalidInputError):
        require_identity(identity)
