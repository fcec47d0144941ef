"""
Signing identity helpers.

Identities are ``solders.keypair.Keypair`` instances (or anything exposing
``pubkey()``). They are passed explicitly into each operation and never
installed on a shared client.
"""
import logging
from typing import Any, Optional, Sequence, Union

from solders.keypair import Keypair

from .exceptions import InvalidInputError

logger = logging.getLogger(__name__)

SECRET_KEY_LENGTH = 64


def keypair_from_secret(secret: Union[bytes, bytearray, Sequence[int]]) -> Keypair:
    """
    Build a keypair from a 64-byte secret key (seed followed by public key).

    Args:
        secret: Secret key bytes, or a JSON-style list of ints as written by
            the Solana CLI

    Returns:
        Keypair for the secret

    Raises:
        InvalidInputError: If the secret is missing or not 64 bytes long
    """
    if not secret:
        raise InvalidInputError("Secret key is required")
    if not isinstance(secret, (bytes, bytearray)):
        try:
            secret = bytes(secret)
        except (TypeError, ValueError) as e:
            raise InvalidInputError(f"Invalid secret key format: {e}")
    if len(secret) != SECRET_KEY_LENGTH:
        logger.error("Invalid key format, must be 64 bytes")
        raise InvalidInputError(
            f"Invalid key format: expected {SECRET_KEY_LENGTH} bytes, got {len(secret)}"
        )
    try:
        return Keypair.from_bytes(bytes(secret))
    except ValueError as e:
        raise InvalidInputError(f"Invalid secret key: {e}")


def require_identity(identity: Optional[Any]) -> Any:
    """
    Check that a signing identity is present and usable.

    Raises:
        InvalidInputError: If the identity is missing or has no ``pubkey()``
    """
    if identity is None:
        raise InvalidInputError("Signing identity is required")
    if not callable(getattr(identity, "pubkey", None)):
        raise InvalidInputError(
            f"Signing identity must expose pubkey(), got {type(identity).__name__}"
        )
    return identity
