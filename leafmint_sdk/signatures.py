"""
Display forms for transaction signatures.
"""
import base58

from .exceptions import UnexpectedSignatureFormatError


def to_display_hash(signature) -> str:
    """
    Convert a transaction signature to its canonical string form.

    Raw signature bytes are base58-encoded; strings are assumed to be
    encoded already and pass through unchanged.

    Args:
        signature: Signature as bytes, bytearray, memoryview or str

    Returns:
        Base58 signature string

    Raises:
        UnexpectedSignatureFormatError: For any other representation
    """
    if isinstance(signature, (bytes, bytearray, memoryview)):
        return base58.b58encode(bytes(signature)).decode("ascii")
    if isinstance(signature, str):
        return signature
    raise UnexpectedSignatureFormatError(
        f"Unexpected signature format: {type(signature).__name__}",
        signature_type=type(signature).__name__,
    )
