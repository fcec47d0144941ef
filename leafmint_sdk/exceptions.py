"""
Exceptions for the leafmint SDK.
"""
from typing import Any, Optional


class LeafmintError(Exception):
    """Base exception for all leafmint errors."""
    pass


class InvalidInputError(LeafmintError):
    """Raised when a transaction, identity or configuration value is missing or malformed."""
    pass


class SubmissionFailedError(LeafmintError):
    """Raised when every submit-and-confirm attempt has failed."""

    def __init__(
        self,
        message: str,
        attempts: int = 0,
        last_error: Optional[BaseException] = None,
        stage: Optional[str] = None,
    ):
        self.attempts = attempts
        self.last_error = last_error
        self.stage = stage
        super().__init__(message)


class DetailsUnavailableError(LeafmintError):
    """Raised when the settlement record of a transaction cannot be queried yet."""

    def __init__(self, message: str, signature: Optional[str] = None):
        self.signature = signature
        super().__init__(message)


class ResolutionFailedError(LeafmintError):
    """
    Raised when a leaf event never became queryable within the retry budget.

    The mint itself was confirmed on-ledger, so this is a partial success:
    the fee was paid but the asset identity is unknown.
    """

    def __init__(self, message: str, signature: Optional[str] = None, attempts: int = 0):
        self.signature = signature
        self.attempts = attempts
        super().__init__(message)


class UnexpectedSignatureFormatError(LeafmintError):
    """Raised when a signature is neither raw bytes nor a string."""

    def __init__(self, message: str, signature_type: Optional[str] = None):
        self.signature_type = signature_type
        super().__init__(message)


class LedgerRpcError(LeafmintError):
    """Raised when the ledger RPC endpoint fails or returns an error object."""

    def __init__(self, message: str, code: Optional[int] = None, method: Optional[str] = None, data: Any = None):
        self.code = code
        self.method = method
        self.data = data
        super().__init__(message)


class AnchorExpiredError(LedgerRpcError):
    """Raised when a transaction's blockhash expired before it could land."""
    pass


class LeafDecodeError(LeafmintError):
    """Raised when a transaction carries no decodable leaf schema event."""

    def __init__(self, message: str, signature: Optional[str] = None):
        self.signature = signature
        super().__init__(message)
