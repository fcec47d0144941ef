"""
leafmint SDK - transaction lifecycle orchestration for compressed-asset mints.
"""
from .assets import decode_bubblegum_leaf, derive_asset_id
from .config import LedgerConfig
from .exceptions import (
    LeafmintError, InvalidInputError, SubmissionFailedError, DetailsUnavailableError,
    ResolutionFailedError, UnexpectedSignatureFormatError, LedgerRpcError, AnchorExpiredError,
    LeafDecodeError
)
from .identity import keypair_from_secret
from .models import (
    AssetIdentity, Commitment, ConfirmationResult, FeeReport, LeafEvent, OrchestrationResult,
    PreparedTransaction, Stage, SubmissionAnchor, SubmitReceipt
)
from .orchestrator import TransactionOrchestrator
from .rpc import JsonRpcLedgerClient
from .signatures import to_display_hash
from .version import __version__

__all__ = [
    "TransactionOrchestrator",
    "JsonRpcLedgerClient",
    "LedgerConfig",
    "PreparedTransaction",
    "SubmissionAnchor",
    "ConfirmationResult",
    "FeeReport",
    "LeafEvent",
    "AssetIdentity",
    "SubmitReceipt",
    "OrchestrationResult",
    "Commitment",
    "Stage",
    "derive_asset_id",
    "decode_bubblegum_leaf",
    "keypair_from_secret",
    "to_display_hash",
    "LeafmintError",
    "InvalidInputError",
    "SubmissionFailedError",
    "DetailsUnavailableError",
    "ResolutionFailedError",
    "UnexpectedSignatureFormatError",
    "LedgerRpcError",
    "AnchorExpiredError",
    "LeafDecodeError",
    "__version__",
]
