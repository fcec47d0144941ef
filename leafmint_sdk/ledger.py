"""
Collaborator protocols the orchestration layer calls into.

Concrete ledger clients implement ``LedgerClient``; ``JsonRpcLedgerClient``
in ``leafmint_sdk.rpc`` is the bundled one. The signing identity is always
passed per call so a single client instance can serve concurrent operations.
"""
from typing import Any, Optional, Protocol, Union

from .models import (
    Commitment, LeafEvent, PreparedTransaction, SubmissionAnchor, TransactionDetails
)


class Identity(Protocol):
    """Protocol for signing identities (e.g. ``solders.keypair.Keypair``)"""

    def pubkey(self) -> Any:
        """Return the public key of this identity"""
        ...


class LedgerClient(Protocol):
    """Protocol for the ledger RPC collaborator"""

    async def get_latest_anchor(self) -> SubmissionAnchor:
        """Fetch a recent blockhash usable as a submission anchor"""
        ...

    async def get_block_height(self) -> int:
        """Current block height, compared against an anchor's last valid height"""
        ...

    async def send_transaction(
        self,
        tx: PreparedTransaction,
        identity: Identity,
        anchor: SubmissionAnchor,
        *,
        skip_preflight: bool = False,
    ) -> Union[bytes, str]:
        """Sign and submit a transaction, returning its signature"""
        ...

    async def confirm_transaction(
        self,
        signature: Union[bytes, str],
        anchor: SubmissionAnchor,
        commitment: Commitment,
    ) -> Optional[dict]:
        """Wait until the signature reaches ``commitment``; return its status"""
        ...

    async def get_transaction_details(
        self, signature: Union[bytes, str], commitment: Commitment
    ) -> Optional[TransactionDetails]:
        """Fetch settlement details, or None if the record is not available"""
        ...

    async def decode_leaf_event(self, signature: Union[bytes, str]) -> LeafEvent:
        """Decode the leaf minted by a transaction; raises until it is indexed"""
        ...
