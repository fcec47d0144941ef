"""
In-memory ledger client for exercising the orchestration layer.
"""
import asyncio
from typing import Any, Dict, Iterable, List, Optional, Union

from leafmint_sdk.exceptions import AnchorExpiredError, LedgerRpcError
from leafmint_sdk.models import (
    Commitment, LeafEvent, PreparedTransaction, SubmissionAnchor, TransactionDetails
)

TEST_SIGNATURE = bytes(range(64))


class FakeLedger:
    """
    Scriptable LedgerClient.

    ``send_failures`` / ``confirm_failures`` / ``leaf_failures`` make the
    first N calls of that kind raise. Confirming against a blockhash in
    ``stale_blockhashes`` raises AnchorExpiredError. Every successful send
    records an on-ledger effect, even if the following confirmation fails.
    """

    def __init__(
        self,
        send_failures: int = 0,
        confirm_failures: int = 0,
        leaf_failures: int = 0,
        leaf_nonce: int = 42,
        fee: int = 5000,
        signature: Any = TEST_SIGNATURE,
        details_available: bool = True,
        meta_available: bool = True,
        yield_control: bool = False,
        block_height: int = 0,
        stale_blockhashes: Iterable[str] = (),
    ):
        self.send_failures = send_failures
        self.confirm_failures = confirm_failures
        self.leaf_failures = leaf_failures
        self.leaf_nonce = leaf_nonce
        self.fee = fee
        self.signature = signature
        self.details_available = details_available
        self.meta_available = meta_available
        self.yield_control = yield_control
        self.block_height = block_height
        self.stale_blockhashes = set(stale_blockhashes)

        self.anchor_calls = 0
        self.block_height_calls = 0
        self.send_calls: List[Dict[str, Any]] = []
        self.confirm_calls: List[Dict[str, Any]] = []
        self.details_calls: List[Dict[str, Any]] = []
        self.leaf_calls = 0
        self.effects: List[Dict[str, Any]] = []

    async def get_latest_anchor(self) -> SubmissionAnchor:
        self.anchor_calls += 1
        return SubmissionAnchor(
            blockhash=f"blockhash-{self.anchor_calls}",
            last_valid_block_height=1000 + self.anchor_calls,
        )

    async def get_block_height(self) -> int:
        self.block_height_calls += 1
        return self.block_height

    async def send_transaction(
        self,
        tx: PreparedTransaction,
        identity: Any,
        anchor: SubmissionAnchor,
        *,
        skip_preflight: bool = False,
    ) -> Union[bytes, str]:
        self.send_calls.append({
            "tx": tx,
            "identity": identity,
            "anchor": anchor,
            "skip_preflight": skip_preflight,
        })
        if self.yield_control:
            await asyncio.sleep(0)
        if len(self.send_calls) <= self.send_failures:
            raise LedgerRpcError("Blockhash not found", method="sendTransaction")
        self.effects.append({"payer": identity.pubkey(), "anchor": anchor})
        return self.signature

    async def confirm_transaction(
        self,
        signature: Union[bytes, str],
        anchor: SubmissionAnchor,
        commitment: Commitment,
    ) -> Optional[dict]:
        self.confirm_calls.append({"signature": signature, "anchor": anchor, "commitment": commitment})
        if anchor.blockhash in self.stale_blockhashes:
            raise AnchorExpiredError(f"Blockhash {anchor.blockhash} expired", method="getBlockHeight")
        if len(self.confirm_calls) <= self.confirm_failures:
            raise LedgerRpcError("Blockhash expired before confirmation", method="getBlockHeight")
        return {"confirmationStatus": commitment.value, "err": None}

    async def get_transaction_details(
        self, signature: Union[bytes, str], commitment: Commitment
    ) -> Optional[TransactionDetails]:
        self.details_calls.append({"signature": signature, "commitment": commitment})
        if not self.details_available:
            return None
        payload: Dict[str, Any] = {"slot": 123, "blockTime": 1700000000}
        if self.meta_available:
            payload["meta"] = {"fee": self.fee, "err": None, "logMessages": []}
        return TransactionDetails.model_validate(payload)

    async def decode_leaf_event(self, signature: Union[bytes, str]) -> LeafEvent:
        self.leaf_calls += 1
        if self.leaf_calls <= self.leaf_failures:
            raise LedgerRpcError("Transaction not yet queryable", method="getTransaction")
        return LeafEvent(nonce=self.leaf_nonce, owner="owner-address")
