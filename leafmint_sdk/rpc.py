"""
JsonRpcLedgerClient - LedgerClient implementation over Solana JSON-RPC.

HTTP calls go through a ``requests.Session`` with urllib3 retries and run in
a worker thread via ``asyncio.to_thread``, so waiting on the network never
blocks the event loop. Transactions are compiled and signed with solders.
The client holds no signing identity; each send receives its own.
"""
import asyncio
import base64
import itertools
import logging
import threading
from typing import Any, Callable, Dict, List, Optional, Union

import requests
from requests.adapters import HTTPAdapter
from solders.hash import Hash
from solders.message import Message
from solders.transaction import Transaction
from urllib3.util.retry import Retry

from .assets import decode_bubblegum_leaf
from .config import LedgerConfig
from .exceptions import AnchorExpiredError, InvalidInputError, LedgerRpcError
from .identity import require_identity
from .models import Commitment, LeafEvent, PreparedTransaction, SubmissionAnchor, TransactionDetails
from .signatures import to_display_hash

LeafDecoder = Callable[[TransactionDetails], LeafEvent]


class JsonRpcLedgerClient:
    """
    Ledger client speaking Solana JSON-RPC.

    Leaf decoding is delegated to ``leaf_decoder``, which receives the
    transaction details of a confirmed mint and returns its LeafEvent
    (raising if it cannot). The default, ``decode_bubblegum_leaf``, reads
    the leaf schema event Bubblegum logs through the noop program during
    ``mintV1`` / ``mintToCollectionV1``. Pass a different decoder for other
    minting programs.

    ``requests.Session`` is not thread-safe, and every call runs in a worker
    thread, so each worker thread gets its own session. One client can
    therefore be shared by concurrent operations.
    """

    def __init__(
        self,
        rpc_url: str,
        leaf_decoder: Optional[LeafDecoder] = decode_bubblegum_leaf,
        retry_count: int = 3,
        timeout: int = 30,
        poll_interval: float = 0.5,
        logger: Optional[logging.Logger] = None
    ):
        self.rpc_url = rpc_url
        self.leaf_decoder = leaf_decoder
        self.retry_count = retry_count
        self.timeout = timeout
        self.poll_interval = poll_interval
        self.logger = logger or logging.getLogger(__name__)
        self._ids = itertools.count(1)
        self._local = threading.local()
        self._sessions: List[requests.Session] = []
        self._sessions_lock = threading.Lock()

    @classmethod
    def from_config(cls, config: LedgerConfig, **kwargs) -> "JsonRpcLedgerClient":
        kwargs.setdefault("timeout", config.request_timeout)
        return cls(config.rpc_url, **kwargs)

    def _new_session(self) -> requests.Session:
        # Setup HTTP session with retries
        session = requests.Session()
        retries = Retry(
            total=self.retry_count,
            backoff_factor=0.5,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["POST"],
            raise_on_status=False,
            connect=self.retry_count,
            read=self.retry_count,
            other=self.retry_count
        )
        session.mount("http://", HTTPAdapter(max_retries=retries))
        session.mount("https://", HTTPAdapter(max_retries=retries))
        return session

    @property
    def session(self) -> requests.Session:
        """HTTP session owned by the calling thread"""
        session = getattr(self._local, "session", None)
        if session is None:
            session = self._new_session()
            self._local.session = session
            with self._sessions_lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        with self._sessions_lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()

    def _rpc_call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        """
        Make a blocking JSON-RPC call.

        Raises:
            LedgerRpcError: On transport failure, bad JSON or an RPC error object
        """
        payload = {
            "jsonrpc": "2.0",
            "id": next(self._ids),
            "method": method,
            "params": params or [],
        }
        try:
            response = self.session.post(self.rpc_url, json=payload, timeout=self.timeout)
            response.raise_for_status()
        except requests.RequestException as e:
            raise LedgerRpcError(f"{method} request failed: {e}", method=method)

        # requests.JSONDecodeError is also a RequestException, so parse separately
        try:
            data = response.json()
        except ValueError as e:
            raise LedgerRpcError(f"Invalid JSON response for {method}: {e}", method=method)
        if not isinstance(data, dict):
            raise LedgerRpcError(f"Invalid JSON-RPC response for {method}: {data!r}", method=method)

        if data.get("error") is not None:
            err = data["error"]
            raise LedgerRpcError(
                f"RPC error in {method}: {err.get('message', err)}",
                code=err.get("code"),
                method=method,
                data=err.get("data"),
            )
        return data.get("result")

    async def _call(self, method: str, params: Optional[List[Any]] = None) -> Any:
        return await asyncio.to_thread(self._rpc_call, method, params)

    async def get_latest_anchor(self) -> SubmissionAnchor:
        result = await self._call("getLatestBlockhash", [{"commitment": Commitment.FINALIZED.value}])
        try:
            value = result["value"]
            return SubmissionAnchor(
                blockhash=value["blockhash"],
                last_valid_block_height=int(value["lastValidBlockHeight"]),
            )
        except (KeyError, TypeError) as e:
            raise LedgerRpcError(f"Malformed getLatestBlockhash result: {result!r}", method="getLatestBlockhash") from e

    async def get_block_height(self, commitment: Commitment = Commitment.CONFIRMED) -> int:
        result = await self._call("getBlockHeight", [{"commitment": commitment.value}])
        return int(result)

    def build_transaction(
        self, tx: PreparedTransaction, identity: Any, anchor: SubmissionAnchor
    ) -> Transaction:
        """Compile ``tx`` against ``anchor`` and sign it with ``identity`` as fee payer."""
        require_identity(identity)
        blockhash = Hash.from_string(anchor.blockhash)
        message = Message.new_with_blockhash(list(tx.instructions), identity.pubkey(), blockhash)
        return Transaction([identity], message, blockhash)

    async def send_transaction(
        self,
        tx: PreparedTransaction,
        identity: Any,
        anchor: SubmissionAnchor,
        *,
        skip_preflight: bool = False,
    ) -> str:
        signed = self.build_transaction(tx, identity, anchor)
        raw = base64.b64encode(bytes(signed)).decode("ascii")
        try:
            signature = await self._call("sendTransaction", [
                raw,
                {
                    "encoding": "base64",
                    "skipPreflight": skip_preflight,
                    "preflightCommitment": Commitment.CONFIRMED.value,
                },
            ])
        except LedgerRpcError as e:
            # Preflight rejects a blockhash the cluster no longer knows
            if "Blockhash not found" in str(e):
                raise AnchorExpiredError(str(e), code=e.code, method=e.method, data=e.data) from e
            raise
        if not isinstance(signature, str):
            raise LedgerRpcError(
                f"Unexpected sendTransaction result: {type(signature).__name__}",
                method="sendTransaction",
            )
        self.logger.info(f"Transaction sent: {signature}")
        return signature

    async def get_signature_status(self, signature: Union[bytes, str]) -> Optional[Dict[str, Any]]:
        result = await self._call("getSignatureStatuses", [[to_display_hash(signature)]])
        values = (result or {}).get("value") or [None]
        return values[0]

    async def confirm_transaction(
        self,
        signature: Union[bytes, str],
        anchor: SubmissionAnchor,
        commitment: Commitment,
    ) -> Dict[str, Any]:
        """
        Poll the signature status until it reaches ``commitment``.

        Gives up once the ledger's block height passes the anchor's
        ``last_valid_block_height``: the transaction can no longer land.

        Raises:
            AnchorExpiredError: If the block height passed the anchor first
            LedgerRpcError: If the transaction failed on-ledger
        """
        display = to_display_hash(signature)
        while True:
            status = await self.get_signature_status(display)
            if status is not None:
                if status.get("err") is not None:
                    raise LedgerRpcError(
                        f"Transaction {display} failed: {status['err']}",
                        method="getSignatureStatuses",
                        data=status["err"],
                    )
                if commitment.satisfied_by(status.get("confirmationStatus")):
                    return status

            height = await self.get_block_height()
            if anchor.expired(height):
                raise AnchorExpiredError(
                    f"Blockhash expired before {display} reached {commitment.value} "
                    f"(height {height} > {anchor.last_valid_block_height})",
                    method="getBlockHeight",
                )
            await asyncio.sleep(self.poll_interval)

    async def get_transaction_details(
        self, signature: Union[bytes, str], commitment: Commitment
    ) -> Optional[TransactionDetails]:
        # getTransaction does not accept "processed"
        if commitment is Commitment.PROCESSED:
            commitment = Commitment.CONFIRMED
        result = await self._call("getTransaction", [
            to_display_hash(signature),
            {
                "commitment": commitment.value,
                "encoding": "json",
                "maxSupportedTransactionVersion": 0,
            },
        ])
        if result is None:
            return None
        return TransactionDetails.model_validate(result)

    async def decode_leaf_event(self, signature: Union[bytes, str]) -> LeafEvent:
        if self.leaf_decoder is None:
            raise InvalidInputError("No leaf decoder configured for this client")
        details = await self.get_transaction_details(signature, Commitment.CONFIRMED)
        if details is None or details.meta is None:
            raise LedgerRpcError(
                f"Transaction {to_display_hash(signature)} not yet queryable",
                method="getTransaction",
            )
        return self.leaf_decoder(details)
