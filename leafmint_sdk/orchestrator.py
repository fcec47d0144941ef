"""
TransactionOrchestrator - Main entry point of the leafmint SDK.
"""
import logging
from typing import Any, Optional

from .assets import derive_asset_id, parse_pubkey
from .config import LedgerConfig
from .exceptions import InvalidInputError, LeafmintError, SubmissionFailedError
from .fees import FeeExtractor
from .leaf import LeafResolver
from .ledger import LedgerClient
from .models import (
    AssetIdentity, Commitment, OrchestrationResult, PreparedTransaction, Stage,
    SubmissionAnchor, SubmitReceipt
)
from .rpc import JsonRpcLedgerClient, LeafDecoder
from .signatures import to_display_hash
from .submission import SubmissionRetrier


class TransactionOrchestrator:
    """
    Orchestrates the lifecycle of ledger transactions.

    This orchestrator handles:
    1. Submitting and confirming a prepared transaction under retry
    2. Extracting the settlement fee of a confirmed transaction
    3. Resolving the asset identity of a confirmed compressed-asset mint

    Every stage runs in sequence: BUILDING, SUBMITTING, CONFIRMING, then
    EXTRACTING_FEE or RESOLVING_LEAF, then DONE. Failures never escape as
    exceptions; they are returned as a failed OrchestrationResult naming
    the stage they happened in.

    The signing identity is a parameter of every operation. The orchestrator
    only holds read-only configuration, so one instance can serve concurrent
    operations for different identities.
    """

    def __init__(
        self,
        config: LedgerConfig,
        ledger: LedgerClient,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the TransactionOrchestrator

        Args:
            config: Ledger configuration (tree address, retry budgets, cluster)
            ledger: Ledger client collaborator
            logger: Optional logger instance to use for debug/info logging
        """
        self.config = config
        self.ledger = ledger
        self.logger = logger or logging.getLogger(__name__)

        self.submitter = SubmissionRetrier(ledger, max_attempts=config.submit_attempts, logger=self.logger)
        self.fees = FeeExtractor(ledger, logger=self.logger)
        self.leaves = LeafResolver(ledger, logger=self.logger)

        self.logger.info(
            f"TransactionOrchestrator initialized for {'Mainnet' if config.is_production else 'Devnet'}"
        )

    @classmethod
    def from_env(
        cls,
        leaf_decoder: Optional[LeafDecoder] = None,
        logger: Optional[logging.Logger] = None
    ) -> "TransactionOrchestrator":
        """
        Create an orchestrator backed by the JSON-RPC ledger client.

        Configuration is read from the LEAFMINT_* environment variables.
        """
        config = LedgerConfig.from_env()
        ledger = JsonRpcLedgerClient.from_config(config, leaf_decoder=leaf_decoder, logger=logger)
        return cls(config, ledger, logger=logger)

    def tx_url(self, tx_hash: str) -> str:
        """Explorer link for a transaction on the configured cluster"""
        return self.config.explorer_url("tx", tx_hash)

    async def submit_and_confirm(
        self,
        tx: PreparedTransaction,
        identity: Any,
        anchor: Optional[SubmissionAnchor] = None,
        commitment: Commitment = Commitment.FINALIZED,
    ) -> OrchestrationResult[SubmitReceipt]:
        """
        Submit a transaction, wait for ``commitment`` and report its fee.

        Args:
            tx: Transaction to submit
            identity: Signing identity (fee payer)
            anchor: Optional shared anchor, reused instead of fetching one
            commitment: Durability level for confirmation and fee lookup

        Returns:
            OrchestrationResult wrapping a SubmitReceipt
        """
        stage = Stage.BUILDING
        tx_hash: Optional[str] = None
        try:
            stage = self._advance(stage, Stage.SUBMITTING)
            confirmation = await self.submitter.submit(tx, identity, anchor=anchor, commitment=commitment)

            stage = self._advance(stage, Stage.CONFIRMING)
            tx_hash = to_display_hash(confirmation.signature)

            stage = self._advance(stage, Stage.EXTRACTING_FEE)
            fee_report = await self.fees.extract_fee(confirmation.signature, commitment)
        except Exception as e:
            return self._fail("submit and confirm transaction", e, stage, tx_hash)

        self._advance(stage, Stage.DONE)
        self.logger.info(f"Transaction {tx_hash} settled, fee {fee_report.amount} SOL")
        receipt = SubmitReceipt(
            confirmation=confirmation,
            fee_report=fee_report,
            tx_hash=tx_hash,
            explorer_url=self.tx_url(tx_hash),
        )
        return OrchestrationResult.success(receipt, signature=tx_hash)

    async def mint_and_resolve(
        self,
        tx: PreparedTransaction,
        identity: Any,
        tree_address: Optional[str] = None,
        anchor: Optional[SubmissionAnchor] = None,
    ) -> OrchestrationResult[AssetIdentity]:
        """
        Submit a mint, wait for confirmation and resolve the minted asset id.

        If the mint confirms but its leaf never becomes queryable, the
        result is a partial failure: ``partial`` is True and ``signature``
        identifies the settled mint.

        Args:
            tx: Mint transaction to submit
            identity: Signing identity (fee payer)
            tree_address: Tree the leaf is minted into; defaults to the
                configured merkle tree
            anchor: Optional shared anchor

        Returns:
            OrchestrationResult wrapping the AssetIdentity
        """
        stage = Stage.BUILDING
        tx_hash: Optional[str] = None
        try:
            tree = str(parse_pubkey(tree_address or self.config.merkle_tree, "tree_address"))

            stage = self._advance(stage, Stage.SUBMITTING)
            confirmation = await self.submitter.submit(
                tx, identity, anchor=anchor, commitment=Commitment.CONFIRMED
            )

            stage = self._advance(stage, Stage.CONFIRMING)
            tx_hash = to_display_hash(confirmation.signature)

            stage = self._advance(stage, Stage.RESOLVING_LEAF)
            leaf = await self.leaves.resolve_leaf(
                confirmation.signature,
                max_retries=self.config.leaf_retries,
                delay_ms=self.config.leaf_delay_ms,
            )
            asset = derive_asset_id(tree, leaf.nonce)
        except Exception as e:
            return self._fail("mint compressed asset", e, stage, tx_hash)

        self._advance(stage, Stage.DONE)
        self.logger.info(f"Asset ID: {asset.asset_id}")
        return OrchestrationResult.success(asset, signature=tx_hash)

    def _advance(self, current: Stage, target: Stage) -> Stage:
        self.logger.debug(f"{current.value} -> {target.value}")
        return target

    def _fail(
        self, action: str, error: Exception, stage: Stage, tx_hash: Optional[str]
    ) -> OrchestrationResult:
        if isinstance(error, SubmissionFailedError) and error.stage:
            stage = Stage(error.stage)
        elif isinstance(error, InvalidInputError) and stage is Stage.SUBMITTING:
            # rejected before anything was sent
            stage = Stage.BUILDING

        if not isinstance(error, LeafmintError):
            # Convert other errors to LeafmintError
            wrapped = LeafmintError(f"Unexpected error during {stage.value}: {error}")
            wrapped.__cause__ = error
            error = wrapped

        self.logger.error(f"Failed to {action} at {stage.value}: {error}")
        self.logger.debug(f"{stage.value} -> {Stage.FAILED.value}")
        return OrchestrationResult.failure(error, stage, signature=tx_hash)
