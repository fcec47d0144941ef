"""
Submission retrier: submit and confirm a prepared transaction under retry.
"""
import logging
from typing import Any, Optional

from .anchor import BlockhashProvider
from .exceptions import InvalidInputError, SubmissionFailedError
from .identity import require_identity
from .ledger import LedgerClient
from .models import Commitment, ConfirmationResult, PreparedTransaction, Stage, SubmissionAnchor

DEFAULT_MAX_ATTEMPTS = 10


class SubmissionRetrier:
    """
    Submits a prepared transaction and waits for confirmation, retrying on failure.

    Every attempt is preflight-checked (``skip_preflight=False``) and retried
    immediately on failure, without backoff. The first confirmed attempt ends
    the loop.

    Note: there is no idempotency check between attempts. An attempt that
    landed on-ledger but failed locally (e.g. a confirmation timeout) is
    submitted again, so one logical call may settle more than once when a
    fresh anchor changes the transaction signature.
    """

    def __init__(
        self,
        ledger: LedgerClient,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        anchors: Optional[BlockhashProvider] = None,
        logger: Optional[logging.Logger] = None
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.ledger = ledger
        self.max_attempts = max_attempts
        self.logger = logger or logging.getLogger(__name__)
        self.anchors = anchors or BlockhashProvider(ledger, logger=self.logger)

    async def submit(
        self,
        tx: PreparedTransaction,
        identity: Any,
        anchor: Optional[SubmissionAnchor] = None,
        commitment: Commitment = Commitment.FINALIZED,
    ) -> ConfirmationResult:
        """
        Submit ``tx`` signed by ``identity`` and wait for ``commitment``.

        Args:
            tx: Transaction to submit
            identity: Signing identity, passed through to the ledger client
            anchor: Shared anchor reused across attempts until it expires, after
                which fresh anchors are fetched; when omitted a fresh anchor is
                fetched for each attempt
            commitment: Durability level to wait for

        Returns:
            ConfirmationResult of the first successful attempt

        Raises:
            InvalidInputError: If the transaction or identity is missing
            SubmissionFailedError: If every attempt failed
        """
        self._validate(tx, identity)

        last_error: Optional[BaseException] = None
        last_stage = Stage.SUBMITTING
        for attempt in range(1, self.max_attempts + 1):
            stage = Stage.SUBMITTING
            try:
                attempt_anchor = await self.anchors.resolve(anchor)
                signature = await self.ledger.send_transaction(
                    tx, identity, attempt_anchor, skip_preflight=False
                )
                stage = Stage.CONFIRMING
                status = await self.ledger.confirm_transaction(signature, attempt_anchor, commitment)
            except InvalidInputError:
                raise
            except Exception as e:
                last_error = e
                last_stage = stage
                self.logger.error(
                    f"Retry {attempt}: Transaction failed while {stage.value.lower()} - {e}"
                )
                if anchor is not None and await self.anchors.is_expired(anchor, e):
                    self.logger.warning(
                        f"Supplied blockhash {anchor.blockhash} expired, fetching a fresh one"
                    )
                    anchor = None
                continue

            self.logger.info(f"Transaction confirmed at {commitment.value} after {attempt} attempt(s)")
            return ConfirmationResult(
                signature=signature,
                commitment=commitment,
                attempts=attempt,
                settlement_meta=status,
            )

        raise SubmissionFailedError(
            "max retries exceeded",
            attempts=self.max_attempts,
            last_error=last_error,
            stage=last_stage.value,
        )

    def _validate(self, tx: Any, identity: Any) -> None:
        if tx is None:
            self.logger.error("Invalid transaction or keypair")
            raise InvalidInputError("Transaction is required")
        if not isinstance(tx, PreparedTransaction):
            raise InvalidInputError(
                f"Transaction must be a PreparedTransaction, got {type(tx).__name__}"
            )
        if tx.is_empty:
            raise InvalidInputError("Transaction has no instructions")
        try:
            require_identity(identity)
        except InvalidInputError:
            self.logger.error("Invalid transaction or keypair")
            raise
