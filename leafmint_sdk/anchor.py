"""
Blockhash provider: supplies the submission anchor for a transaction.
"""
import logging
from typing import Optional

from .exceptions import AnchorExpiredError, InvalidInputError
from .ledger import LedgerClient
from .models import SubmissionAnchor


class BlockhashProvider:
    """Returns a caller-supplied anchor or fetches a fresh one, and detects expired anchors."""

    def __init__(self, ledger: LedgerClient, logger: Optional[logging.Logger] = None):
        self.ledger = ledger
        self.logger = logger or logging.getLogger(__name__)

    async def resolve(self, anchor: Optional[SubmissionAnchor] = None) -> SubmissionAnchor:
        """
        Return the anchor to submit against.

        Args:
            anchor: Anchor shared by the caller; reused without a round trip

        Returns:
            SubmissionAnchor

        Raises:
            InvalidInputError: If the supplied anchor is incomplete
        """
        if anchor is not None:
            if not anchor.blockhash or anchor.last_valid_block_height is None:
                raise InvalidInputError("Anchor requires both blockhash and last_valid_block_height")
            self.logger.debug(f"Using supplied blockhash: {anchor.blockhash}")
            return anchor

        fresh = await self.ledger.get_latest_anchor()
        self.logger.debug(
            f"Using blockhash: {fresh.blockhash}, lastValidBlockHeight: {fresh.last_valid_block_height}"
        )
        return fresh

    async def is_expired(self, anchor: SubmissionAnchor, error: Optional[BaseException] = None) -> bool:
        """
        Check whether ``anchor`` can no longer land a transaction.

        An ``AnchorExpiredError`` settles it; otherwise the ledger's current
        block height is compared with ``last_valid_block_height``. A failed
        height lookup counts as not expired.
        """
        if isinstance(error, AnchorExpiredError):
            return True
        try:
            height = await self.ledger.get_block_height()
        except Exception as e:
            self.logger.warning(f"Could not check blockhash {anchor.blockhash} for expiry: {e}")
            return False
        return anchor.expired(height)
