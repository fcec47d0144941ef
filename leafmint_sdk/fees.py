"""
Fee extraction from a confirmed transaction's settlement details.
"""
import logging
from typing import Optional, Union

from .exceptions import DetailsUnavailableError
from .ledger import LedgerClient
from .models import Commitment, FeeReport
from .signatures import to_display_hash

# Lamports per SOL = 10 ** 9
NATIVE_DECIMALS = 9


class FeeExtractor:
    """Reads the fee paid by a confirmed transaction."""

    def __init__(
        self,
        ledger: LedgerClient,
        decimals: int = NATIVE_DECIMALS,
        logger: Optional[logging.Logger] = None
    ):
        self.ledger = ledger
        self.decimals = decimals
        self.logger = logger or logging.getLogger(__name__)

    async def extract_fee(
        self,
        signature: Union[bytes, str],
        commitment: Commitment = Commitment.FINALIZED,
    ) -> FeeReport:
        """
        Fetch settlement details for ``signature`` and report the fee.

        Not retried here: a record queried before it propagated raises, and
        the caller decides whether to retry the whole operation.

        Raises:
            DetailsUnavailableError: If the record or its metadata is absent
        """
        details = await self.ledger.get_transaction_details(signature, commitment)

        if details is None or details.meta is None:
            self.logger.error("Failed to fetch transaction details for fee info")
            raise DetailsUnavailableError(
                "Failed to get transaction details",
                signature=to_display_hash(signature),
            )

        fee = details.fee_amount(self.decimals)
        self.logger.info(
            f"Transaction Fee Used: basisPoints: {fee.basis_points}, "
            f"identifier: {fee.identifier}, decimals: {fee.decimals}"
        )
        return FeeReport(raw_amount=fee.basis_points, decimals=fee.decimals)
