"""
Leaf resolution: poll a confirmed mint until its leaf event can be decoded.

The decoded event lags confirmation by the indexing delay of the RPC node,
so the resolver polls at a fixed interval. The interval and budget default
to one second and twenty attempts.
"""
import asyncio
import logging
from typing import Optional, Union

from ._rate_limited_log import rate_limited_log
from .exceptions import InvalidInputError, ResolutionFailedError
from .ledger import LedgerClient
from .models import LeafEvent
from .signatures import to_display_hash

DEFAULT_MAX_RETRIES = 20
DEFAULT_DELAY_MS = 1000


class LeafResolver:
    """Decodes the leaf event of a mint, retrying until it is indexed."""

    def __init__(self, ledger: LedgerClient, logger: Optional[logging.Logger] = None):
        self.ledger = ledger
        self.logger = logger or logging.getLogger(__name__)

    async def resolve_leaf(
        self,
        signature: Union[bytes, str],
        max_retries: int = DEFAULT_MAX_RETRIES,
        delay_ms: int = DEFAULT_DELAY_MS,
    ) -> LeafEvent:
        """
        Decode the leaf minted by ``signature``.

        Each failed attempt but the last suspends the task for ``delay_ms``.

        Args:
            signature: Signature of the confirmed mint transaction
            max_retries: Total number of decode attempts
            delay_ms: Fixed delay between attempts in milliseconds

        Returns:
            The decoded LeafEvent

        Raises:
            ResolutionFailedError: If no attempt succeeded
        """
        if max_retries < 1:
            raise ValueError("max_retries must be at least 1")

        display = to_display_hash(signature)
        attempts = 0
        while attempts < max_retries:
            try:
                leaf = await self.ledger.decode_leaf_event(signature)
            except InvalidInputError:
                raise
            except Exception as e:
                attempts += 1
                rate_limited_log(
                    f"Leaf event for {display} not yet available: {e}",
                    level="warning",
                    logger_instance=self.logger,
                )
                if attempts < max_retries:
                    await asyncio.sleep(delay_ms / 1000)
                continue

            self.logger.debug(f"Resolved leaf nonce {leaf.nonce} for {display} after {attempts + 1} attempt(s)")
            return leaf

        self.logger.error(f"Failed to parse leaf for {display} after {attempts} attempts")
        raise ResolutionFailedError(
            "Failed to parse leaf after multiple attempts",
            signature=display,
            attempts=attempts,
        )
