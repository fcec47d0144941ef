"""
Configuration for the leafmint SDK.

Values are injected at construction and treated as read-only afterwards, so
one configuration can be shared by concurrent operations.
"""
import os
import urllib.parse
from typing import Dict, Mapping, Optional

from pydantic import BaseModel, field_validator

from .assets import parse_pubkey
from .exceptions import InvalidInputError

ENV_RPC_URL = "LEAFMINT_RPC_URL"
ENV_MERKLE_TREE = "LEAFMINT_MERKLE_TREE"
ENV_COLLECTION_MINT = "LEAFMINT_COLLECTION_MINT"
ENV_ENVIRONMENT = "LEAFMINT_ENV"

EXPLORER_BASE_URL = "https://explorer.solana.com"

# Cluster names accepted by the explorer's ?cluster= parameter
CLUSTER_MAINNET = "mainnet-beta"
CLUSTER_DEVNET = "devnet"


class LedgerConfig(BaseModel):
    """Ledger endpoint and tree configuration"""
    rpc_url: str
    merkle_tree: str
    collection_mint: Optional[str] = None
    environment: str = "development"
    submit_attempts: int = 10
    leaf_retries: int = 20
    leaf_delay_ms: int = 1000
    request_timeout: int = 30

    class Config:
        frozen = True

    @field_validator("rpc_url")
    @classmethod
    def _check_rpc_url(cls, url: str) -> str:
        parsed = urllib.parse.urlparse(url)
        # Check if it's a localhost or 127.0.0.1 address (with or without port)
        host = parsed.hostname or ''
        is_local = host in ('localhost', '127.0.0.1')
        if parsed.scheme != 'https' and not is_local:
            raise InvalidInputError(f"rpc_url must use https:// for security (got: {parsed.scheme}://)")
        return url

    @field_validator("merkle_tree")
    @classmethod
    def _check_merkle_tree(cls, value: str) -> str:
        return str(parse_pubkey(value, "merkle_tree"))

    @field_validator("collection_mint")
    @classmethod
    def _check_collection_mint(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return str(parse_pubkey(value, "collection_mint"))

    @field_validator("submit_attempts", "leaf_retries")
    @classmethod
    def _check_positive(cls, value: int) -> int:
        if value < 1:
            raise InvalidInputError(f"Retry budgets must be at least 1 (got {value})")
        return value

    @field_validator("leaf_delay_ms", "request_timeout")
    @classmethod
    def _check_non_negative(cls, value: int) -> int:
        if value < 0:
            raise InvalidInputError(f"Delays and timeouts must not be negative (got {value})")
        return value

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, **overrides) -> "LedgerConfig":
        """
        Build a configuration from environment variables.

        Reads LEAFMINT_RPC_URL, LEAFMINT_MERKLE_TREE, LEAFMINT_COLLECTION_MINT
        and LEAFMINT_ENV. Keyword overrides take precedence.

        Raises:
            InvalidInputError: If a required variable is missing or invalid
        """
        env = os.environ if environ is None else environ
        values: Dict[str, object] = {
            "rpc_url": env.get(ENV_RPC_URL),
            "merkle_tree": env.get(ENV_MERKLE_TREE),
            "collection_mint": env.get(ENV_COLLECTION_MINT) or None,
            "environment": env.get(ENV_ENVIRONMENT) or "development",
        }
        values.update(overrides)

        missing = [key for name, key in (("rpc_url", ENV_RPC_URL), ("merkle_tree", ENV_MERKLE_TREE))
                   if not values.get(name)]
        if missing:
            raise InvalidInputError(f"Missing required configuration: {', '.join(missing)}")
        return cls(**values)

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"

    @property
    def cluster(self) -> str:
        return CLUSTER_MAINNET if self.is_production else CLUSTER_DEVNET

    def explorer_url(self, kind: str, value: str) -> str:
        """
        Build an explorer link for a transaction, address or block.

        Args:
            kind: One of "tx", "address", "block"
            value: Signature, address or slot

        Returns:
            Explorer URL for the configured cluster
        """
        if kind not in ("tx", "address", "block"):
            raise InvalidInputError(f"Unknown explorer link kind: {kind}")
        url = f"{EXPLORER_BASE_URL}/{kind}/{value}"
        if self.cluster != CLUSTER_MAINNET:
            url += f"?cluster={self.cluster}"
        return url
