"""
Data models for the leafmint SDK.

Stage records passed between the submission, confirmation and resolution
steps are frozen dataclasses. JSON payloads read off the wire are pydantic
models.
"""
from dataclasses import dataclass, replace
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Generic, List, Optional, Tuple, TypeVar, Union

from pydantic import BaseModel, Field

from .exceptions import LeafmintError

T = TypeVar('T')


class Commitment(str, Enum):
    """
    Durability level a transaction must reach before it is treated as settled.

    Members are ordered from least to most durable.
    """
    PROCESSED = "processed"
    CONFIRMED = "confirmed"
    FINALIZED = "finalized"

    @property
    def rank(self) -> int:
        return list(Commitment).index(self)

    def satisfied_by(self, status: Optional[str]) -> bool:
        """Return True if a reported confirmation status meets this level."""
        if not status:
            return False
        try:
            return Commitment(status).rank >= self.rank
        except ValueError:
            return False


class Stage(str, Enum):
    """Lifecycle stages of an orchestrated operation."""
    BUILDING = "BUILDING"
    SUBMITTING = "SUBMITTING"
    CONFIRMING = "CONFIRMING"
    EXTRACTING_FEE = "EXTRACTING_FEE"
    RESOLVING_LEAF = "RESOLVING_LEAF"
    DONE = "DONE"
    FAILED = "FAILED"


@dataclass(frozen=True)
class PreparedTransaction:
    """
    An immutable, composable bundle of ledger instructions.

    Instructions are opaque to this package; the ledger client compiles
    and signs them.
    """
    instructions: Tuple[Any, ...] = ()
    label: str = ""

    def add(self, *instructions: Any) -> "PreparedTransaction":
        """Return a new transaction with the given instructions appended."""
        return replace(self, instructions=self.instructions + tuple(instructions))

    @property
    def is_empty(self) -> bool:
        return not self.instructions

    def __len__(self) -> int:
        return len(self.instructions)


@dataclass(frozen=True)
class SubmissionAnchor:
    """A recent blockhash and the last block height at which it is still valid."""
    blockhash: str
    last_valid_block_height: int

    def expired(self, current_height: int) -> bool:
        return current_height > self.last_valid_block_height


@dataclass(frozen=True)
class ConfirmationResult:
    """
    A transaction the ledger reported at the requested commitment level.

    Terminal: once produced, no further submission attempts are made.
    """
    signature: Union[bytes, str]
    commitment: Commitment
    attempts: int = 1
    settlement_meta: Optional[Dict[str, Any]] = None


@dataclass(frozen=True)
class FeeReport:
    """Fee paid for a confirmed transaction, in the ledger's smallest unit."""
    raw_amount: int
    decimals: int = 9

    @property
    def amount(self) -> float:
        """Fee in the human-denominated unit (SOL for lamports)."""
        return self.raw_amount / 10 ** self.decimals

    @property
    def amount_decimal(self) -> Decimal:
        return Decimal(self.raw_amount).scaleb(-self.decimals)


@dataclass(frozen=True)
class LeafEvent:
    """A leaf schema record decoded from a confirmed mint transaction."""
    nonce: int
    owner: str
    delegate: Optional[str] = None
    leaf_id: Optional[str] = None
    data_hash: Optional[str] = None
    creator_hash: Optional[str] = None


@dataclass(frozen=True)
class AssetIdentity:
    """The derived address of one compressed asset within a tree."""
    asset_id: str
    tree_address: str
    leaf_nonce: int

    def __str__(self) -> str:
        return self.asset_id


@dataclass(frozen=True)
class SubmitReceipt:
    """Value of a completed submit-and-confirm operation."""
    confirmation: ConfirmationResult
    fee_report: FeeReport
    tx_hash: str
    explorer_url: Optional[str] = None

    @property
    def sol_fee(self) -> float:
        return self.fee_report.amount


@dataclass(frozen=True)
class OrchestrationResult(Generic[T]):
    """
    Typed outcome of an orchestrated operation.

    Exactly one of ``value`` and ``error`` is set. ``stage`` is DONE on
    success, otherwise the stage the operation failed in. ``signature`` is
    set whenever a transaction was confirmed, including partial successes.
    """
    value: Optional[T] = None
    error: Optional[LeafmintError] = None
    stage: Stage = Stage.DONE
    signature: Optional[str] = None

    @classmethod
    def success(cls, value: T, signature: Optional[str] = None) -> "OrchestrationResult[T]":
        return cls(value=value, stage=Stage.DONE, signature=signature)

    @classmethod
    def failure(
        cls, error: LeafmintError, stage: Stage, signature: Optional[str] = None
    ) -> "OrchestrationResult[T]":
        return cls(error=error, stage=stage, signature=signature)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def partial(self) -> bool:
        """True when the transaction settled but a later stage failed."""
        return self.error is not None and self.signature is not None

    def unwrap(self) -> T:
        """Return the value or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]


class FeeAmount(BaseModel):
    """Fee section of a transaction's settlement metadata"""
    basis_points: int = Field(..., alias="basisPoints")
    decimals: int = 9
    identifier: str = "SOL"

    class Config:
        populate_by_name = True


class TransactionMeta(BaseModel):
    """Settlement metadata of a confirmed transaction"""
    fee: int
    err: Optional[Any] = None
    log_messages: Optional[List[str]] = Field(None, alias="logMessages")
    inner_instructions: Optional[List[Dict[str, Any]]] = Field(None, alias="innerInstructions")
    loaded_addresses: Optional[Dict[str, List[str]]] = Field(None, alias="loadedAddresses")

    class Config:
        populate_by_name = True


class TransactionDetails(BaseModel):
    """Transaction record as returned by the ledger for a signature"""
    slot: int
    block_time: Optional[int] = Field(None, alias="blockTime")
    meta: Optional[TransactionMeta] = None
    transaction: Optional[Any] = None

    class Config:
        populate_by_name = True

    def fee_amount(self, decimals: int = 9) -> FeeAmount:
        """Return the fee as an amount with explicit decimals."""
        if self.meta is None:
            raise ValueError("Transaction details carry no metadata")
        return FeeAmount(basisPoints=self.meta.fee, decimals=decimals)
