"""
Asset identity derivation for compressed (Merkle-tree leaf) assets.

Also decodes the leaf schema event Bubblegum emits when it mints a leaf,
which supplies the nonce the asset id is derived from.
"""
from typing import List, Union

import base58
from solders.pubkey import Pubkey

from .exceptions import InvalidInputError, LeafDecodeError
from .models import AssetIdentity, LeafEvent, TransactionDetails

# Bubblegum program owning compressed NFT trees
BUBBLEGUM_PROGRAM_ID = Pubkey.from_string("BGUMAp9Gq7iTEuizy4pqaxsTyUCBK68MDfK752saRPUY")

# Bubblegum logs its events as instruction data of a CPI into this program
SPL_NOOP_PROGRAM_ID = Pubkey.from_string("noopb9bkMVfRPU8AsbpTUg8AQkHtKwMYZiFUjNRtMmV")

ASSET_SEED = b"asset"

U64_MAX = 2 ** 64 - 1

# AccountCompressionEvent::ApplicationData (1), ApplicationDataEvent::V1 (0),
# u32 payload length, BubblegumEventType::LeafSchemaEvent (1), Version::V1 (0)
LEAF_EVENT_PREFIX_LEN = 8
# LeafSchema::V1 tag, id, owner, delegate, nonce (u64), data_hash, creator_hash
LEAF_SCHEMA_V1_LEN = 1 + 32 * 3 + 8 + 32 * 2


def parse_pubkey(value: Union[str, Pubkey], field_name: str = "address") -> Pubkey:
    """
    Parse a base58 public key.

    Raises:
        InvalidInputError: If the value is not a valid public key
    """
    if isinstance(value, Pubkey):
        return value
    if not isinstance(value, str) or not value:
        raise InvalidInputError(f"{field_name} must be a base58 public key string")
    try:
        return Pubkey.from_string(value)
    except ValueError as e:
        raise InvalidInputError(f"Invalid {field_name} {value!r}: {e}")


def derive_asset_id(
    tree_address: Union[str, Pubkey],
    leaf_nonce: int,
    program_id: Pubkey = BUBBLEGUM_PROGRAM_ID,
) -> AssetIdentity:
    """
    Derive the asset id of the leaf at ``leaf_nonce`` in ``tree_address``.

    The asset id is the program-derived address for the seeds
    ``[b"asset", tree, u64_le(nonce)]``. Pure: no network access.

    Args:
        tree_address: Merkle tree account address
        leaf_nonce: Leaf nonce (index) reported by the mint's leaf event
        program_id: Owning program, Bubblegum by default

    Returns:
        AssetIdentity for the leaf

    Raises:
        InvalidInputError: If the tree address or nonce is invalid
    """
    tree = parse_pubkey(tree_address, "tree_address")
    if isinstance(leaf_nonce, bool) or not isinstance(leaf_nonce, int):
        raise InvalidInputError(f"leaf_nonce must be an integer, got {type(leaf_nonce).__name__}")
    if not 0 <= leaf_nonce <= U64_MAX:
        raise InvalidInputError(f"leaf_nonce out of u64 range: {leaf_nonce}")

    asset_id, _bump = Pubkey.find_program_address(
        [ASSET_SEED, bytes(tree), leaf_nonce.to_bytes(8, "little")],
        program_id,
    )
    return AssetIdentity(asset_id=str(asset_id), tree_address=str(tree), leaf_nonce=leaf_nonce)


def _raw_transaction(details: TransactionDetails) -> dict:
    return details.transaction if isinstance(details.transaction, dict) else {}


def _account_keys(details: TransactionDetails) -> List[str]:
    message = _raw_transaction(details).get("message") or {}
    keys = [str(key) for key in message.get("accountKeys") or []]
    loaded = (details.meta.loaded_addresses if details.meta else None) or {}
    keys.extend(loaded.get("writable") or [])
    keys.extend(loaded.get("readonly") or [])
    return keys


def _is_leaf_schema_event(data: bytes) -> bool:
    return (
        len(data) >= LEAF_EVENT_PREFIX_LEN + LEAF_SCHEMA_V1_LEN
        and data[0] == 1 and data[1] == 0
        and data[6] == 1 and data[7] == 0
        and data[LEAF_EVENT_PREFIX_LEN] == 0
    )


def decode_bubblegum_leaf(details: TransactionDetails) -> LeafEvent:
    """
    Decode the leaf minted by a Bubblegum ``mintV1`` / ``mintToCollectionV1``.

    Scans the inner instructions for the noop CPI carrying a leaf schema
    event. Expects ``getTransaction`` output in ``json`` encoding.

    Raises:
        LeafDecodeError: If no leaf schema event is present
    """
    signatures = _raw_transaction(details).get("signatures") or [None]
    if details.meta is None:
        raise LeafDecodeError("Transaction details carry no metadata", signature=signatures[0])

    keys = _account_keys(details)
    noop = str(SPL_NOOP_PROGRAM_ID)
    for group in details.meta.inner_instructions or []:
        for ix in group.get("instructions") or []:
            index = ix.get("programIdIndex")
            if not isinstance(index, int) or not 0 <= index < len(keys) or keys[index] != noop:
                continue
            try:
                data = base58.b58decode(ix.get("data") or "")
            except ValueError:
                continue
            if _is_leaf_schema_event(data):
                return _parse_leaf_schema_v1(data[LEAF_EVENT_PREFIX_LEN + 1:])

    raise LeafDecodeError("Could not parse leaf from transaction", signature=signatures[0])


def _parse_leaf_schema_v1(body: bytes) -> LeafEvent:
    def pubkey_at(offset: int) -> str:
        return str(Pubkey.from_bytes(body[offset:offset + 32]))

    nonce = int.from_bytes(body[96:104], "little")
    return LeafEvent(
        nonce=nonce,
        owner=pubkey_at(32),
        delegate=pubkey_at(64),
        leaf_id=pubkey_at(0),
        data_hash=base58.b58encode(body[104:136]).decode("ascii"),
        creator_hash=base58.b58encode(body[136:168]).decode("ascii"),
    )
