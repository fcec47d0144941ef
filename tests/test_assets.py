"""
Tests for asset identity derivation.
"""
import base58
import pytest
from solders.pubkey import Pubkey

from leafmint_sdk.assets import (
    BUBBLEGUM_PROGRAM_ID, U64_MAX, decode_bubblegum_leaf, derive_asset_id, parse_pubkey
)
from leafmint_sdk.exceptions import InvalidInputError, LeafDecodeError
from leafmint_sdk.models import TransactionDetails

from tests.test_helpers import TEST_TREE
from tests.test_helpers.leaf_events import (
    CREATOR_HASH, DATA_HASH, LEAF_DELEGATE, LEAF_OWNER, make_mint_details
)


def test_bubblegum_program_id():
    assert str(BUBBLEGUM_PROGRAM_ID) == "BGUMAp9Gq7iTEuizy4pqaxsTyUCBK68MDfK752saRPUY"


def test_derivation_is_deterministic():
    first = derive_asset_id(TEST_TREE, 3)
    second = derive_asset_id(Pubkey.from_string(TEST_TREE), 3)

    assert first == second
    assert first.tree_address == TEST_TREE
    assert first.leaf_nonce == 3
    assert str(first) == first.asset_id


def test_derivation_matches_program_address():
    asset = derive_asset_id(TEST_TREE, 0)
    expected, _ = Pubkey.find_program_address(
        [b"asset", bytes(Pubkey.from_string(TEST_TREE)), bytes(8)],
        BUBBLEGUM_PROGRAM_ID,
    )

    assert asset.asset_id == str(expected)
    assert not expected.is_on_curve()


def test_different_leaves_have_different_ids():
    ids = {derive_asset_id(TEST_TREE, nonce).asset_id for nonce in range(10)}

    assert len(ids) == 10


def test_max_nonce_is_accepted():
    assert derive_asset_id(TEST_TREE, U64_MAX).leaf_nonce == U64_MAX


@pytest.mark.parametrize("nonce", [-1, U64_MAX + 1, "3", 1.0, True])
def test_invalid_nonce(nonce):
    with pytest.raises(InvalidInputError):
        derive_asset_id(TEST_TREE, nonce)


@pytest.mark.parametrize("tree", ["", "not base58!", None, "abc"])
def test_invalid_tree(tree):
    with pytest.raises(InvalidInputError):
        derive_asset_id(tree, 1)


def test_parse_pubkey_passthrough():
    key = Pubkey.from_string(TEST_TREE)

    assert parse_pubkey(key) is key


def test_decode_bubblegum_leaf():
    leaf_id = Pubkey.from_string(TEST_TREE)
    details = TransactionDetails.model_validate(make_mint_details(nonce=1234, leaf_id=leaf_id))

    leaf = decode_bubblegum_leaf(details)

    assert leaf.nonce == 1234
    assert leaf.leaf_id == TEST_TREE
    assert leaf.owner == str(LEAF_OWNER)
    assert leaf.delegate == str(LEAF_DELEGATE)
    assert leaf.data_hash == base58.b58encode(DATA_HASH).decode("ascii")
    assert leaf.creator_hash == base58.b58encode(CREATOR_HASH).decode("ascii")


def test_decoded_nonce_feeds_derivation():
    details = TransactionDetails.model_validate(make_mint_details(nonce=U64_MAX))

    leaf = decode_bubblegum_leaf(details)

    assert derive_asset_id(TEST_TREE, leaf.nonce).leaf_nonce == U64_MAX


def test_decode_without_leaf_event():
    details = TransactionDetails.model_validate(make_mint_details(nonce=1, include_leaf=False))

    with pytest.raises(LeafDecodeError, match="Could not parse leaf") as exc_info:
        decode_bubblegum_leaf(details)

    assert exc_info.value.signature == "5mintsig"


def test_decode_ignores_other_programs():
    payload = make_mint_details(nonce=9)
    # point every inner instruction at the payer instead of the noop program
    for ix in payload["meta"]["innerInstructions"][0]["instructions"]:
        ix["programIdIndex"] = 0

    with pytest.raises(LeafDecodeError):
        decode_bubblegum_leaf(TransactionDetails.model_validate(payload))


def test_decode_without_meta():
    with pytest.raises(LeafDecodeError):
        decode_bubblegum_leaf(TransactionDetails.model_validate({"slot": 1}))
