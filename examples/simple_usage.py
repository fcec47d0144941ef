#!/usr/bin/env python3
"""
Simple example of using the leafmint SDK.
"""
import asyncio
import json
import os

from solders.pubkey import Pubkey
from solders.system_program import TransferParams, transfer

from leafmint_sdk import JsonRpcLedgerClient, LedgerConfig, PreparedTransaction, TransactionOrchestrator
from leafmint_sdk import keypair_from_secret


async def main():
    """
    Demonstrate basic usage of the TransactionOrchestrator.

    This example shows how to:
    1. Load configuration and a signing keypair
    2. Prepare a transaction
    3. Submit it, wait for finality and report the fee
    """
    # Read configuration from environment
    KEYPAIR_PATH = os.environ.get("LEAFMINT_KEYPAIR", os.path.expanduser("~/.config/solana/id.json"))
    RECIPIENT = os.environ.get("RECIPIENT")

    if not RECIPIENT:
        print("ERROR: RECIPIENT environment variable is required")
        return

    with open(KEYPAIR_PATH) as f:
        payer = keypair_from_secret(json.load(f))

    config = LedgerConfig.from_env()
    ledger = JsonRpcLedgerClient.from_config(config)
    orchestrator = TransactionOrchestrator(config, ledger)

    tx = PreparedTransaction(label="transfer").add(
        transfer(TransferParams(
            from_pubkey=payer.pubkey(),
            to_pubkey=Pubkey.from_string(RECIPIENT),
            lamports=1_000,
        ))
    )

    try:
        result = await orchestrator.submit_and_confirm(tx, payer)
        if result.ok:
            receipt = result.value
            print(f"Transaction: {receipt.tx_hash}")
            print(f"Fee: {receipt.sol_fee} SOL")
            print(f"Explorer: {receipt.explorer_url}")
        else:
            print(f"Failed while {result.stage.value}: {result.error}")
            if result.signature:
                print(f"Check {orchestrator.tx_url(result.signature)} before retrying")
    finally:
        ledger.close()


if __name__ == "__main__":
    asyncio.run(main())
