#!/usr/bin/env python3
"""
Example of paying fees, transferring a bill and collecting dust on the
money partition of a local Alphabill network.
"""
import logging
import os

from alphabill_sdk import (
    DustCollector,
    FeeManager,
    LocalSigner,
    MoneyPartitionClient,
    new_p2pkh_proof_generator,
    p2pkh_predicate,
    public_key_hash
)


def main():
    """
    Demonstrate usage of the money partition client.

    This example shows how to:
    1. Connect to the money partition of a configured network
    2. Add fee credit from the bills of the signer
    3. Transfer a bill to another owner
    4. Join the remaining small bills with dust collection
    """
    logging.basicConfig(level=logging.INFO)

    private_key = os.environ.get("PRIVATE_KEY")
    receiver_key_hash = os.environ.get("RECEIVER_PUBKEY_HASH")
    if not private_key:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    signer = LocalSigner(private_key)
    owner_id = public_key_hash(signer.public_key)
    proof = new_p2pkh_proof_generator(signer)

    with MoneyPartitionClient.from_network("local") as money:
        print(f"Connected to money partition {money.partition_id} of network {money.network_id}")

        bills = money.get_bills(owner_id)
        print(f"Signer owns {len(bills)} bills, total value {sum(b.value for b in bills)}")

        fees = FeeManager(money, money, signer)
        if fees.get_fee_credit() is None:
            result = fees.add_fee_credit(1000)
            print(f"Added fee credit, paid {result.fees} in fees")
        fcr = fees.get_fee_credit()
        print(f"Fee credit balance: {fcr.balance}")

        if receiver_key_hash and bills:
            bill = max(bills, key=lambda b: b.value)
            order = bill.transfer(
                p2pkh_predicate(bytes.fromhex(receiver_key_hash)),
                timeout=money.get_round_number() + 10,
                fee_credit_record_id=fcr.id,
                owner_proof=proof,
                fee_proof=proof,
            )
            tx_proof = money.confirm_transaction(order)
            print(f"Transferred bill {bill.id.hex()}, fee {tx_proof.actual_fee}")

        dc_result = DustCollector(money, signer).collect_dust()
        if dc_result is None:
            print("Nothing to collect")
        else:
            print(f"Dust collected, paid {dc_result.fee_sum()} in fees")


if __name__ == "__main__":
    main()
