#!/usr/bin/env python3
"""
Example of defining a fungible token type and minting a token on the
tokens partition of a local Alphabill network.
"""
import os

from alphabill_sdk import (
    FeeManager,
    FungibleToken,
    FungibleTokenType,
    LocalSigner,
    MoneyPartitionClient,
    TokensPartitionClient,
    always_true_predicate,
    new_p2pkh_proof_generator,
    p2pkh_predicate,
    public_key_hash
)


def main():
    private_key = os.environ.get("PRIVATE_KEY")
    if not private_key:
        print("ERROR: PRIVATE_KEY environment variable is required")
        return

    signer = LocalSigner(private_key)
    owner_id = public_key_hash(signer.public_key)
    proof = new_p2pkh_proof_generator(signer)

    money = MoneyPartitionClient.from_network("local")
    tokens = TokensPartitionClient.from_network("local")

    # Fee credit is paid from money partition bills
    fees = FeeManager(money, tokens, signer)
    fcr = fees.get_fee_credit()
    if fcr is None:
        fees.add_fee_credit(1000)
        fcr = fees.get_fee_credit()
    print(f"Tokens partition fee credit: {fcr.balance}")

    token_type = FungibleTokenType(
        network_id=tokens.network_id,
        partition_id=tokens.partition_id,
        symbol="EXAMPLE",
        name="Example token",
        decimal_places=2,
        sub_type_creation_predicate=always_true_predicate(),
        token_creation_predicate=always_true_predicate(),
        invariant_predicate=always_true_predicate(),
    )
    order = token_type.define(
        timeout=tokens.get_round_number() + 10,
        fee_credit_record_id=fcr.id,
        fee_proof=proof,
    )
    tokens.confirm_transaction(order)
    print(f"Defined token type {token_type.id.hex()}")

    token = FungibleToken(
        network_id=tokens.network_id,
        partition_id=tokens.partition_id,
        type_id=token_type.id,
        owner_predicate=p2pkh_predicate(owner_id),
        amount=10000,
    )
    order = token.mint(
        timeout=tokens.get_round_number() + 10,
        fee_credit_record_id=fcr.id,
        fee_proof=proof,
    )
    tokens.confirm_transaction(order)
    print(f"Minted token {token.id.hex()}")

    for t in tokens.get_fungible_tokens(owner_id):
        print(f"  {t.id.hex()}: {t.amount} {t.symbol}")

    money.close()
    tokens.close()


if __name__ == "__main__":
    main()
