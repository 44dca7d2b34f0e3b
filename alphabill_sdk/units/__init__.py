"""
Unit domain models and their transaction constructors.
"""
from .base import UnlockCounterPolicy
from .bill import Bill
from .fee_credit_record import FeeCreditRecord
from .token import FungibleToken, NonFungibleToken, new_token_id
from .token_type import FungibleTokenType, NonFungibleTokenType

__all__ = [
    "UnlockCounterPolicy",
    "Bill",
    "FeeCreditRecord",
    "FungibleToken",
    "NonFungibleToken",
    "FungibleTokenType",
    "NonFungibleTokenType",
    "new_token_id",
]
