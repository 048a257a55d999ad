"""
Type definitions for Solana Program Kit
"""

from .pubkey import PUBKEY_LEN, PubkeyLike, as_pubkey, to_base58, pubkey_of
from .account_meta import AccountMeta
from .instruction import Instruction

__all__ = [
    "PUBKEY_LEN",
    "PubkeyLike",
    "as_pubkey",
    "to_base58",
    "pubkey_of",
    "AccountMeta",
    "Instruction",
]
