"""
Account metadata value type
"""

from dataclasses import dataclass

from solders.instruction import AccountMeta as SoldersAccountMeta
from solders.pubkey import Pubkey


@dataclass(frozen=True)
class AccountMeta:
    """
    One account referenced by an instruction

    is_signer only records that the target program expects a signature for
    this account; signatures are supplied later by the signing layer and are
    never checked here.

    Attributes:
        pubkey: Account address
        is_signer: Account must sign the enclosing transaction
        is_writable: Account data or lamports may be modified
    """
    pubkey: Pubkey
    is_signer: bool = False
    is_writable: bool = False

    @classmethod
    def writable(cls, pubkey: Pubkey) -> "AccountMeta":
        return cls(pubkey, is_signer=False, is_writable=True)

    @classmethod
    def readonly(cls, pubkey: Pubkey) -> "AccountMeta":
        return cls(pubkey, is_signer=False, is_writable=False)

    @classmethod
    def writable_signer(cls, pubkey: Pubkey) -> "AccountMeta":
        return cls(pubkey, is_signer=True, is_writable=True)

    @classmethod
    def readonly_signer(cls, pubkey: Pubkey) -> "AccountMeta":
        return cls(pubkey, is_signer=True, is_writable=False)

    @property
    def flags(self) -> str:
        """Compact permission string as used in program docs: "[s,w]", "[w]", "[]"..."""
        parts = []
        if self.is_signer:
            parts.append("s")
        if self.is_writable:
            parts.append("w")
        return "[" + ",".join(parts) + "]"

    def to_solders(self) -> SoldersAccountMeta:
        """Convert for the transaction assembly layer"""
        return SoldersAccountMeta(self.pubkey, is_signer=self.is_signer, is_writable=self.is_writable)

    @classmethod
    def from_solders(cls, meta: SoldersAccountMeta) -> "AccountMeta":
        return cls(meta.pubkey, is_signer=meta.is_signer, is_writable=meta.is_writable)

    def __repr__(self) -> str:
        return f"AccountMeta({self.pubkey}, {self.flags})"
