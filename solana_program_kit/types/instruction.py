"""
Instruction value type
"""

from dataclasses import dataclass, field
from typing import Iterable, Tuple

from solders.instruction import Instruction as SoldersInstruction
from solders.pubkey import Pubkey

from .account_meta import AccountMeta


@dataclass(frozen=True)
class Instruction:
    """
    A single program invocation

    Account order is fixed per instruction variant by the target program.
    Instances are built fresh by the program builders and handed to the
    transaction assembly layer (see to_solders).

    Attributes:
        program_id: Program that executes the instruction
        accounts: Ordered account metas
        data: Opaque instruction data (discriminator followed by fields)
    """
    program_id: Pubkey
    accounts: Tuple[AccountMeta, ...] = field(default_factory=tuple)
    data: bytes = b""

    def __post_init__(self):
        # Normalise so equality is structural regardless of the input containers
        object.__setattr__(self, "accounts", tuple(self.accounts))
        object.__setattr__(self, "data", bytes(self.data))

    @classmethod
    def new(cls, program_id: Pubkey, accounts: Iterable[AccountMeta], data: bytes) -> "Instruction":
        return cls(program_id, tuple(accounts), bytes(data))

    @property
    def discriminator(self) -> int:
        """First data byte, or -1 for an empty payload"""
        return self.data[0] if self.data else -1

    @property
    def signers(self) -> Tuple[Pubkey, ...]:
        return tuple(meta.pubkey for meta in self.accounts if meta.is_signer)

    def to_solders(self) -> SoldersInstruction:
        """Convert for the transaction assembly layer"""
        return SoldersInstruction(
            self.program_id,
            self.data,
            [meta.to_solders() for meta in self.accounts],
        )

    @classmethod
    def from_solders(cls, ix: SoldersInstruction) -> "Instruction":
        return cls(
            ix.program_id,
            tuple(AccountMeta.from_solders(meta) for meta in ix.accounts),
            bytes(ix.data),
        )

    def __repr__(self) -> str:
        return (
            f"Instruction(program_id={self.program_id}, "
            f"accounts={len(self.accounts)}, data={self.data.hex()})"
        )
