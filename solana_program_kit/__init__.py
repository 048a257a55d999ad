"""
Solana Program Kit - Client-side primitives for Solana programs

Provides:
- Program-Derived Address derivation (find / create / with seed)
- Instruction builders for SPL Token, Associated Token Account,
  System, Compute Budget and Memo programs
- Per-program error catalogs and instruction decoding

Nothing here talks to the network: builders return Instruction values
that any transaction assembler can consume (see Instruction.to_solders()).
"""

from .types import (
    PubkeyLike,
    as_pubkey,
    to_base58,
    AccountMeta,
    Instruction,
)
from .pda import (
    ProgramDerivedAddress,
    derive_address,
    find_program_address,
    create_program_address,
    create_with_seed,
    is_on_curve,
    MAX_SEEDS,
    MAX_SEED_LEN,
)
from .errors import (
    ProgramKitError,
    SeedConstraintViolation,
    InvalidSeeds,
    IllegalOwner,
    NoValidAddress,
    InvalidPubkey,
    InstructionEncodingError,
    UnknownProgram,
    ConfigurationError,
    ErrorCode,
)
from .programs import (
    associated_token,
    compute_budget,
    memo,
    stake,
    system,
    token,
    ProgramRegistry,
    DecodedInstruction,
    TokenError,
    AssociatedTokenError,
    SystemProgramError,
    StakeError,
    UnknownErrorCode,
)

__all__ = [
    # Types
    "PubkeyLike",
    "as_pubkey",
    "to_base58",
    "AccountMeta",
    "Instruction",
    # Derivation
    "ProgramDerivedAddress",
    "derive_address",
    "find_program_address",
    "create_program_address",
    "create_with_seed",
    "is_on_curve",
    "MAX_SEEDS",
    "MAX_SEED_LEN",
    # Programs
    "associated_token",
    "compute_budget",
    "memo",
    "stake",
    "system",
    "token",
    "ProgramRegistry",
    "DecodedInstruction",
    # Error catalogs
    "TokenError",
    "AssociatedTokenError",
    "SystemProgramError",
    "StakeError",
    "UnknownErrorCode",
    # Errors
    "ProgramKitError",
    "SeedConstraintViolation",
    "InvalidSeeds",
    "IllegalOwner",
    "NoValidAddress",
    "InvalidPubkey",
    "InstructionEncodingError",
    "UnknownProgram",
    "ConfigurationError",
    "ErrorCode",
]

__version__ = "0.1.0"
