"""
Error definitions for Solana Program Kit
"""

from .exceptions import (
    ErrorCode,
    ProgramKitError,
    SeedConstraintViolation,
    InvalidSeeds,
    IllegalOwner,
    NoValidAddress,
    InvalidPubkey,
    InstructionEncodingError,
    UnknownProgram,
    ConfigurationError,
)

__all__ = [
    "ErrorCode",
    "ProgramKitError",
    "SeedConstraintViolation",
    "InvalidSeeds",
    "IllegalOwner",
    "NoValidAddress",
    "InvalidPubkey",
    "InstructionEncodingError",
    "UnknownProgram",
    "ConfigurationError",
]
