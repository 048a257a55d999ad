"""
On-chain program catalogs

Each module covers one program: its instruction enum, data layouts,
builders and error catalog. The registry looks catalogs up by name or id.
"""

from . import associated_token, compute_budget, memo, stake, system, token
from .catalog import DecodedInstruction, ProgramCatalog
from .constants import (
    TOKEN_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    STAKE_PROGRAM_ID,
    STAKE_CONFIG_ID,
    COMPUTE_BUDGET_PROGRAM_ID,
    MEMO_PROGRAM_ID,
    MEMO_V1_PROGRAM_ID,
    RENT_SYSVAR_ID,
    RECENT_BLOCKHASHES_SYSVAR_ID,
    CLOCK_SYSVAR_ID,
    STAKE_HISTORY_SYSVAR_ID,
    NATIVE_MINT,
)
from .errors import (
    ProgramError,
    TokenError,
    AssociatedTokenError,
    SystemProgramError,
    StakeError,
    UnknownErrorCode,
    resolve_error,
)
from .registry import (
    ProgramRegistry,
    get_catalog,
    register_catalog,
    decode_instruction,
    resolve_program_error,
)

__all__ = [
    # Program modules
    "associated_token",
    "compute_budget",
    "memo",
    "stake",
    "system",
    "token",
    # Catalogs
    "DecodedInstruction",
    "ProgramCatalog",
    "ProgramRegistry",
    "get_catalog",
    "register_catalog",
    "decode_instruction",
    "resolve_program_error",
    # Program ids
    "TOKEN_PROGRAM_ID",
    "TOKEN_2022_PROGRAM_ID",
    "ASSOCIATED_TOKEN_PROGRAM_ID",
    "SYSTEM_PROGRAM_ID",
    "STAKE_PROGRAM_ID",
    "STAKE_CONFIG_ID",
    "COMPUTE_BUDGET_PROGRAM_ID",
    "MEMO_PROGRAM_ID",
    "MEMO_V1_PROGRAM_ID",
    "RENT_SYSVAR_ID",
    "RECENT_BLOCKHASHES_SYSVAR_ID",
    "CLOCK_SYSVAR_ID",
    "STAKE_HISTORY_SYSVAR_ID",
    "NATIVE_MINT",
    # Error catalogs
    "ProgramError",
    "TokenError",
    "AssociatedTokenError",
    "SystemProgramError",
    "StakeError",
    "UnknownErrorCode",
    "resolve_error",
]
