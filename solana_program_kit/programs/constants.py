"""
Program IDs and sysvars

These addresses are part of the wire contract with the deployed programs
and must match them bit for bit.
"""

from solders.pubkey import Pubkey

# Token Programs
TOKEN_PROGRAM_ID = Pubkey.from_string("TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA")
TOKEN_2022_PROGRAM_ID = Pubkey.from_string("TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb")

# Associated Token Program
ASSOCIATED_TOKEN_PROGRAM_ID = Pubkey.from_string("ATokenGPvbdGVxr1b2hvZbsiqW5xWH25efTNsLJA8knL")

# System Program
SYSTEM_PROGRAM_ID = Pubkey.from_string("11111111111111111111111111111111")

# Compute Budget Program
COMPUTE_BUDGET_PROGRAM_ID = Pubkey.from_string("ComputeBudget111111111111111111111111111111")

# Stake Program and its (deprecated, still required) config account
STAKE_PROGRAM_ID = Pubkey.from_string("Stake11111111111111111111111111111111111111")
STAKE_CONFIG_ID = Pubkey.from_string("StakeConfig11111111111111111111111111111111")

# Memo Programs
MEMO_PROGRAM_ID = Pubkey.from_string("MemoSq4gqABAXKb96qnH8TysNcWxMyWCqXgDLGmfcHr")
MEMO_V1_PROGRAM_ID = Pubkey.from_string("Memo1UhkJRfHyvLMcVucJwxXeuD728EqVDDwQDxFMNo")

# Sysvars
RENT_SYSVAR_ID = Pubkey.from_string("SysvarRent111111111111111111111111111111111")
RECENT_BLOCKHASHES_SYSVAR_ID = Pubkey.from_string("SysvarRecentB1ockHashes11111111111111111111")
CLOCK_SYSVAR_ID = Pubkey.from_string("SysvarC1ock11111111111111111111111111111111")
STAKE_HISTORY_SYSVAR_ID = Pubkey.from_string("SysvarStakeHistory1111111111111111111111111")

# Wrapped SOL mint (native mint of the token program)
NATIVE_MINT = Pubkey.from_string("So11111111111111111111111111111111111111112")

# Token program names accepted by ProgramsConfig.default_token_program
TOKEN_PROGRAMS = {
    "token": TOKEN_PROGRAM_ID,
    "token-2022": TOKEN_2022_PROGRAM_ID,
}
