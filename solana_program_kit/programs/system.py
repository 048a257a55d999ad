"""
System program instruction builders

The system program uses a 4-byte little-endian u32 discriminator (bincode
enum tag) instead of a single byte. Seed strings are bincode strings:
a u64 length prefix followed by the UTF-8 bytes.
"""

from enum import IntEnum
from typing import List, Union

from ..codec import DISC_U32, Field, Layout
from ..errors import SeedConstraintViolation
from ..pda import MAX_SEED_LEN
from ..types import AccountMeta, Instruction, PubkeyLike, as_pubkey
from .catalog import ProgramCatalog
from .constants import RECENT_BLOCKHASHES_SYSVAR_ID, RENT_SYSVAR_ID, SYSTEM_PROGRAM_ID
from .errors import SystemProgramError

# Largest account data the runtime allows (10 MiB)
MAX_PERMITTED_DATA_LENGTH = 10 * 1024 * 1024

# Size of a nonce account's data
NONCE_STATE_SIZE = 80


class SystemInstruction(IntEnum):
    """Instruction discriminators of the system program (u32)"""
    CreateAccount = 0
    Assign = 1
    Transfer = 2
    CreateAccountWithSeed = 3
    AdvanceNonceAccount = 4
    WithdrawNonceAccount = 5
    InitializeNonceAccount = 6
    AuthorizeNonceAccount = 7
    Allocate = 8
    AllocateWithSeed = 9
    AssignWithSeed = 10
    TransferWithSeed = 11
    UpgradeNonceAccount = 12


_LAMPORTS = Field("lamports", "u64")
_SPACE = Field("space", "u64")
_OWNER = Field("owner", "pubkey")
_BASE = Field("base", "pubkey")
_SEED = Field("seed", "string")
_AUTHORITY = Field("authority", "pubkey")

_FIELDS = {
    SystemInstruction.CreateAccount: [_LAMPORTS, _SPACE, _OWNER],
    SystemInstruction.Assign: [_OWNER],
    SystemInstruction.Transfer: [_LAMPORTS],
    SystemInstruction.CreateAccountWithSeed: [_BASE, _SEED, _LAMPORTS, _SPACE, _OWNER],
    SystemInstruction.WithdrawNonceAccount: [_LAMPORTS],
    SystemInstruction.InitializeNonceAccount: [_AUTHORITY],
    SystemInstruction.AuthorizeNonceAccount: [_AUTHORITY],
    SystemInstruction.Allocate: [_SPACE],
    SystemInstruction.AllocateWithSeed: [_BASE, _SEED, _SPACE, _OWNER],
    SystemInstruction.AssignWithSeed: [_BASE, _SEED, _OWNER],
    SystemInstruction.TransferWithSeed: [_LAMPORTS, Field("from_seed", "string"), Field("from_owner", "pubkey")],
}

LAYOUTS = {
    variant: Layout(variant.name, variant, _FIELDS.get(variant, ()), discriminator_format=DISC_U32)
    for variant in SystemInstruction
}

CATALOG = ProgramCatalog(
    name="system",
    program_id=SYSTEM_PROGRAM_ID,
    instructions=SystemInstruction,
    layouts=LAYOUTS,
    errors=SystemProgramError,
    discriminator_format=DISC_U32,
)


def _build(variant: SystemInstruction, accounts, **values) -> Instruction:
    return Instruction.new(CATALOG.program_id, accounts, CATALOG.encode(variant, values))


def _check_seed(seed: Union[str, bytes]) -> None:
    raw = seed.encode("utf-8") if isinstance(seed, str) else bytes(seed)
    if len(raw) > MAX_SEED_LEN:
        raise SeedConstraintViolation.seed_too_long(0, len(raw), MAX_SEED_LEN)


# ============================================================================
# Account creation and ownership
# ============================================================================

def create_account(
    from_pubkey: PubkeyLike,
    to_pubkey: PubkeyLike,
    lamports: int,
    space: int,
    owner: PubkeyLike,
) -> Instruction:
    """
    CreateAccount (0)

    Accounts:
        0. [writable, signer] Funding account
        1. [writable, signer] New account
    """
    accounts = [
        AccountMeta.writable_signer(as_pubkey(from_pubkey)),
        AccountMeta.writable_signer(as_pubkey(to_pubkey)),
    ]
    return _build(SystemInstruction.CreateAccount, accounts, lamports=lamports, space=space, owner=owner)


def create_account_with_seed(
    from_pubkey: PubkeyLike,
    to_pubkey: PubkeyLike,
    base: PubkeyLike,
    seed: str,
    lamports: int,
    space: int,
    owner: PubkeyLike,
) -> Instruction:
    """
    CreateAccountWithSeed (3)

    to_pubkey is normally pda.create_with_seed(base, seed, owner).

    Accounts:
        0. [writable, signer] Funding account
        1. [writable] Created account
        2. [signer] Base account (only when different from the funding account)
    """
    _check_seed(seed)
    from_key = as_pubkey(from_pubkey)
    base_key = as_pubkey(base)

    accounts = [
        AccountMeta.writable_signer(from_key),
        AccountMeta.writable(as_pubkey(to_pubkey)),
    ]
    if base_key != from_key:
        accounts.append(AccountMeta.readonly_signer(base_key))

    return _build(
        SystemInstruction.CreateAccountWithSeed,
        accounts,
        base=base_key,
        seed=seed,
        lamports=lamports,
        space=space,
        owner=owner,
    )


def assign(account: PubkeyLike, owner: PubkeyLike) -> Instruction:
    """Assign (1): account [writable, signer]"""
    return _build(
        SystemInstruction.Assign,
        [AccountMeta.writable_signer(as_pubkey(account))],
        owner=owner,
    )


def assign_with_seed(
    account: PubkeyLike,
    base: PubkeyLike,
    seed: str,
    owner: PubkeyLike,
) -> Instruction:
    """AssignWithSeed (10): account [writable], base [signer]"""
    _check_seed(seed)
    base_key = as_pubkey(base)
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly_signer(base_key),
    ]
    return _build(SystemInstruction.AssignWithSeed, accounts, base=base_key, seed=seed, owner=owner)


def allocate(account: PubkeyLike, space: int) -> Instruction:
    """Allocate (8): account [writable, signer]"""
    return _build(
        SystemInstruction.Allocate,
        [AccountMeta.writable_signer(as_pubkey(account))],
        space=space,
    )


def allocate_with_seed(
    account: PubkeyLike,
    base: PubkeyLike,
    seed: str,
    space: int,
    owner: PubkeyLike,
) -> Instruction:
    """AllocateWithSeed (9): account [writable], base [signer]"""
    _check_seed(seed)
    base_key = as_pubkey(base)
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly_signer(base_key),
    ]
    return _build(
        SystemInstruction.AllocateWithSeed,
        accounts,
        base=base_key,
        seed=seed,
        space=space,
        owner=owner,
    )


# ============================================================================
# Lamport transfers
# ============================================================================

def transfer(from_pubkey: PubkeyLike, to_pubkey: PubkeyLike, lamports: int) -> Instruction:
    """
    Transfer (2)

    Accounts:
        0. [writable, signer] Funding account
        1. [writable] Recipient
    """
    accounts = [
        AccountMeta.writable_signer(as_pubkey(from_pubkey)),
        AccountMeta.writable(as_pubkey(to_pubkey)),
    ]
    return _build(SystemInstruction.Transfer, accounts, lamports=lamports)


def transfer_with_seed(
    from_pubkey: PubkeyLike,
    from_base: PubkeyLike,
    from_seed: str,
    from_owner: PubkeyLike,
    to_pubkey: PubkeyLike,
    lamports: int,
) -> Instruction:
    """
    TransferWithSeed (11)

    Accounts:
        0. [writable] Funding account (derived from base + seed)
        1. [signer] Base account
        2. [writable] Recipient
    """
    _check_seed(from_seed)
    accounts = [
        AccountMeta.writable(as_pubkey(from_pubkey)),
        AccountMeta.readonly_signer(as_pubkey(from_base)),
        AccountMeta.writable(as_pubkey(to_pubkey)),
    ]
    return _build(
        SystemInstruction.TransferWithSeed,
        accounts,
        lamports=lamports,
        from_seed=from_seed,
        from_owner=from_owner,
    )


# ============================================================================
# Durable nonces
# ============================================================================

def initialize_nonce_account(nonce_pubkey: PubkeyLike, authority: PubkeyLike) -> Instruction:
    """
    InitializeNonceAccount (6)

    Accounts:
        0. [writable] Nonce account
        1. [] RecentBlockhashes sysvar
        2. [] Rent sysvar
    """
    accounts = [
        AccountMeta.writable(as_pubkey(nonce_pubkey)),
        AccountMeta.readonly(RECENT_BLOCKHASHES_SYSVAR_ID),
        AccountMeta.readonly(RENT_SYSVAR_ID),
    ]
    return _build(SystemInstruction.InitializeNonceAccount, accounts, authority=authority)


def advance_nonce_account(nonce_pubkey: PubkeyLike, authority: PubkeyLike) -> Instruction:
    """AdvanceNonceAccount (4): nonce [writable], RecentBlockhashes [], authority [signer]"""
    accounts = [
        AccountMeta.writable(as_pubkey(nonce_pubkey)),
        AccountMeta.readonly(RECENT_BLOCKHASHES_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(SystemInstruction.AdvanceNonceAccount, accounts)


def withdraw_nonce_account(
    nonce_pubkey: PubkeyLike,
    authority: PubkeyLike,
    to_pubkey: PubkeyLike,
    lamports: int,
) -> Instruction:
    """
    WithdrawNonceAccount (5)

    Accounts:
        0. [writable] Nonce account
        1. [writable] Recipient
        2. [] RecentBlockhashes sysvar
        3. [] Rent sysvar
        4. [signer] Nonce authority
    """
    accounts = [
        AccountMeta.writable(as_pubkey(nonce_pubkey)),
        AccountMeta.writable(as_pubkey(to_pubkey)),
        AccountMeta.readonly(RECENT_BLOCKHASHES_SYSVAR_ID),
        AccountMeta.readonly(RENT_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(SystemInstruction.WithdrawNonceAccount, accounts, lamports=lamports)


def authorize_nonce_account(
    nonce_pubkey: PubkeyLike,
    authority: PubkeyLike,
    new_authority: PubkeyLike,
) -> Instruction:
    """AuthorizeNonceAccount (7): nonce [writable], current authority [signer]"""
    accounts = [
        AccountMeta.writable(as_pubkey(nonce_pubkey)),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(SystemInstruction.AuthorizeNonceAccount, accounts, authority=new_authority)


def upgrade_nonce_account(nonce_pubkey: PubkeyLike) -> Instruction:
    """UpgradeNonceAccount (12)"""
    return _build(SystemInstruction.UpgradeNonceAccount, [AccountMeta.writable(as_pubkey(nonce_pubkey))])


def create_nonce_account(
    from_pubkey: PubkeyLike,
    nonce_pubkey: PubkeyLike,
    authority: PubkeyLike,
    lamports: int,
) -> List[Instruction]:
    """CreateAccount + InitializeNonceAccount pair for a fresh durable nonce"""
    return [
        create_account(from_pubkey, nonce_pubkey, lamports, NONCE_STATE_SIZE, SYSTEM_PROGRAM_ID),
        initialize_nonce_account(nonce_pubkey, authority),
    ]
