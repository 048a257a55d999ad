"""
Stake program instruction builders

Like the system program, the stake program is bincode-encoded: a u32
discriminator, u32 enum tags (StakeAuthorize), u64-length-prefixed seed
strings, and 1-byte presence flags for the optional lockup fields.

Authority changes made before a lockup expires need the lockup custodian
as an extra signer; every builder that can hit that case takes an
optional custodian and appends it last.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import List, Optional

from solders.pubkey import Pubkey

from ..codec import DISC_U32, Field, Layout
from ..types import AccountMeta, Instruction, PubkeyLike, as_pubkey
from .catalog import ProgramCatalog
from .constants import (
    CLOCK_SYSVAR_ID,
    RENT_SYSVAR_ID,
    STAKE_CONFIG_ID,
    STAKE_HISTORY_SYSVAR_ID,
    STAKE_PROGRAM_ID,
)
from .errors import StakeError
from . import system
from .system import _check_seed

# Size of a StakeStateV2 account
STAKE_STATE_SIZE = 200


class StakeInstruction(IntEnum):
    """Instruction discriminators of the stake program (u32)"""
    Initialize = 0
    Authorize = 1
    DelegateStake = 2
    Split = 3
    Withdraw = 4
    Deactivate = 5
    SetLockup = 6
    Merge = 7
    AuthorizeWithSeed = 8
    InitializeChecked = 9
    AuthorizeChecked = 10
    AuthorizeCheckedWithSeed = 11
    SetLockupChecked = 12
    GetMinimumDelegation = 13
    DeactivateDelinquent = 14
    Redelegate = 15
    MoveStake = 16
    MoveLamports = 17


class StakeAuthorize(IntEnum):
    """Which authority an Authorize* instruction replaces (u32 on the wire)"""
    Staker = 0
    Withdrawer = 1


@dataclass(frozen=True)
class Lockup:
    """
    Lockup set at initialization

    The default (all zero, custodian the zero key) means no lockup.
    """
    unix_timestamp: int = 0
    epoch: int = 0
    custodian: Pubkey = Pubkey.default()


_LAMPORTS = Field("lamports", "u64")
_STAKE_AUTHORIZE = Field("stake_authorize", "u32")
_SEED_FIELDS = [Field("authority_seed", "string"), Field("authority_owner", "pubkey")]

_FIELDS = {
    StakeInstruction.Initialize: [
        Field("staker", "pubkey"),
        Field("withdrawer", "pubkey"),
        Field("unix_timestamp", "i64"),
        Field("epoch", "u64"),
        Field("custodian", "pubkey"),
    ],
    StakeInstruction.Authorize: [Field("new_authority", "pubkey"), _STAKE_AUTHORIZE],
    StakeInstruction.Split: [_LAMPORTS],
    StakeInstruction.Withdraw: [_LAMPORTS],
    StakeInstruction.SetLockup: [
        Field("unix_timestamp", "i64", optional=True),
        Field("epoch", "u64", optional=True),
        Field("custodian", "pubkey", optional=True),
    ],
    StakeInstruction.AuthorizeWithSeed: [
        Field("new_authority", "pubkey"),
        _STAKE_AUTHORIZE,
    ] + _SEED_FIELDS,
    StakeInstruction.AuthorizeChecked: [_STAKE_AUTHORIZE],
    StakeInstruction.AuthorizeCheckedWithSeed: [_STAKE_AUTHORIZE] + _SEED_FIELDS,
    StakeInstruction.SetLockupChecked: [
        Field("unix_timestamp", "i64", optional=True),
        Field("epoch", "u64", optional=True),
    ],
    StakeInstruction.MoveStake: [_LAMPORTS],
    StakeInstruction.MoveLamports: [_LAMPORTS],
}

LAYOUTS = {
    variant: Layout(variant.name, variant, _FIELDS.get(variant, ()), discriminator_format=DISC_U32)
    for variant in StakeInstruction
}

CATALOG = ProgramCatalog(
    name="stake",
    program_id=STAKE_PROGRAM_ID,
    instructions=StakeInstruction,
    layouts=LAYOUTS,
    errors=StakeError,
    discriminator_format=DISC_U32,
)


def _build(variant: StakeInstruction, accounts, **values) -> Instruction:
    return Instruction.new(CATALOG.program_id, accounts, CATALOG.encode(variant, values))


def _with_custodian(accounts: List[AccountMeta], custodian: Optional[PubkeyLike]) -> List[AccountMeta]:
    if custodian is not None:
        accounts.append(AccountMeta.readonly_signer(as_pubkey(custodian)))
    return accounts


# ============================================================================
# Initialization
# ============================================================================

def initialize(
    stake_account: PubkeyLike,
    staker: PubkeyLike,
    withdrawer: PubkeyLike,
    lockup: Optional[Lockup] = None,
) -> Instruction:
    """
    Initialize (0)

    Accounts:
        0. [writable] Uninitialized stake account
        1. [] Rent sysvar
    """
    lockup = lockup or Lockup()
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(RENT_SYSVAR_ID),
    ]
    return _build(
        StakeInstruction.Initialize,
        accounts,
        staker=staker,
        withdrawer=withdrawer,
        unix_timestamp=lockup.unix_timestamp,
        epoch=lockup.epoch,
        custodian=lockup.custodian,
    )


def initialize_checked(
    stake_account: PubkeyLike,
    staker: PubkeyLike,
    withdrawer: PubkeyLike,
) -> Instruction:
    """
    InitializeChecked (9): both authorities sign

    Accounts:
        0. [writable] Uninitialized stake account
        1. [] Rent sysvar
        2. [signer] Staker
        3. [signer] Withdrawer
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(RENT_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(staker)),
        AccountMeta.readonly_signer(as_pubkey(withdrawer)),
    ]
    return _build(StakeInstruction.InitializeChecked, accounts)


def create_stake_account(
    from_pubkey: PubkeyLike,
    stake_account: PubkeyLike,
    staker: PubkeyLike,
    withdrawer: PubkeyLike,
    lamports: int,
    lockup: Optional[Lockup] = None,
) -> List[Instruction]:
    """System CreateAccount + Initialize pair for a fresh stake account"""
    return [
        system.create_account(from_pubkey, stake_account, lamports, STAKE_STATE_SIZE, STAKE_PROGRAM_ID),
        initialize(stake_account, staker, withdrawer, lockup),
    ]


# ============================================================================
# Authorities
# ============================================================================

def authorize(
    stake_account: PubkeyLike,
    authority: PubkeyLike,
    new_authority: PubkeyLike,
    stake_authorize: StakeAuthorize,
    custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Authorize (1)

    Accounts:
        0. [writable] Stake account
        1. [] Clock sysvar
        2. [signer] Current stake or withdraw authority
        3. [signer] Lockup custodian (optional)
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(
        StakeInstruction.Authorize,
        _with_custodian(accounts, custodian),
        new_authority=new_authority,
        stake_authorize=int(stake_authorize),
    )


def authorize_checked(
    stake_account: PubkeyLike,
    authority: PubkeyLike,
    new_authority: PubkeyLike,
    stake_authorize: StakeAuthorize,
    custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    AuthorizeChecked (10): the new authority signs instead of being encoded

    Accounts:
        0. [writable] Stake account
        1. [] Clock sysvar
        2. [signer] Current authority
        3. [signer] New authority
        4. [signer] Lockup custodian (optional)
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
        AccountMeta.readonly_signer(as_pubkey(new_authority)),
    ]
    return _build(
        StakeInstruction.AuthorizeChecked,
        _with_custodian(accounts, custodian),
        stake_authorize=int(stake_authorize),
    )


def authorize_with_seed(
    stake_account: PubkeyLike,
    authority_base: PubkeyLike,
    authority_seed: str,
    authority_owner: PubkeyLike,
    new_authority: PubkeyLike,
    stake_authorize: StakeAuthorize,
    custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    AuthorizeWithSeed (8): current authority is create_with_seed(base, seed, owner)

    Accounts:
        0. [writable] Stake account
        1. [signer] Base key of the current authority
        2. [] Clock sysvar
        3. [signer] Lockup custodian (optional)
    """
    _check_seed(authority_seed)
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly_signer(as_pubkey(authority_base)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
    ]
    return _build(
        StakeInstruction.AuthorizeWithSeed,
        _with_custodian(accounts, custodian),
        new_authority=new_authority,
        stake_authorize=int(stake_authorize),
        authority_seed=authority_seed,
        authority_owner=authority_owner,
    )


def authorize_checked_with_seed(
    stake_account: PubkeyLike,
    authority_base: PubkeyLike,
    authority_seed: str,
    authority_owner: PubkeyLike,
    new_authority: PubkeyLike,
    stake_authorize: StakeAuthorize,
    custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    AuthorizeCheckedWithSeed (11)

    Accounts:
        0. [writable] Stake account
        1. [signer] Base key of the current authority
        2. [] Clock sysvar
        3. [signer] New authority
        4. [signer] Lockup custodian (optional)
    """
    _check_seed(authority_seed)
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly_signer(as_pubkey(authority_base)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(new_authority)),
    ]
    return _build(
        StakeInstruction.AuthorizeCheckedWithSeed,
        _with_custodian(accounts, custodian),
        stake_authorize=int(stake_authorize),
        authority_seed=authority_seed,
        authority_owner=authority_owner,
    )


# ============================================================================
# Delegation
# ============================================================================

def delegate_stake(
    stake_account: PubkeyLike,
    vote_account: PubkeyLike,
    authority: PubkeyLike,
) -> Instruction:
    """
    DelegateStake (2)

    Accounts:
        0. [writable] Initialized stake account
        1. [] Vote account
        2. [] Clock sysvar
        3. [] StakeHistory sysvar
        4. [] Stake config account
        5. [signer] Stake authority
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(as_pubkey(vote_account)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly(STAKE_HISTORY_SYSVAR_ID),
        AccountMeta.readonly(STAKE_CONFIG_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(StakeInstruction.DelegateStake, accounts)


def deactivate(stake_account: PubkeyLike, authority: PubkeyLike) -> Instruction:
    """Deactivate (5): stake [writable], Clock [], authority [signer]"""
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(StakeInstruction.Deactivate, accounts)


def deactivate_delinquent(
    stake_account: PubkeyLike,
    delinquent_vote_account: PubkeyLike,
    reference_vote_account: PubkeyLike,
) -> Instruction:
    """DeactivateDelinquent (14): permissionless, no signer"""
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly(as_pubkey(delinquent_vote_account)),
        AccountMeta.readonly(as_pubkey(reference_vote_account)),
    ]
    return _build(StakeInstruction.DeactivateDelinquent, accounts)


def redelegate(
    stake_account: PubkeyLike,
    uninitialized_stake_account: PubkeyLike,
    vote_account: PubkeyLike,
    authority: PubkeyLike,
) -> Instruction:
    """
    Redelegate (15)

    Deprecated; the runtime never enabled it. Kept so existing data decodes.

    Accounts:
        0. [writable] Delegated stake account
        1. [writable] Uninitialized stake account for the redelegated stake
        2. [] New vote account
        3. [] Stake config account
        4. [signer] Stake authority
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.writable(as_pubkey(uninitialized_stake_account)),
        AccountMeta.readonly(as_pubkey(vote_account)),
        AccountMeta.readonly(STAKE_CONFIG_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(StakeInstruction.Redelegate, accounts)


def get_minimum_delegation() -> Instruction:
    """GetMinimumDelegation (13): no accounts, result comes back as return data"""
    return _build(StakeInstruction.GetMinimumDelegation, [])


# ============================================================================
# Moving lamports
# ============================================================================

def split(
    stake_account: PubkeyLike,
    split_stake_account: PubkeyLike,
    authority: PubkeyLike,
    lamports: int,
) -> Instruction:
    """
    Split (3)

    Accounts:
        0. [writable] Stake account to split
        1. [writable] Uninitialized stake account receiving the split
        2. [signer] Stake authority
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.writable(as_pubkey(split_stake_account)),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(StakeInstruction.Split, accounts, lamports=lamports)


def withdraw(
    stake_account: PubkeyLike,
    recipient: PubkeyLike,
    authority: PubkeyLike,
    lamports: int,
    custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Withdraw (4)

    Accounts:
        0. [writable] Stake account
        1. [writable] Recipient
        2. [] Clock sysvar
        3. [] StakeHistory sysvar
        4. [signer] Withdraw authority
        5. [signer] Lockup custodian (optional)
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.writable(as_pubkey(recipient)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly(STAKE_HISTORY_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(StakeInstruction.Withdraw, _with_custodian(accounts, custodian), lamports=lamports)


def merge(
    destination_stake: PubkeyLike,
    source_stake: PubkeyLike,
    authority: PubkeyLike,
) -> Instruction:
    """
    Merge (7): source is drained into destination

    Accounts:
        0. [writable] Destination stake account
        1. [writable] Source stake account
        2. [] Clock sysvar
        3. [] StakeHistory sysvar
        4. [signer] Stake authority
    """
    accounts = [
        AccountMeta.writable(as_pubkey(destination_stake)),
        AccountMeta.writable(as_pubkey(source_stake)),
        AccountMeta.readonly(CLOCK_SYSVAR_ID),
        AccountMeta.readonly(STAKE_HISTORY_SYSVAR_ID),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(StakeInstruction.Merge, accounts)


def _move(
    variant: StakeInstruction,
    source_stake: PubkeyLike,
    destination_stake: PubkeyLike,
    authority: PubkeyLike,
    lamports: int,
) -> Instruction:
    accounts = [
        AccountMeta.writable(as_pubkey(source_stake)),
        AccountMeta.writable(as_pubkey(destination_stake)),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(variant, accounts, lamports=lamports)


def move_stake(
    source_stake: PubkeyLike,
    destination_stake: PubkeyLike,
    authority: PubkeyLike,
    lamports: int,
) -> Instruction:
    """MoveStake (16): between accounts sharing authorities and lockup"""
    return _move(StakeInstruction.MoveStake, source_stake, destination_stake, authority, lamports)


def move_lamports(
    source_stake: PubkeyLike,
    destination_stake: PubkeyLike,
    authority: PubkeyLike,
    lamports: int,
) -> Instruction:
    """MoveLamports (17): moves only the unstaked lamports"""
    return _move(StakeInstruction.MoveLamports, source_stake, destination_stake, authority, lamports)


# ============================================================================
# Lockup
# ============================================================================

def set_lockup(
    stake_account: PubkeyLike,
    authority: PubkeyLike,
    unix_timestamp: Optional[int] = None,
    epoch: Optional[int] = None,
    custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    SetLockup (6): only the given fields change

    Accounts:
        0. [writable] Initialized stake account
        1. [signer] Lockup custodian, or withdraw authority once the lockup has expired
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(
        StakeInstruction.SetLockup,
        accounts,
        unix_timestamp=unix_timestamp,
        epoch=epoch,
        custodian=custodian,
    )


def set_lockup_checked(
    stake_account: PubkeyLike,
    authority: PubkeyLike,
    unix_timestamp: Optional[int] = None,
    epoch: Optional[int] = None,
    new_custodian: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    SetLockupChecked (12): a new custodian signs rather than being encoded

    Accounts:
        0. [writable] Initialized stake account
        1. [signer] Lockup custodian or withdraw authority
        2. [signer] New lockup custodian (optional)
    """
    accounts = [
        AccountMeta.writable(as_pubkey(stake_account)),
        AccountMeta.readonly_signer(as_pubkey(authority)),
    ]
    return _build(
        StakeInstruction.SetLockupChecked,
        _with_custodian(accounts, new_custodian),
        unix_timestamp=unix_timestamp,
        epoch=epoch,
    )
