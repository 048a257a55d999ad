"""
SPL Token program instruction builders

Covers all 25 instructions of the Tokenkeg program. Every builder takes an
optional program_id so the same encoding can target Token-2022, which keeps
these discriminators and layouts for its base instructions.

Authority-taking instructions support multisig owners: pass
multisig_signers and the authority becomes a read-only account followed by
each signer as a read-only signer.

Data layout (after the 1-byte discriminator):
    amounts: u64 little-endian
    decimals / m / authority_type: u8
    optional keys: 1-byte flag + 32 bytes when present
"""

from enum import IntEnum
from typing import List, Optional, Sequence

from solders.pubkey import Pubkey

from ..codec import Field, Layout
from ..errors import InstructionEncodingError
from ..types import AccountMeta, Instruction, PubkeyLike, as_pubkey
from .catalog import ProgramCatalog
from .constants import RENT_SYSVAR_ID, TOKEN_PROGRAM_ID
from .errors import TokenError

# Multisig signer bounds
MIN_SIGNERS = 1
MAX_SIGNERS = 11


class TokenInstruction(IntEnum):
    """Instruction discriminators of the token program"""
    InitializeMint = 0
    InitializeAccount = 1
    InitializeMultisig = 2
    Transfer = 3
    Approve = 4
    Revoke = 5
    SetAuthority = 6
    MintTo = 7
    Burn = 8
    CloseAccount = 9
    FreezeAccount = 10
    ThawAccount = 11
    TransferChecked = 12
    ApproveChecked = 13
    MintToChecked = 14
    BurnChecked = 15
    InitializeAccount2 = 16
    SyncNative = 17
    InitializeAccount3 = 18
    InitializeMultisig2 = 19
    InitializeMint2 = 20
    GetAccountDataSize = 21
    InitializeImmutableOwner = 22
    AmountToUiAmount = 23
    UiAmountToAmount = 24


class AuthorityType(IntEnum):
    """Authority kinds changeable via SetAuthority"""
    MintTokens = 0
    FreezeAccount = 1
    AccountOwner = 2
    CloseAccount = 3


_AMOUNT = Field("amount", "u64")
_DECIMALS = Field("decimals", "u8")
_MINT_FIELDS = [
    _DECIMALS,
    Field("mint_authority", "pubkey"),
    Field("freeze_authority", "pubkey", optional=True),
]

_FIELDS = {
    TokenInstruction.InitializeMint: _MINT_FIELDS,
    TokenInstruction.InitializeMultisig: [Field("m", "u8")],
    TokenInstruction.Transfer: [_AMOUNT],
    TokenInstruction.Approve: [_AMOUNT],
    TokenInstruction.SetAuthority: [
        Field("authority_type", "u8"),
        Field("new_authority", "pubkey", optional=True),
    ],
    TokenInstruction.MintTo: [_AMOUNT],
    TokenInstruction.Burn: [_AMOUNT],
    TokenInstruction.TransferChecked: [_AMOUNT, _DECIMALS],
    TokenInstruction.ApproveChecked: [_AMOUNT, _DECIMALS],
    TokenInstruction.MintToChecked: [_AMOUNT, _DECIMALS],
    TokenInstruction.BurnChecked: [_AMOUNT, _DECIMALS],
    TokenInstruction.InitializeAccount2: [Field("owner", "pubkey")],
    TokenInstruction.InitializeAccount3: [Field("owner", "pubkey")],
    TokenInstruction.InitializeMultisig2: [Field("m", "u8")],
    TokenInstruction.InitializeMint2: _MINT_FIELDS,
    TokenInstruction.AmountToUiAmount: [_AMOUNT],
    TokenInstruction.UiAmountToAmount: [Field("ui_amount", "utf8_tail")],
}

LAYOUTS = {
    variant: Layout(variant.name, variant, _FIELDS.get(variant, ()))
    for variant in TokenInstruction
}

CATALOG = ProgramCatalog(
    name="token",
    program_id=TOKEN_PROGRAM_ID,
    instructions=TokenInstruction,
    layouts=LAYOUTS,
    errors=TokenError,
)


# ============================================================================
# Helpers
# ============================================================================

def _program(program_id: Optional[PubkeyLike]) -> Pubkey:
    return as_pubkey(program_id) if program_id is not None else CATALOG.program_id


def _check_signer_count(count: int, field: str = "multisig_signers") -> None:
    if not MIN_SIGNERS <= count <= MAX_SIGNERS:
        raise InstructionEncodingError.invalid_field(
            field, f"{count} signers, expected {MIN_SIGNERS}..{MAX_SIGNERS}"
        )


def _authority_metas(
    authority: PubkeyLike,
    multisig_signers: Optional[Sequence[PubkeyLike]],
) -> List[AccountMeta]:
    """Single owner signs directly; a multisig owner is read-only and its signers sign"""
    if not multisig_signers:
        return [AccountMeta.readonly_signer(as_pubkey(authority))]

    _check_signer_count(len(multisig_signers))
    metas = [AccountMeta.readonly(as_pubkey(authority))]
    metas.extend(AccountMeta.readonly_signer(as_pubkey(s)) for s in multisig_signers)
    return metas


def _build(
    variant: TokenInstruction,
    accounts: List[AccountMeta],
    program_id: Optional[PubkeyLike],
    **values,
) -> Instruction:
    return Instruction.new(_program(program_id), accounts, CATALOG.encode(variant, values))


# ============================================================================
# Mint / account initialisation
# ============================================================================

def initialize_mint(
    mint: PubkeyLike,
    mint_authority: PubkeyLike,
    freeze_authority: Optional[PubkeyLike],
    decimals: int,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    InitializeMint (0)

    Accounts:
        0. [writable] Mint
        1. [] Rent sysvar
    """
    accounts = [
        AccountMeta.writable(as_pubkey(mint)),
        AccountMeta.readonly(RENT_SYSVAR_ID),
    ]
    return _build(
        TokenInstruction.InitializeMint,
        accounts,
        program_id,
        decimals=decimals,
        mint_authority=mint_authority,
        freeze_authority=freeze_authority,
    )


def initialize_mint2(
    mint: PubkeyLike,
    mint_authority: PubkeyLike,
    freeze_authority: Optional[PubkeyLike],
    decimals: int,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """InitializeMint2 (20): like InitializeMint without the rent sysvar"""
    return _build(
        TokenInstruction.InitializeMint2,
        [AccountMeta.writable(as_pubkey(mint))],
        program_id,
        decimals=decimals,
        mint_authority=mint_authority,
        freeze_authority=freeze_authority,
    )


def initialize_account(
    account: PubkeyLike,
    mint: PubkeyLike,
    owner: PubkeyLike,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    InitializeAccount (1)

    Accounts:
        0. [writable] Account to initialize
        1. [] Mint
        2. [] Owner
        3. [] Rent sysvar
    """
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly(as_pubkey(mint)),
        AccountMeta.readonly(as_pubkey(owner)),
        AccountMeta.readonly(RENT_SYSVAR_ID),
    ]
    return _build(TokenInstruction.InitializeAccount, accounts, program_id)


def initialize_account2(
    account: PubkeyLike,
    mint: PubkeyLike,
    owner: PubkeyLike,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """InitializeAccount2 (16): owner moves from accounts into data"""
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly(as_pubkey(mint)),
        AccountMeta.readonly(RENT_SYSVAR_ID),
    ]
    return _build(TokenInstruction.InitializeAccount2, accounts, program_id, owner=owner)


def initialize_account3(
    account: PubkeyLike,
    mint: PubkeyLike,
    owner: PubkeyLike,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """InitializeAccount3 (18): InitializeAccount2 without the rent sysvar"""
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly(as_pubkey(mint)),
    ]
    return _build(TokenInstruction.InitializeAccount3, accounts, program_id, owner=owner)


def _check_multisig(signers: Sequence[PubkeyLike], m: int) -> None:
    _check_signer_count(len(signers), "signers")
    if isinstance(m, bool) or not isinstance(m, int) or not MIN_SIGNERS <= m <= len(signers):
        raise InstructionEncodingError.invalid_field(
            "m", f"{m} required signers, expected {MIN_SIGNERS}..{len(signers)}"
        )


def initialize_multisig(
    multisig: PubkeyLike,
    signers: Sequence[PubkeyLike],
    m: int,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    InitializeMultisig (2): m of len(signers), 1 <= m <= n <= 11

    Accounts:
        0. [writable] Multisig account
        1. [] Rent sysvar
        2..2+N. [] Signer accounts
    """
    _check_multisig(signers, m)
    accounts = [
        AccountMeta.writable(as_pubkey(multisig)),
        AccountMeta.readonly(RENT_SYSVAR_ID),
    ]
    accounts.extend(AccountMeta.readonly(as_pubkey(s)) for s in signers)
    return _build(TokenInstruction.InitializeMultisig, accounts, program_id, m=m)


def initialize_multisig2(
    multisig: PubkeyLike,
    signers: Sequence[PubkeyLike],
    m: int,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """InitializeMultisig2 (19): InitializeMultisig without the rent sysvar"""
    _check_multisig(signers, m)
    accounts = [AccountMeta.writable(as_pubkey(multisig))]
    accounts.extend(AccountMeta.readonly(as_pubkey(s)) for s in signers)
    return _build(TokenInstruction.InitializeMultisig2, accounts, program_id, m=m)


def initialize_immutable_owner(
    account: PubkeyLike,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """InitializeImmutableOwner (22)"""
    return _build(
        TokenInstruction.InitializeImmutableOwner,
        [AccountMeta.writable(as_pubkey(account))],
        program_id,
    )


# ============================================================================
# Transfers and delegation
# ============================================================================

def transfer(
    source: PubkeyLike,
    destination: PubkeyLike,
    owner: PubkeyLike,
    amount: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Transfer (3)

    Accounts:
        0. [writable] Source account
        1. [writable] Destination account
        2. [signer] Owner or delegate (read-only for multisig, followed by M signers)
    """
    accounts = [
        AccountMeta.writable(as_pubkey(source)),
        AccountMeta.writable(as_pubkey(destination)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.Transfer, accounts, program_id, amount=amount)


def transfer_checked(
    source: PubkeyLike,
    mint: PubkeyLike,
    destination: PubkeyLike,
    owner: PubkeyLike,
    amount: int,
    decimals: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    TransferChecked (12)

    Accounts:
        0. [writable] Source account
        1. [] Mint
        2. [writable] Destination account
        3. [signer] Owner or delegate
    """
    accounts = [
        AccountMeta.writable(as_pubkey(source)),
        AccountMeta.readonly(as_pubkey(mint)),
        AccountMeta.writable(as_pubkey(destination)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.TransferChecked, accounts, program_id, amount=amount, decimals=decimals)


def approve(
    source: PubkeyLike,
    delegate: PubkeyLike,
    owner: PubkeyLike,
    amount: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Approve (4)

    Accounts:
        0. [writable] Source account
        1. [] Delegate
        2. [signer] Owner
    """
    accounts = [
        AccountMeta.writable(as_pubkey(source)),
        AccountMeta.readonly(as_pubkey(delegate)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.Approve, accounts, program_id, amount=amount)


def approve_checked(
    source: PubkeyLike,
    mint: PubkeyLike,
    delegate: PubkeyLike,
    owner: PubkeyLike,
    amount: int,
    decimals: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """ApproveChecked (13): source, mint, delegate, owner"""
    accounts = [
        AccountMeta.writable(as_pubkey(source)),
        AccountMeta.readonly(as_pubkey(mint)),
        AccountMeta.readonly(as_pubkey(delegate)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.ApproveChecked, accounts, program_id, amount=amount, decimals=decimals)


def revoke(
    source: PubkeyLike,
    owner: PubkeyLike,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """Revoke (5): source [writable], owner [signer]"""
    accounts = [
        AccountMeta.writable(as_pubkey(source)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.Revoke, accounts, program_id)


def set_authority(
    account_or_mint: PubkeyLike,
    current_authority: PubkeyLike,
    authority_type: AuthorityType,
    new_authority: Optional[PubkeyLike],
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    SetAuthority (6): new_authority None clears the authority

    Accounts:
        0. [writable] Mint or account
        1. [signer] Current authority
    """
    try:
        authority_type = AuthorityType(authority_type)
    except ValueError as e:
        raise InstructionEncodingError.invalid_field(
            "authority_type", f"unknown authority type {authority_type!r}"
        ) from e

    accounts = [
        AccountMeta.writable(as_pubkey(account_or_mint)),
        *_authority_metas(current_authority, multisig_signers),
    ]
    return _build(
        TokenInstruction.SetAuthority,
        accounts,
        program_id,
        authority_type=int(authority_type),
        new_authority=new_authority,
    )


# ============================================================================
# Supply changes
# ============================================================================

def mint_to(
    mint: PubkeyLike,
    destination: PubkeyLike,
    mint_authority: PubkeyLike,
    amount: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    MintTo (7)

    Accounts:
        0. [writable] Mint
        1. [writable] Destination account
        2. [signer] Mint authority
    """
    accounts = [
        AccountMeta.writable(as_pubkey(mint)),
        AccountMeta.writable(as_pubkey(destination)),
        *_authority_metas(mint_authority, multisig_signers),
    ]
    return _build(TokenInstruction.MintTo, accounts, program_id, amount=amount)


def mint_to_checked(
    mint: PubkeyLike,
    destination: PubkeyLike,
    mint_authority: PubkeyLike,
    amount: int,
    decimals: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """MintToChecked (14)"""
    accounts = [
        AccountMeta.writable(as_pubkey(mint)),
        AccountMeta.writable(as_pubkey(destination)),
        *_authority_metas(mint_authority, multisig_signers),
    ]
    return _build(TokenInstruction.MintToChecked, accounts, program_id, amount=amount, decimals=decimals)


def burn(
    account: PubkeyLike,
    mint: PubkeyLike,
    owner: PubkeyLike,
    amount: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Burn (8)

    Accounts:
        0. [writable] Account to burn from
        1. [writable] Mint
        2. [signer] Owner or delegate
    """
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.writable(as_pubkey(mint)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.Burn, accounts, program_id, amount=amount)


def burn_checked(
    account: PubkeyLike,
    mint: PubkeyLike,
    owner: PubkeyLike,
    amount: int,
    decimals: int,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """BurnChecked (15)"""
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.writable(as_pubkey(mint)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.BurnChecked, accounts, program_id, amount=amount, decimals=decimals)


# ============================================================================
# Account lifecycle
# ============================================================================

def close_account(
    account: PubkeyLike,
    destination: PubkeyLike,
    owner: PubkeyLike,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    CloseAccount (9): lamports go to destination

    Accounts:
        0. [writable] Account to close
        1. [writable] Destination
        2. [signer] Owner
    """
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.writable(as_pubkey(destination)),
        *_authority_metas(owner, multisig_signers),
    ]
    return _build(TokenInstruction.CloseAccount, accounts, program_id)


def freeze_account(
    account: PubkeyLike,
    mint: PubkeyLike,
    freeze_authority: PubkeyLike,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """FreezeAccount (10): account [writable], mint [], freeze authority [signer]"""
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly(as_pubkey(mint)),
        *_authority_metas(freeze_authority, multisig_signers),
    ]
    return _build(TokenInstruction.FreezeAccount, accounts, program_id)


def thaw_account(
    account: PubkeyLike,
    mint: PubkeyLike,
    freeze_authority: PubkeyLike,
    multisig_signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """ThawAccount (11): same accounts as FreezeAccount"""
    accounts = [
        AccountMeta.writable(as_pubkey(account)),
        AccountMeta.readonly(as_pubkey(mint)),
        *_authority_metas(freeze_authority, multisig_signers),
    ]
    return _build(TokenInstruction.ThawAccount, accounts, program_id)


def sync_native(
    account: PubkeyLike,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """SyncNative (17): refresh a wrapped SOL account's token amount from its lamports"""
    return _build(TokenInstruction.SyncNative, [AccountMeta.writable(as_pubkey(account))], program_id)


# ============================================================================
# Queries (return data only)
# ============================================================================

def get_account_data_size(
    mint: PubkeyLike,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """GetAccountDataSize (21)"""
    return _build(TokenInstruction.GetAccountDataSize, [AccountMeta.readonly(as_pubkey(mint))], program_id)


def amount_to_ui_amount(
    mint: PubkeyLike,
    amount: int,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """AmountToUiAmount (23)"""
    return _build(
        TokenInstruction.AmountToUiAmount,
        [AccountMeta.readonly(as_pubkey(mint))],
        program_id,
        amount=amount,
    )


def ui_amount_to_amount(
    mint: PubkeyLike,
    ui_amount: str,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """UiAmountToAmount (24): the UI amount string fills the rest of the data"""
    return _build(
        TokenInstruction.UiAmountToAmount,
        [AccountMeta.readonly(as_pubkey(mint))],
        program_id,
        ui_amount=ui_amount,
    )
