"""
Associated Token Account program

An associated token account (ATA) is the canonical token account for a
(wallet, mint) pair: a PDA of the ATA program with seeds
(wallet, token_program_id, mint). Anyone can compute it, so clients agree
on where a wallet's tokens live without coordination.

Create and CreateIdempotent share the exact same account list; only the
discriminator byte tells the program whether an existing account is an
error (0) or a no-op (1).

Usage:
    from solana_program_kit.programs import associated_token as ata

    address = ata.get_associated_token_address(wallet, mint)
    ix = ata.create_idempotent(payer, wallet, mint)
"""

from enum import IntEnum
from typing import List, Optional

from solders.pubkey import Pubkey

from ..codec import Layout
from ..pda import ProgramDerivedAddress, derive_address
from ..types import AccountMeta, Instruction, PubkeyLike, as_pubkey
from .catalog import ProgramCatalog
from .constants import (
    ASSOCIATED_TOKEN_PROGRAM_ID,
    SYSTEM_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from .errors import AssociatedTokenError


class AssociatedTokenInstruction(IntEnum):
    """Instruction discriminators of the ATA program"""
    Create = 0
    CreateIdempotent = 1
    RecoverNested = 2


LAYOUTS = {
    variant: Layout(variant.name, variant)
    for variant in AssociatedTokenInstruction
}

CATALOG = ProgramCatalog(
    name="associated-token",
    program_id=ASSOCIATED_TOKEN_PROGRAM_ID,
    instructions=AssociatedTokenInstruction,
    layouts=LAYOUTS,
    errors=AssociatedTokenError,
)


# ============================================================================
# Address derivation
# ============================================================================

def find_associated_token_address(
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: Optional[PubkeyLike] = None,
    program_id: Optional[PubkeyLike] = None,
) -> ProgramDerivedAddress:
    """
    Derive the associated token account for a wallet and mint

    Seeds (in order): wallet, token program id, mint.

    Args:
        wallet: Owner of the token account
        mint: Token mint
        token_program_id: Token program (defaults to SPL Token; e.g. Token-2022)
        program_id: ATA program (defaults to the deployed one)

    Returns:
        ProgramDerivedAddress (address and bump)
    """
    token_program = as_pubkey(token_program_id) if token_program_id is not None else TOKEN_PROGRAM_ID
    ata_program = as_pubkey(program_id) if program_id is not None else ASSOCIATED_TOKEN_PROGRAM_ID

    seeds = [
        bytes(as_pubkey(wallet)),
        bytes(token_program),
        bytes(as_pubkey(mint)),
    ]
    return derive_address(seeds, ata_program)


def get_associated_token_address(
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: Optional[PubkeyLike] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Pubkey:
    """Same as find_associated_token_address but only returns the address"""
    return find_associated_token_address(wallet, mint, token_program_id, program_id).address


def derive_associated_address(wallet: PubkeyLike, mint: PubkeyLike) -> ProgramDerivedAddress:
    """ATA derivation under the default token and ATA programs"""
    return find_associated_token_address(wallet, mint)


# ============================================================================
# Instruction builders
# ============================================================================

def _create_instruction(
    variant: AssociatedTokenInstruction,
    payer: PubkeyLike,
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: Optional[PubkeyLike],
    program_id: Optional[PubkeyLike],
) -> Instruction:
    token_program = as_pubkey(token_program_id) if token_program_id is not None else TOKEN_PROGRAM_ID
    ata_program = as_pubkey(program_id) if program_id is not None else CATALOG.program_id
    wallet_key = as_pubkey(wallet)
    mint_key = as_pubkey(mint)

    ata = get_associated_token_address(wallet_key, mint_key, token_program, ata_program)

    accounts = [
        AccountMeta.writable_signer(as_pubkey(payer)),  # 0: funding account
        AccountMeta.writable(ata),                      # 1: associated token account
        AccountMeta.readonly(wallet_key),               # 2: wallet
        AccountMeta.readonly(mint_key),                 # 3: mint
        AccountMeta.readonly(SYSTEM_PROGRAM_ID),        # 4: system program
        AccountMeta.readonly(token_program),            # 5: token program
    ]

    return Instruction.new(ata_program, accounts, CATALOG.encode(variant))


def create(
    payer: PubkeyLike,
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: Optional[PubkeyLike] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Build Create: fails on-chain if the account already exists

    Prefer create_idempotent unless the failure is wanted.

    Accounts:
        0. [writable, signer] Funding account
        1. [writable] Associated token account
        2. [] Wallet
        3. [] Mint
        4. [] System program
        5. [] Token program
    """
    return _create_instruction(
        AssociatedTokenInstruction.Create, payer, wallet, mint, token_program_id, program_id
    )


def create_idempotent(
    payer: PubkeyLike,
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: Optional[PubkeyLike] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Build CreateIdempotent: succeeds if the account already exists

    Same accounts as create(); only data[0] differs.
    """
    return _create_instruction(
        AssociatedTokenInstruction.CreateIdempotent, payer, wallet, mint, token_program_id, program_id
    )


def create_with_program(
    payer: PubkeyLike,
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: PubkeyLike,
) -> Instruction:
    """Create for an alternate token program (e.g. Token-2022); the ATA is derived against it"""
    return create(payer, wallet, mint, token_program_id=token_program_id)


def create_idempotent_with_program(
    payer: PubkeyLike,
    wallet: PubkeyLike,
    mint: PubkeyLike,
    token_program_id: PubkeyLike,
) -> Instruction:
    """CreateIdempotent for an alternate token program"""
    return create_idempotent(payer, wallet, mint, token_program_id=token_program_id)


def recover_nested_accounts(
    nested_ata: PubkeyLike,
    nested_mint: PubkeyLike,
    wallet_ata: PubkeyLike,
    owner_ata: PubkeyLike,
    owner_mint: PubkeyLike,
    wallet: PubkeyLike,
    token_program_id: Optional[PubkeyLike] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Build RecoverNested from explicit addresses

    Moves tokens out of an ATA that is itself owned by an ATA and closes it.

    Accounts:
        0. [writable] Nested associated token account
        1. [] Nested token mint
        2. [writable] Wallet's associated token account for the nested mint
        3. [] Owner associated token account
        4. [] Owner token mint
        5. [writable, signer] Wallet
        6. [] Token program
    """
    token_program = as_pubkey(token_program_id) if token_program_id is not None else TOKEN_PROGRAM_ID
    ata_program = as_pubkey(program_id) if program_id is not None else CATALOG.program_id

    accounts = [
        AccountMeta.writable(as_pubkey(nested_ata)),
        AccountMeta.readonly(as_pubkey(nested_mint)),
        AccountMeta.writable(as_pubkey(wallet_ata)),
        AccountMeta.readonly(as_pubkey(owner_ata)),
        AccountMeta.readonly(as_pubkey(owner_mint)),
        AccountMeta.writable_signer(as_pubkey(wallet)),
        AccountMeta.readonly(token_program),
    ]

    return Instruction.new(ata_program, accounts, CATALOG.encode(AssociatedTokenInstruction.RecoverNested))


def recover_nested(
    wallet: PubkeyLike,
    owner_mint: PubkeyLike,
    nested_mint: PubkeyLike,
    token_program_id: Optional[PubkeyLike] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Build RecoverNested, deriving all three ATAs

    owner_ata  = ATA(wallet, owner_mint)
    nested_ata = ATA(owner_ata, nested_mint)
    wallet_ata = ATA(wallet, nested_mint)
    """
    owner_ata = get_associated_token_address(wallet, owner_mint, token_program_id, program_id)
    nested_ata = get_associated_token_address(owner_ata, nested_mint, token_program_id, program_id)
    wallet_ata = get_associated_token_address(wallet, nested_mint, token_program_id, program_id)

    return recover_nested_accounts(
        nested_ata,
        nested_mint,
        wallet_ata,
        owner_ata,
        owner_mint,
        wallet,
        token_program_id=token_program_id,
        program_id=program_id,
    )


def recover_nested_with_program(
    wallet: PubkeyLike,
    owner_mint: PubkeyLike,
    nested_mint: PubkeyLike,
    token_program_id: PubkeyLike,
) -> Instruction:
    """RecoverNested for an alternate token program"""
    return recover_nested(wallet, owner_mint, nested_mint, token_program_id=token_program_id)


def create_instructions_for_mints(
    payer: PubkeyLike,
    wallet: PubkeyLike,
    mints: List[PubkeyLike],
    token_program_id: Optional[PubkeyLike] = None,
) -> List[Instruction]:
    """Idempotent create instructions for several mints, skipping duplicates"""
    seen = set()
    instructions = []
    for mint in mints:
        key = as_pubkey(mint)
        if key in seen:
            continue
        seen.add(key)
        instructions.append(create_idempotent(payer, wallet, key, token_program_id))
    return instructions
