"""
Test System Module

Tests for System program builders (u32 discriminator, bincode seed strings).
"""

import struct
import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_system_variants():
    """All 13 variants are enumerated with dense discriminators"""
    from solana_program_kit.programs.system import SystemInstruction, LAYOUTS

    assert len(SystemInstruction) == 13
    assert [int(v) for v in SystemInstruction] == list(range(13))
    assert set(LAYOUTS) == set(SystemInstruction)
    assert all(layout.discriminator_width == 4 for layout in LAYOUTS.values())


def test_transfer():
    """Transfer: u32 discriminator 2 then u64 lamports"""
    from solana_program_kit.programs import system
    from solana_program_kit.programs.constants import SYSTEM_PROGRAM_ID
    from solana_program_kit.types import pubkey_of

    print("Testing system transfer...")

    sender, recipient = pubkey_of(1), pubkey_of(2)
    ix = system.transfer(sender, recipient, 5_000)

    assert ix.program_id == SYSTEM_PROGRAM_ID
    assert ix.data == struct.pack("<IQ", 2, 5_000)
    assert [m.flags for m in ix.accounts] == ["[s,w]", "[w]"]

    print("  system transfer: PASSED")


def test_create_account():
    from solana_program_kit.programs import system
    from solana_program_kit.programs.constants import TOKEN_PROGRAM_ID
    from solana_program_kit.types import pubkey_of

    payer, new_account = pubkey_of(1), pubkey_of(2)
    ix = system.create_account(payer, new_account, 2_039_280, 165, TOKEN_PROGRAM_ID)

    assert ix.data == struct.pack("<IQQ", 0, 2_039_280, 165) + bytes(TOKEN_PROGRAM_ID)
    assert len(ix.data) == 52
    assert [m.flags for m in ix.accounts] == ["[s,w]", "[s,w]"]

    decoded = system.CATALOG.decode(ix.data)
    assert decoded.variant == system.SystemInstruction.CreateAccount
    assert decoded.fields == {"lamports": 2_039_280, "space": 165, "owner": TOKEN_PROGRAM_ID}


def test_create_account_with_seed():
    """Seed is encoded as a bincode string; base signs only when distinct"""
    from solana_program_kit.pda import create_with_seed
    from solana_program_kit.programs import system
    from solana_program_kit.programs.constants import SYSTEM_PROGRAM_ID
    from solana_program_kit.types import pubkey_of

    print("Testing create_account_with_seed...")

    payer, base = pubkey_of(1), pubkey_of(2)
    owner = SYSTEM_PROGRAM_ID
    seed = "nonce-0"
    derived = create_with_seed(base, seed, owner)

    ix = system.create_account_with_seed(payer, derived, base, seed, 1_000, 80, owner)
    expected = (
        struct.pack("<I", 3)
        + bytes(base)
        + struct.pack("<Q", len(seed)) + seed.encode()
        + struct.pack("<QQ", 1_000, 80)
        + bytes(owner)
    )
    assert ix.data == expected
    assert [m.pubkey for m in ix.accounts] == [payer, derived, base]
    assert [m.flags for m in ix.accounts] == ["[s,w]", "[w]", "[s]"]

    # Funding account doubles as base
    ix = system.create_account_with_seed(payer, derived, payer, seed, 1_000, 80, owner)
    assert len(ix.accounts) == 2

    decoded = system.CATALOG.decode(ix.data)
    assert decoded.fields["seed"] == seed
    assert decoded.fields["base"] == payer

    print("  create_account_with_seed: PASSED")


def test_seed_length_limit():
    from solana_program_kit.programs import system
    from solana_program_kit.errors import SeedConstraintViolation
    from solana_program_kit.types import pubkey_of

    a, b = pubkey_of(1), pubkey_of(2)
    with pytest.raises(SeedConstraintViolation):
        system.create_account_with_seed(a, b, a, "x" * 33, 1, 1, b)
    with pytest.raises(SeedConstraintViolation):
        system.transfer_with_seed(a, b, "x" * 33, b, a, 1)


def test_assign_and_allocate():
    from solana_program_kit.programs import system
    from solana_program_kit.types import pubkey_of

    account, owner, base = pubkey_of(1), pubkey_of(2), pubkey_of(3)

    ix = system.assign(account, owner)
    assert ix.data == struct.pack("<I", 1) + bytes(owner)
    assert [m.flags for m in ix.accounts] == ["[s,w]"]

    ix = system.allocate(account, 1024)
    assert ix.data == struct.pack("<IQ", 8, 1024)
    assert [m.flags for m in ix.accounts] == ["[s,w]"]

    ix = system.allocate_with_seed(account, base, "seed", 64, owner)
    assert ix.data[:4] == struct.pack("<I", 9)
    assert [m.flags for m in ix.accounts] == ["[w]", "[s]"]
    assert system.CATALOG.decode(ix.data).fields == {
        "base": base, "seed": "seed", "space": 64, "owner": owner
    }

    ix = system.assign_with_seed(account, base, "seed", owner)
    assert ix.data[:4] == struct.pack("<I", 10)
    assert [m.flags for m in ix.accounts] == ["[w]", "[s]"]


def test_transfer_with_seed():
    from solana_program_kit.programs import system
    from solana_program_kit.types import pubkey_of

    source, base, owner, recipient = pubkey_of(1), pubkey_of(2), pubkey_of(3), pubkey_of(4)
    ix = system.transfer_with_seed(source, base, "vault", owner, recipient, 42)

    expected = (
        struct.pack("<IQ", 11, 42)
        + struct.pack("<Q", 5) + b"vault"
        + bytes(owner)
    )
    assert ix.data == expected
    assert [m.pubkey for m in ix.accounts] == [source, base, recipient]
    assert [m.flags for m in ix.accounts] == ["[w]", "[s]", "[w]"]


def test_nonce_instructions():
    from solana_program_kit.programs import system
    from solana_program_kit.programs.constants import (
        RECENT_BLOCKHASHES_SYSVAR_ID,
        RENT_SYSVAR_ID,
        SYSTEM_PROGRAM_ID,
    )
    from solana_program_kit.types import pubkey_of

    payer, nonce, authority, recipient = pubkey_of(1), pubkey_of(2), pubkey_of(3), pubkey_of(4)

    create, init = system.create_nonce_account(payer, nonce, authority, 1_447_680)
    assert create.data == struct.pack("<IQQ", 0, 1_447_680, system.NONCE_STATE_SIZE) + bytes(SYSTEM_PROGRAM_ID)
    assert init.data == struct.pack("<I", 6) + bytes(authority)
    assert [m.pubkey for m in init.accounts] == [nonce, RECENT_BLOCKHASHES_SYSVAR_ID, RENT_SYSVAR_ID]

    advance = system.advance_nonce_account(nonce, authority)
    assert advance.data == struct.pack("<I", 4)
    assert [m.flags for m in advance.accounts] == ["[w]", "[]", "[s]"]

    withdraw = system.withdraw_nonce_account(nonce, authority, recipient, 10)
    assert withdraw.data == struct.pack("<IQ", 5, 10)
    assert len(withdraw.accounts) == 5
    assert withdraw.signers == (authority,)

    authorize = system.authorize_nonce_account(nonce, authority, recipient)
    assert authorize.data == struct.pack("<I", 7) + bytes(recipient)

    upgrade = system.upgrade_nonce_account(nonce)
    assert upgrade.data == struct.pack("<I", 12)


def test_decode_unknown_system_variant():
    from solana_program_kit.programs import system
    from solana_program_kit.errors import InstructionEncodingError

    with pytest.raises(InstructionEncodingError):
        system.CATALOG.decode(struct.pack("<I", 13))

    # A one-byte discriminator is too short for the system program
    with pytest.raises(InstructionEncodingError):
        system.CATALOG.decode(bytes([2]))


def main():
    """Run all system program tests"""
    print("=" * 60)
    print("System Program Tests")
    print("=" * 60)

    tests = [
        test_system_variants,
        test_transfer,
        test_create_account,
        test_create_account_with_seed,
        test_seed_length_limit,
        test_assign_and_allocate,
        test_transfer_with_seed,
        test_nonce_instructions,
        test_decode_unknown_system_variant,
    ]

    passed = 0
    failed = 0

    for test in tests:
        try:
            test()
            passed += 1
        except Exception as e:
            print(f"  FAILED: {e}")
            failed += 1

    print("=" * 60)
    print(f"Results: {passed} passed, {failed} failed")
    print("=" * 60)

    return failed == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
