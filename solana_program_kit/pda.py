"""
Program-Derived Address derivation

Addresses are SHA-256 digests of (seeds || bump || program_id || marker)
that do not lie on the ed25519 curve, so no private key exists for them and
only the owning program can sign for them by presenting the same seeds.

Every client must derive byte-identical addresses from identical inputs,
so the bump search order (255 down to 0), the preimage layout and the
marker string are fixed.

Usage:
    from solana_program_kit.pda import derive_address

    pda = derive_address([b"vault", bytes(owner)], program_id)
    address, bump = pda
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Iterator, List, Sequence, Union

from solders.pubkey import Pubkey

from .config import get_config
from .errors import (
    SeedConstraintViolation,
    InvalidSeeds,
    IllegalOwner,
    NoValidAddress,
)
from .types.pubkey import PUBKEY_LEN, PubkeyLike, as_pubkey, to_base58

logger = logging.getLogger(__name__)

# Appended to every PDA preimage
PDA_MARKER = b"ProgramDerivedAddress"

# Caller-supplied seed limits
MAX_SEEDS = 16
MAX_SEED_LEN = 32

MAX_BUMP = 255

Seed = Union[bytes, bytearray, memoryview, Pubkey]


@dataclass(frozen=True)
class ProgramDerivedAddress:
    """
    Result of a bump search

    Unpacks like the (address, bump) tuple solders returns.

    Attributes:
        address: Off-curve derived address
        bump: Bump byte that produced it
    """
    address: Pubkey
    bump: int

    def __iter__(self) -> Iterator:
        yield self.address
        yield self.bump

    @property
    def bump_seed(self) -> bytes:
        """Bump as the single-byte seed used for signing on behalf of the PDA"""
        return bytes([self.bump])


def is_on_curve(address: PubkeyLike) -> bool:
    """
    Check whether 32 bytes decode to a valid ed25519 point

    Raises:
        InvalidPubkey: If the value is not a 32-byte key
    """
    return as_pubkey(address).is_on_curve()


def _seed_bytes(seed: Seed, index: int) -> bytes:
    if isinstance(seed, Pubkey):
        return bytes(seed)
    if isinstance(seed, (bytes, bytearray, memoryview)):
        return bytes(seed)
    raise SeedConstraintViolation(
        f"Seed {index} must be bytes or Pubkey, got {type(seed).__name__}",
        seed_index=index,
    )


def _validate_seeds(seeds: Sequence[Seed], max_seeds: int) -> List[bytes]:
    """Normalise seeds to bytes and enforce count/length limits"""
    seed_list = [_seed_bytes(seed, i) for i, seed in enumerate(seeds)]

    if len(seed_list) > max_seeds:
        raise SeedConstraintViolation.too_many_seeds(len(seed_list), max_seeds)

    for i, seed in enumerate(seed_list):
        if len(seed) > MAX_SEED_LEN:
            raise SeedConstraintViolation.seed_too_long(i, len(seed), MAX_SEED_LEN)

    return seed_list


def derive_address(seeds: Sequence[Seed], program_id: PubkeyLike) -> ProgramDerivedAddress:
    """
    Find the canonical program-derived address for seeds and program

    Searches bump values from 255 down to 0 and returns the first one whose
    digest is off the curve.

    Args:
        seeds: Up to MAX_SEEDS seeds of at most MAX_SEED_LEN bytes each
        program_id: Owning program

    Returns:
        ProgramDerivedAddress with the address and its bump

    Raises:
        SeedConstraintViolation: Too many seeds or a seed is too long
        NoValidAddress: Every bump produced an on-curve point
    """
    seed_list = _validate_seeds(seeds, MAX_SEEDS)
    program = as_pubkey(program_id)

    prefix = b"".join(seed_list)
    bump_offset = len(prefix)

    # One buffer for the whole search; only the bump byte changes
    preimage = bytearray(prefix)
    preimage.append(0)
    preimage.extend(bytes(program))
    preimage.extend(PDA_MARKER)

    for bump in range(MAX_BUMP, -1, -1):
        preimage[bump_offset] = bump
        candidate = Pubkey(hashlib.sha256(preimage).digest())
        if not candidate.is_on_curve():
            if get_config().programs.log_derivations:
                logger.debug(
                    f"Derived {candidate} for program {program} "
                    f"(bump={bump}, attempts={MAX_BUMP - bump + 1}, seeds={len(seed_list)})"
                )
            return ProgramDerivedAddress(candidate, bump)

    raise NoValidAddress.exhausted(str(program), len(seed_list))


# solders / Solana SDK naming
find_program_address = derive_address


def create_program_address(seeds: Sequence[Seed], program_id: PubkeyLike) -> Pubkey:
    """
    Derive an address from seeds that already include the bump

    Accepts everything derive_address does plus the trailing bump, so
    seeds + [pda.bump_seed] always reproduces a derived address.

    Args:
        seeds: Up to MAX_SEEDS seeds followed by the bump
        program_id: Owning program

    Returns:
        Derived address

    Raises:
        SeedConstraintViolation: Too many seeds or a seed is too long
        InvalidSeeds: The digest is on the curve
    """
    seed_list = _validate_seeds(seeds, MAX_SEEDS + 1)
    program = as_pubkey(program_id)

    hasher = hashlib.sha256()
    for seed in seed_list:
        hasher.update(seed)
    hasher.update(bytes(program))
    hasher.update(PDA_MARKER)
    digest = hasher.digest()

    if is_on_curve(digest):
        raise InvalidSeeds.on_curve(str(program))

    return Pubkey(digest)


def create_with_seed(base: PubkeyLike, seed: Union[str, bytes], owner: PubkeyLike) -> Pubkey:
    """
    Derive an address from a base key, a string seed and an owner program

    Unlike PDAs these addresses may be on the curve; the base key signs for them.

    Args:
        base: Base account (signer of the create instruction)
        seed: Up to MAX_SEED_LEN bytes; str is UTF-8 encoded
        owner: Program that will own the account

    Returns:
        Derived address

    Raises:
        SeedConstraintViolation: Seed longer than MAX_SEED_LEN
        IllegalOwner: Owner ends with the PDA marker
    """
    seed_bytes = seed.encode("utf-8") if isinstance(seed, str) else bytes(seed)
    if len(seed_bytes) > MAX_SEED_LEN:
        raise SeedConstraintViolation.seed_too_long(0, len(seed_bytes), MAX_SEED_LEN)

    owner_key = as_pubkey(owner)
    owner_bytes = bytes(owner_key)
    if owner_bytes[PUBKEY_LEN - len(PDA_MARKER):] == PDA_MARKER:
        raise IllegalOwner.pda_marker(to_base58(owner_bytes))

    digest = hashlib.sha256(bytes(as_pubkey(base)) + seed_bytes + owner_bytes).digest()
    return Pubkey(digest)
