"""
Public key helpers

Pubkey itself is solders' 32-byte value type. These helpers only deal with
the I/O boundary: turning caller input into a Pubkey and back into base58
for display. Derivation and encoding code works on raw bytes.
"""

from typing import Union

import base58
from solders.pubkey import Pubkey

from ..errors import InvalidPubkey

PUBKEY_LEN = 32

PubkeyLike = Union[Pubkey, bytes, bytearray, str]


def as_pubkey(value: PubkeyLike) -> Pubkey:
    """
    Coerce caller input to a Pubkey

    Args:
        value: Pubkey, 32 raw bytes, or base58 string

    Returns:
        Pubkey

    Raises:
        InvalidPubkey: If the value is not a 32-byte key
    """
    if isinstance(value, Pubkey):
        return value

    if isinstance(value, str):
        try:
            raw = base58.b58decode(value)
        except ValueError as e:
            raise InvalidPubkey.not_base58(value) from e
        if len(raw) != PUBKEY_LEN:
            raise InvalidPubkey.wrong_size(value, len(raw))
        return Pubkey(raw)

    if isinstance(value, (bytes, bytearray)):
        if len(value) != PUBKEY_LEN:
            raise InvalidPubkey.wrong_size(value.hex(), len(value))
        return Pubkey(bytes(value))

    raise InvalidPubkey(f"Unsupported public key type: {type(value).__name__}")


def to_base58(value: Union[Pubkey, bytes, bytearray]) -> str:
    """Render a key (or raw 32-byte digest) as base58 for logs and display"""
    return base58.b58encode(bytes(value)).decode("ascii")


def pubkey_of(fill: int) -> Pubkey:
    """Key made of one repeated byte, e.g. pubkey_of(1) == 0x01 * 32"""
    return Pubkey(bytes([fill]) * PUBKEY_LEN)
