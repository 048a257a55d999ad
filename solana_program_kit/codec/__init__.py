"""
Instruction data encoding
"""

from .layout import (
    DISC_U8,
    DISC_U32,
    FIELD_KINDS,
    Field,
    Layout,
    first_invalid_utf8,
    read_discriminator,
)

__all__ = [
    "DISC_U8",
    "DISC_U32",
    "FIELD_KINDS",
    "Field",
    "Layout",
    "first_invalid_utf8",
    "read_discriminator",
]
