"""
Instruction data layouts

A Layout describes one instruction variant's data: a fixed-width
discriminator followed by fields in declared order. All integers are
little-endian. Booleans take one byte. Optional fields are a one-byte
presence flag followed by the value only when present, so an absent
optional contributes exactly one byte.

Field kinds:
    u8, u16, u32, u64, u128, i32, i64  fixed-width integers
    bool                               0x00 / 0x01
    pubkey                             32 raw bytes
    string                             u64 length prefix + UTF-8 bytes
    utf8_tail                          remaining bytes as UTF-8 (last field only)

Usage:
    TRANSFER = Layout("Transfer", 3, [Field("amount", "u64")])
    data = TRANSFER.encode({"amount": 1_000_000})
    fields = TRANSFER.decode(data)
"""

import struct
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

from solders.pubkey import Pubkey

from ..errors import InstructionEncodingError, InvalidPubkey
from ..types.pubkey import PUBKEY_LEN, as_pubkey

# struct formats for fixed-width integer kinds (u128 handled separately)
INT_FORMATS = {
    "u8": "<B",
    "u16": "<H",
    "u32": "<I",
    "u64": "<Q",
    "i32": "<i",
    "i64": "<q",
}

U128_MAX = (1 << 128) - 1

FIELD_KINDS = frozenset(INT_FORMATS) | {"u128", "bool", "pubkey", "string", "utf8_tail"}

# Discriminator widths used by the built-in programs
DISC_U8 = "<B"
DISC_U32 = "<I"


def _int_bounds(kind: str) -> Tuple[int, int]:
    if kind == "u128":
        return 0, U128_MAX
    bits = struct.calcsize(INT_FORMATS[kind]) * 8
    if kind.startswith("i"):
        return -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    return 0, (1 << bits) - 1


def first_invalid_utf8(data: bytes) -> Optional[int]:
    """Offset of the first byte that breaks UTF-8 decoding, or None if valid"""
    try:
        data.decode("utf-8")
    except UnicodeDecodeError as e:
        return e.start
    return None


@dataclass(frozen=True)
class Field:
    """
    One named field of an instruction layout

    Attributes:
        name: Field name (key in the values mapping)
        kind: One of FIELD_KINDS
        optional: Prefix with a presence flag; None encodes as absent
    """
    name: str
    kind: str
    optional: bool = False

    def __post_init__(self):
        if self.kind not in FIELD_KINDS:
            raise ValueError(f"Unknown field kind: {self.kind}")

    # ------------------------------------------------------------------
    # Encoding
    # ------------------------------------------------------------------

    def encode(self, value: Any, out: bytearray) -> None:
        if self.optional:
            if value is None:
                out.append(0)
                return
            out.append(1)
        elif value is None:
            raise InstructionEncodingError.invalid_field(self.name, "value is required")
        self._encode_value(value, out)

    def _encode_value(self, value: Any, out: bytearray) -> None:
        kind = self.kind

        if kind in INT_FORMATS or kind == "u128":
            # bool is an int subclass; reject it so flags don't leak into amounts
            if isinstance(value, bool) or not isinstance(value, int):
                raise InstructionEncodingError.invalid_field(
                    self.name, f"expected int, got {type(value).__name__}"
                )
            low, high = _int_bounds(kind)
            if not low <= value <= high:
                raise InstructionEncodingError.invalid_field(
                    self.name, f"{value} out of range for {kind} [{low}, {high}]"
                )
            if kind == "u128":
                out.extend(value.to_bytes(16, "little"))
            else:
                out.extend(struct.pack(INT_FORMATS[kind], value))

        elif kind == "bool":
            if not isinstance(value, bool):
                raise InstructionEncodingError.invalid_field(
                    self.name, f"expected bool, got {type(value).__name__}"
                )
            out.extend(struct.pack("<?", value))

        elif kind == "pubkey":
            try:
                out.extend(bytes(as_pubkey(value)))
            except InvalidPubkey as e:
                raise InstructionEncodingError.invalid_field(self.name, e.message) from e

        elif kind == "string":
            raw = self._text_bytes(value)
            out.extend(struct.pack("<Q", len(raw)))
            out.extend(raw)

        elif kind == "utf8_tail":
            out.extend(self._text_bytes(value))

    def _text_bytes(self, value: Any) -> bytes:
        if isinstance(value, str):
            return value.encode("utf-8")
        if isinstance(value, (bytes, bytearray)):
            bad = first_invalid_utf8(bytes(value))
            if bad is not None:
                raise InstructionEncodingError.invalid_utf8(self.name, bad)
            return bytes(value)
        raise InstructionEncodingError.invalid_field(
            self.name, f"expected str, got {type(value).__name__}"
        )

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def decode(self, data: bytes, offset: int) -> Tuple[Any, int]:
        """Read this field at offset; returns (value, new_offset)"""
        if self.optional:
            flag, offset = self._take(data, offset, 1)
            if flag[0] == 0:
                return None, offset
            if flag[0] != 1:
                raise InstructionEncodingError(
                    f"Invalid presence flag {flag[0]} for field '{self.name}'",
                    field=self.name,
                    offset=offset - 1,
                )
        return self._decode_value(data, offset)

    def _decode_value(self, data: bytes, offset: int) -> Tuple[Any, int]:
        kind = self.kind

        if kind in INT_FORMATS:
            fmt = INT_FORMATS[kind]
            raw, offset = self._take(data, offset, struct.calcsize(fmt))
            return struct.unpack(fmt, raw)[0], offset

        if kind == "u128":
            raw, offset = self._take(data, offset, 16)
            return int.from_bytes(raw, "little"), offset

        if kind == "bool":
            raw, offset = self._take(data, offset, 1)
            if raw[0] > 1:
                raise InstructionEncodingError(
                    f"Invalid bool byte {raw[0]} for field '{self.name}'",
                    field=self.name,
                    offset=offset - 1,
                )
            return raw[0] == 1, offset

        if kind == "pubkey":
            raw, offset = self._take(data, offset, PUBKEY_LEN)
            return Pubkey(raw), offset

        if kind == "string":
            raw_len, offset = self._take(data, offset, 8)
            length = struct.unpack("<Q", raw_len)[0]
            raw, offset = self._take(data, offset, length)
            return self._decode_text(raw, offset - length), offset

        # utf8_tail
        raw = bytes(data[offset:])
        return self._decode_text(raw, offset), len(data)

    def _decode_text(self, raw: bytes, start: int) -> str:
        bad = first_invalid_utf8(raw)
        if bad is not None:
            raise InstructionEncodingError.invalid_utf8(self.name, start + bad)
        return raw.decode("utf-8")

    def _take(self, data: bytes, offset: int, size: int) -> Tuple[bytes, int]:
        available = len(data) - offset
        if available < size:
            raise InstructionEncodingError.truncated(self.name, offset, size, max(available, 0))
        return bytes(data[offset:offset + size]), offset + size


class Layout:
    """
    Data layout of one instruction variant

    Attributes:
        name: Variant name (for error messages)
        discriminator: Discriminator value, or None for programs without one
        fields: Fields in wire order
        discriminator_format: struct format of the discriminator (DISC_U8 / DISC_U32)
    """

    def __init__(
        self,
        name: str,
        discriminator: Optional[int],
        fields: Sequence[Field] = (),
        discriminator_format: str = DISC_U8,
    ):
        self.name = name
        self.discriminator = None if discriminator is None else int(discriminator)
        self.fields: Tuple[Field, ...] = tuple(fields)
        self.discriminator_format = discriminator_format

        tails = [f for f in self.fields if f.kind == "utf8_tail"]
        if tails and self.fields[-1] is not tails[0]:
            raise ValueError(f"{name}: utf8_tail must be the last field")

    @property
    def discriminator_width(self) -> int:
        if self.discriminator is None:
            return 0
        return struct.calcsize(self.discriminator_format)

    def encode(self, values: Optional[Mapping[str, Any]] = None) -> bytes:
        """
        Serialize field values

        Args:
            values: Field name -> value (missing optional fields encode as absent)

        Returns:
            Instruction data bytes

        Raises:
            InstructionEncodingError: If a value is malformed
        """
        values = values or {}
        unknown = set(values) - {f.name for f in self.fields}
        if unknown:
            raise InstructionEncodingError.invalid_field(
                ", ".join(sorted(unknown)), f"not a field of {self.name}"
            )

        out = bytearray()
        if self.discriminator is not None:
            out.extend(struct.pack(self.discriminator_format, self.discriminator))
        for f in self.fields:
            f.encode(values.get(f.name), out)
        return bytes(out)

    def decode(self, data: bytes) -> Dict[str, Any]:
        """
        Parse instruction data back into field values

        Raises:
            InstructionEncodingError: On wrong discriminator, truncation or trailing bytes
        """
        data = bytes(data)
        offset = 0

        if self.discriminator is not None:
            found = read_discriminator(data, self.discriminator_format)
            if found != self.discriminator:
                raise InstructionEncodingError(
                    f"Discriminator {found} does not match {self.name} ({self.discriminator})",
                    field="discriminator",
                    offset=0,
                )
            offset = self.discriminator_width

        result: Dict[str, Any] = {}
        for f in self.fields:
            result[f.name], offset = f.decode(data, offset)

        if offset != len(data):
            raise InstructionEncodingError.trailing_bytes(offset, len(data) - offset)

        return result

    def __repr__(self) -> str:
        names = ", ".join(f.name for f in self.fields)
        return f"Layout({self.name}, disc={self.discriminator}, fields=[{names}])"


def read_discriminator(data: bytes, discriminator_format: str = DISC_U8) -> int:
    """Read the leading discriminator of instruction data"""
    width = struct.calcsize(discriminator_format)
    if len(data) < width:
        raise InstructionEncodingError.truncated("discriminator", 0, width, len(data))
    return struct.unpack_from(discriminator_format, data, 0)[0]
