"""
Test Codec Module

Tests for instruction data layouts: field kinds, optional fields, range
checks and decoding failures.
"""

import struct
import sys
from pathlib import Path

import pytest
from solders.pubkey import Pubkey

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))


def test_integer_fields():
    """Integers are little-endian at their declared width"""
    from solana_program_kit.codec import Field, Layout

    print("Testing integer fields...")

    layout = Layout("Ints", 9, [
        Field("a", "u8"),
        Field("b", "u16"),
        Field("c", "u32"),
        Field("d", "u64"),
        Field("e", "i64"),
        Field("f", "u128"),
    ])
    values = {"a": 1, "b": 2, "c": 3, "d": 4, "e": -5, "f": 2 ** 100}
    data = layout.encode(values)

    assert data == (
        bytes([9])
        + struct.pack("<BHIQq", 1, 2, 3, 4, -5)
        + (2 ** 100).to_bytes(16, "little")
    )
    assert layout.decode(data) == values

    print("  integer fields: PASSED")


def test_integer_range_checks():
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError

    layout = Layout("U8", 0, [Field("x", "u8")])
    for bad in (-1, 256, 1.0, "1", True):
        with pytest.raises(InstructionEncodingError) as exc_info:
            layout.encode({"x": bad})
        assert exc_info.value.field == "x"

    i32 = Layout("I32", 0, [Field("x", "i32")])
    assert i32.decode(i32.encode({"x": -(2 ** 31)})) == {"x": -(2 ** 31)}
    with pytest.raises(InstructionEncodingError):
        i32.encode({"x": 2 ** 31})


def test_bool_field():
    """Bools take one byte and must be real bools"""
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError

    layout = Layout("Flag", 1, [Field("flag", "bool")])
    assert layout.encode({"flag": True}) == bytes([1, 1])
    assert layout.encode({"flag": False}) == bytes([1, 0])
    assert layout.decode(bytes([1, 1])) == {"flag": True}

    with pytest.raises(InstructionEncodingError):
        layout.encode({"flag": 1})

    with pytest.raises(InstructionEncodingError) as exc_info:
        layout.decode(bytes([1, 2]))
    assert exc_info.value.offset == 1


def test_optional_field():
    """Absent optional is one zero byte; present is 1 + value"""
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError

    print("Testing optional fields...")

    key = Pubkey(bytes([5]) * 32)
    layout = Layout("Opt", 4, [Field("key", "pubkey", optional=True), Field("n", "u64", optional=True)])

    assert layout.encode({}) == bytes([4, 0, 0])
    assert layout.encode({"key": key}) == bytes([4, 1]) + bytes(key) + bytes([0])
    assert layout.encode({"n": 7}) == bytes([4, 0, 1]) + struct.pack("<Q", 7)

    assert layout.decode(bytes([4, 0, 0])) == {"key": None, "n": None}
    assert layout.decode(layout.encode({"key": key, "n": 7})) == {"key": key, "n": 7}

    with pytest.raises(InstructionEncodingError):
        layout.decode(bytes([4, 2, 0]))

    print("  optional fields: PASSED")


def test_required_field_missing():
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError

    layout = Layout("Req", 0, [Field("amount", "u64")])
    with pytest.raises(InstructionEncodingError) as exc_info:
        layout.encode({})
    assert exc_info.value.field == "amount"


def test_unknown_field_rejected():
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError

    layout = Layout("Req", 0, [Field("amount", "u64")])
    with pytest.raises(InstructionEncodingError):
        layout.encode({"amount": 1, "amout": 2})


def test_pubkey_field():
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError

    key = Pubkey(bytes(range(32)))
    layout = Layout("Key", 0, [Field("key", "pubkey")])

    assert layout.encode({"key": key}) == bytes([0]) + bytes(key)
    assert layout.encode({"key": str(key)}) == layout.encode({"key": bytes(key)})

    with pytest.raises(InstructionEncodingError):
        layout.encode({"key": b"\x00" * 31})


def test_string_field():
    """Bincode strings: u64 length prefix then UTF-8"""
    from solana_program_kit.codec import Field, Layout, DISC_U32
    from solana_program_kit.errors import InstructionEncodingError

    layout = Layout("Str", 3, [Field("s", "string"), Field("n", "u8")], discriminator_format=DISC_U32)
    data = layout.encode({"s": "héllo", "n": 1})
    raw = "héllo".encode("utf-8")
    assert data == struct.pack("<IQ", 3, len(raw)) + raw + bytes([1])
    assert layout.decode(data) == {"s": "héllo", "n": 1}

    # Length prefix pointing past the end
    with pytest.raises(InstructionEncodingError):
        layout.decode(struct.pack("<IQ", 3, 100) + b"abc")


def test_utf8_tail_must_be_last():
    from solana_program_kit.codec import Field, Layout

    with pytest.raises(ValueError):
        Layout("Bad", 0, [Field("text", "utf8_tail"), Field("n", "u8")])


def test_unknown_field_kind():
    from solana_program_kit.codec import Field

    with pytest.raises(ValueError):
        Field("x", "f64")


def test_decode_failures():
    """Wrong discriminator, truncation and trailing bytes all fail"""
    from solana_program_kit.codec import Field, Layout
    from solana_program_kit.errors import InstructionEncodingError, ErrorCode

    print("Testing decode failures...")

    layout = Layout("Amount", 3, [Field("amount", "u64")])

    with pytest.raises(InstructionEncodingError) as exc_info:
        layout.decode(bytes([4]) + bytes(8))
    assert exc_info.value.field == "discriminator"

    with pytest.raises(InstructionEncodingError) as exc_info:
        layout.decode(bytes([3]) + bytes(7))
    assert exc_info.value.code == ErrorCode.ENCODING_INVALID_DATA
    assert exc_info.value.offset == 1

    with pytest.raises(InstructionEncodingError) as exc_info:
        layout.decode(bytes([3]) + bytes(9))
    assert exc_info.value.offset == 9

    print("  decode failures: PASSED")


def test_read_discriminator():
    from solana_program_kit.codec import read_discriminator, DISC_U8, DISC_U32
    from solana_program_kit.errors import InstructionEncodingError

    assert read_discriminator(bytes([7, 1, 2]), DISC_U8) == 7
    assert read_discriminator(struct.pack("<I", 11), DISC_U32) == 11

    with pytest.raises(InstructionEncodingError):
        read_discriminator(bytes([1, 0]), DISC_U32)


def test_first_invalid_utf8():
    from solana_program_kit.codec import first_invalid_utf8

    assert first_invalid_utf8(b"plain") is None
    assert first_invalid_utf8("é".encode("utf-8")) is None
    assert first_invalid_utf8(b"ab\xc3") == 2
    assert first_invalid_utf8(b"\xff") == 0


def main():
    """Run all codec tests"""
    print("=" * 60)
    print("Codec Tests")
    print("=" * 60)

    tests = [
        test_integer_fields,
        test_integer_range_checks,
        test_bool_field,
        test_optional_field,
        test_required_field_missing,
        test_unknown_field_rejected,
        test_pubkey_field,
        test_string_field,
        test_utf8_tail_must_be_last,
        test_unknown_field_kind,
        test_decode_failures,
        test_read_discriminator,
        test_first_invalid_utf8,
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
