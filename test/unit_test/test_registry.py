"""
Program Registry Unit Tests

Tests catalog lookup by name and id, instruction decoding across programs,
error resolution and the configured default token program.
"""

import sys
from pathlib import Path

import pytest

# Add parent to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from solana_program_kit.programs import (
    associated_token,
    compute_budget,
    memo,
    stake,
    system,
    token,
)
from solana_program_kit.programs.catalog import ProgramCatalog
from solana_program_kit.programs.constants import (
    MEMO_V1_PROGRAM_ID,
    TOKEN_2022_PROGRAM_ID,
    TOKEN_PROGRAM_ID,
)
from solana_program_kit.programs.errors import StakeError, TokenError, SystemProgramError, UnknownErrorCode
from solana_program_kit.programs.registry import (
    BUILTIN_PROGRAMS,
    ProgramRegistry,
    decode_instruction,
    get_catalog,
    register_catalog,
    resolve_program_error,
)
from solana_program_kit.types import Instruction, pubkey_of


class TestLookup:
    """Tests for catalog lookup"""

    def test_get_builtin(self):
        """Test built-in catalogs load on demand"""
        assert ProgramRegistry.get("token") is token.CATALOG
        assert ProgramRegistry.get("SYSTEM") is system.CATALOG
        assert get_catalog("associated-token") is associated_token.CATALOG

    def test_get_unknown_name(self):
        """Test unknown names raise ConfigurationError"""
        from solana_program_kit.errors import ConfigurationError
        with pytest.raises(ConfigurationError):
            ProgramRegistry.get("serum")

    def test_list(self):
        """Test list includes all built-ins"""
        names = ProgramRegistry.list()
        for name in BUILTIN_PROGRAMS:
            assert name in names
            assert ProgramRegistry.is_registered(name)
        assert not ProgramRegistry.is_registered("serum")

    def test_by_program_id(self):
        """Test lookup by program id, including alias ids"""
        assert ProgramRegistry.by_program_id(TOKEN_PROGRAM_ID) is token.CATALOG
        assert ProgramRegistry.by_program_id(str(TOKEN_PROGRAM_ID)) is token.CATALOG
        assert ProgramRegistry.by_program_id(TOKEN_2022_PROGRAM_ID) is token.CATALOG
        assert ProgramRegistry.by_program_id(MEMO_V1_PROGRAM_ID) is memo.CATALOG
        assert ProgramRegistry.by_program_id(compute_budget.CATALOG.program_id) is compute_budget.CATALOG
        assert ProgramRegistry.by_program_id(stake.CATALOG.program_id) is stake.CATALOG

    def test_by_unknown_program_id(self):
        """Test unknown ids raise UnknownProgram"""
        from solana_program_kit.errors import UnknownProgram
        with pytest.raises(UnknownProgram) as exc_info:
            ProgramRegistry.by_program_id(pubkey_of(77))
        assert exc_info.value.program_id == str(pubkey_of(77))

        with pytest.raises(UnknownProgram):
            ProgramRegistry.by_program_id("not-a-pubkey")


class TestDecode:
    """Tests for decoding instructions through the registry"""

    def test_decode_token_transfer(self):
        """Test decode returns variant and fields"""
        ix = token.transfer(pubkey_of(1), pubkey_of(2), pubkey_of(3), 500)
        decoded = ProgramRegistry.decode(ix)
        assert decoded.program == "token"
        assert decoded.variant == token.TokenInstruction.Transfer
        assert decoded.fields == {"amount": 500}

    def test_decode_token_2022(self):
        """Test Token-2022 instructions decode with the token catalog"""
        ix = token.burn_checked(pubkey_of(1), pubkey_of(2), pubkey_of(3), 9, 2, program_id=TOKEN_2022_PROGRAM_ID)
        decoded = decode_instruction(ix)
        assert decoded.variant == token.TokenInstruction.BurnChecked
        assert decoded.fields == {"amount": 9, "decimals": 2}

    def test_decode_each_program(self):
        """Test one instruction of every built-in program"""
        cases = [
            (system.transfer(pubkey_of(1), pubkey_of(2), 10), system.SystemInstruction.Transfer),
            (stake.deactivate(pubkey_of(1), pubkey_of(2)), stake.StakeInstruction.Deactivate),
            (compute_budget.set_compute_unit_limit(1), compute_budget.ComputeBudgetInstruction.SetComputeUnitLimit),
            (associated_token.create(pubkey_of(1), pubkey_of(2), pubkey_of(3)),
             associated_token.AssociatedTokenInstruction.Create),
        ]
        for ix, variant in cases:
            assert ProgramRegistry.decode(ix).variant == variant

        decoded = ProgramRegistry.decode(memo.memo("gm"))
        assert decoded.program == "memo"
        assert decoded.variant is None
        assert decoded.fields == {"memo": "gm"}

    def test_decode_unknown_program(self):
        """Test instructions for unregistered programs"""
        from solana_program_kit.errors import UnknownProgram
        with pytest.raises(UnknownProgram):
            ProgramRegistry.decode(Instruction(pubkey_of(77), (), b"\x00"))

    def test_decode_unknown_discriminator(self):
        """Test unknown discriminators raise InstructionEncodingError"""
        from solana_program_kit.errors import InstructionEncodingError
        with pytest.raises(InstructionEncodingError):
            ProgramRegistry.decode(Instruction(TOKEN_PROGRAM_ID, (), bytes([200])))


class TestResolveError:
    """Tests for error code resolution"""

    def test_resolve_by_name(self):
        assert ProgramRegistry.resolve_error("token", 19) is TokenError.NonNativeNotSupported
        assert resolve_program_error("system", 0) is SystemProgramError.AccountAlreadyInUse
        assert ProgramRegistry.resolve_error("stake", 1) is StakeError.LockupInForce

    def test_resolve_by_program_id(self):
        assert ProgramRegistry.resolve_error(TOKEN_PROGRAM_ID, 1) is TokenError.InsufficientFunds
        assert ProgramRegistry.resolve_error(str(TOKEN_PROGRAM_ID), 1) is TokenError.InsufficientFunds

    def test_resolve_unknown_code(self):
        """Test unknown codes keep the raw value"""
        result = ProgramRegistry.resolve_error("token", 9999)
        assert result == UnknownErrorCode("token", 9999)

    def test_resolve_program_without_catalog(self):
        """Test programs without an error enum report UnknownErrorCode"""
        result = ProgramRegistry.resolve_error("memo", 0)
        assert isinstance(result, UnknownErrorCode)
        assert result.program == "memo"


class TestRegister:
    """Tests for custom catalog registration"""

    @pytest.fixture
    def custom_catalog(self):
        """Register a custom catalog and restore the registry afterwards"""
        from solana_program_kit.codec import Layout

        catalog = ProgramCatalog(
            name="custom",
            program_id=pubkey_of(88),
            instructions=token.AuthorityType,
            layouts={v: Layout(v.name, v) for v in token.AuthorityType},
        )
        register_catalog(catalog, aliases=[pubkey_of(89)])
        yield catalog
        ProgramRegistry.clear()

    def test_register_custom(self, custom_catalog):
        assert ProgramRegistry.is_registered("custom")
        assert ProgramRegistry.get("Custom") is custom_catalog
        assert ProgramRegistry.by_program_id(pubkey_of(88)) is custom_catalog
        assert ProgramRegistry.by_program_id(pubkey_of(89)) is custom_catalog

        decoded = ProgramRegistry.decode(Instruction(pubkey_of(89), (), bytes([3])))
        assert decoded.program == "custom"
        assert decoded.variant == token.AuthorityType.CloseAccount

    def test_builtins_reload_after_clear(self):
        ProgramRegistry.clear()
        assert not ProgramRegistry.is_registered("token")
        assert ProgramRegistry.by_program_id(TOKEN_PROGRAM_ID) is token.CATALOG
        assert ProgramRegistry.is_registered("token")


class TestDefaultTokenProgram:
    """Tests for the configured default token program"""

    def test_default_is_token(self, monkeypatch):
        from solana_program_kit.config import get_config
        monkeypatch.setattr(get_config().programs, "default_token_program", "token")
        assert ProgramRegistry.default_token_program() == TOKEN_PROGRAM_ID

    def test_token_2022(self, monkeypatch):
        from solana_program_kit.config import get_config
        monkeypatch.setattr(get_config().programs, "default_token_program", "Token-2022")
        assert ProgramRegistry.default_token_program() == TOKEN_2022_PROGRAM_ID

    def test_unknown_name(self, monkeypatch):
        from solana_program_kit.config import get_config
        from solana_program_kit.errors import ConfigurationError
        monkeypatch.setattr(get_config().programs, "default_token_program", "token-2049")
        with pytest.raises(ConfigurationError):
            ProgramRegistry.default_token_program()


def main():
    """Run all registry unit tests"""
    print("=" * 60)
    print("Program Registry Unit Tests")
    print("=" * 60)

    # Run with pytest
    exit_code = pytest.main([__file__, "-v", "--tb=short"])
    return exit_code == 0


if __name__ == "__main__":
    success = main()
    sys.exit(0 if success else 1)
