"""
Program catalog registry

Provides centralized registration and lookup of program catalogs, by name
or by on-chain program id, and decoding of instructions back into their
variant and fields.
"""

from typing import Dict, List, Sequence, Union
import logging

from solders.pubkey import Pubkey

from ..config import get_config
from ..errors import ConfigurationError, InvalidPubkey, UnknownProgram
from ..types import Instruction, PubkeyLike, as_pubkey
from .catalog import DecodedInstruction, ProgramCatalog
from .constants import MEMO_V1_PROGRAM_ID, TOKEN_2022_PROGRAM_ID, TOKEN_PROGRAMS
from .errors import UnknownErrorCode

logger = logging.getLogger(__name__)

# Built-in catalogs, loaded on first use
BUILTIN_PROGRAMS = ["token", "associated-token", "system", "stake", "compute-budget", "memo"]


class ProgramRegistry:
    """
    Registry for program catalogs

    Built-in catalogs are loaded lazily; custom programs can be added with
    register(). The table is only written during registration.

    Usage:
        # Look up by name
        catalog = ProgramRegistry.get("token")

        # Decode an instruction built anywhere
        decoded = ProgramRegistry.decode(ix)
        print(decoded.program, decoded.variant.name, decoded.fields)

        # Map a failed transaction's custom error code
        err = ProgramRegistry.resolve_error("token", 19)
    """

    # Registered catalogs by name
    _catalogs: Dict[str, ProgramCatalog] = {}

    # Program id -> catalog name (includes alias ids such as Token-2022)
    _program_ids: Dict[Pubkey, str] = {}

    @classmethod
    def register(cls, catalog: ProgramCatalog, aliases: Sequence[PubkeyLike] = ()):
        """
        Register a program catalog

        Args:
            catalog: Program catalog
            aliases: Extra program ids that share this catalog's encoding
        """
        name = catalog.name.lower()
        cls._catalogs[name] = catalog
        cls._program_ids[catalog.program_id] = name
        for alias in aliases:
            cls._program_ids[as_pubkey(alias)] = name
        logger.debug(f"Registered program catalog: {name} ({catalog.program_id})")

    @classmethod
    def get(cls, name: str) -> ProgramCatalog:
        """
        Get catalog by name

        Raises:
            ConfigurationError: If no catalog has that name
        """
        name_lower = name.lower()

        if name_lower not in cls._catalogs:
            cls._try_load_catalog(name_lower)

        if name_lower not in cls._catalogs:
            available = ", ".join(cls._catalogs.keys()) or "none"
            raise ConfigurationError.invalid(
                "program", f"Unknown program: {name}. Available programs: {available}"
            )

        return cls._catalogs[name_lower]

    @classmethod
    def by_program_id(cls, program_id: PubkeyLike) -> ProgramCatalog:
        """
        Get catalog by on-chain program id

        Raises:
            UnknownProgram: If no catalog is registered for the id
        """
        cls._ensure_loaded()
        try:
            key = as_pubkey(program_id)
        except InvalidPubkey as e:
            raise UnknownProgram(e.message, program_id=str(program_id)) from e

        name = cls._program_ids.get(key)
        if name is None:
            raise UnknownProgram.not_registered(str(key), list(cls._catalogs.keys()))
        return cls._catalogs[name]

    @classmethod
    def list(cls) -> List[str]:
        """List registered program names"""
        cls._ensure_loaded()
        return list(cls._catalogs.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if a program name is registered"""
        return name.lower() in cls._catalogs

    @classmethod
    def decode(cls, instruction: Instruction) -> DecodedInstruction:
        """
        Decode an instruction's data using its program's catalog

        Raises:
            UnknownProgram: Program id not registered
            InstructionEncodingError: Unknown discriminator or malformed data
        """
        catalog = cls.by_program_id(instruction.program_id)
        return catalog.decode(instruction.data)

    @classmethod
    def resolve_error(
        cls,
        program: Union[str, PubkeyLike],
        code: int,
    ):
        """
        Map a program's custom error code

        Args:
            program: Catalog name or program id
            code: Raw custom error code

        Returns:
            Error variant, or UnknownErrorCode carrying the raw value
        """
        if isinstance(program, str) and cls._is_name(program):
            catalog = cls.get(program)
        else:
            catalog = cls.by_program_id(program)
        result = catalog.resolve_error(code)
        if isinstance(result, UnknownErrorCode):
            logger.debug(f"Unmapped {catalog.name} error code: {code}")
        return result

    @classmethod
    def default_token_program(cls) -> Pubkey:
        """
        Token program id selected by configuration

        Raises:
            ConfigurationError: If KIT_DEFAULT_TOKEN_PROGRAM names an unknown program
        """
        name = get_config().programs.default_token_program.lower()
        if name not in TOKEN_PROGRAMS:
            raise ConfigurationError.invalid(
                "default_token_program",
                f"Unknown token program: {name}. Expected one of: {', '.join(TOKEN_PROGRAMS)}",
            )
        return TOKEN_PROGRAMS[name]

    @classmethod
    def clear(cls):
        """Drop all registered catalogs (built-ins reload on next use)"""
        cls._catalogs.clear()
        cls._program_ids.clear()

    @classmethod
    def _is_name(cls, value: str) -> bool:
        lowered = value.lower()
        return lowered in cls._catalogs or lowered in BUILTIN_PROGRAMS

    @classmethod
    def _try_load_catalog(cls, name: str):
        """Try to lazy load a built-in catalog"""
        if name == "token":
            from .token import CATALOG
            cls.register(CATALOG, aliases=[TOKEN_2022_PROGRAM_ID])
        elif name == "associated-token":
            from .associated_token import CATALOG
            cls.register(CATALOG)
        elif name == "system":
            from .system import CATALOG
            cls.register(CATALOG)
        elif name == "stake":
            from .stake import CATALOG
            cls.register(CATALOG)
        elif name == "compute-budget":
            from .compute_budget import CATALOG
            cls.register(CATALOG)
        elif name == "memo":
            from .memo import CATALOG
            cls.register(CATALOG, aliases=[MEMO_V1_PROGRAM_ID])

    @classmethod
    def _ensure_loaded(cls):
        """Ensure all built-in catalogs are loaded"""
        for name in BUILTIN_PROGRAMS:
            if name not in cls._catalogs:
                cls._try_load_catalog(name)


def get_catalog(name: str) -> ProgramCatalog:
    """
    Convenience function to get a catalog

    Args:
        name: Program name

    Returns:
        Program catalog
    """
    return ProgramRegistry.get(name)


def register_catalog(catalog: ProgramCatalog, aliases: Sequence[PubkeyLike] = ()):
    """
    Convenience function to register a catalog

    Args:
        catalog: Program catalog
        aliases: Extra program ids sharing the catalog
    """
    ProgramRegistry.register(catalog, aliases)


def decode_instruction(instruction: Instruction) -> DecodedInstruction:
    """Convenience function for ProgramRegistry.decode"""
    return ProgramRegistry.decode(instruction)


def resolve_program_error(program: Union[str, PubkeyLike], code: int):
    """Convenience function for ProgramRegistry.resolve_error"""
    return ProgramRegistry.resolve_error(program, code)
