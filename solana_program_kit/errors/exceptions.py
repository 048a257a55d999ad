"""
Exception definitions for Solana Program Kit
"""

from enum import Enum
from typing import Optional, Sequence


class ErrorCode(Enum):
    """
    Unified error codes for derivation and encoding operations

    1xxx - Address derivation errors
    2xxx - Instruction encoding errors
    3xxx - Registry errors
    9xxx - Configuration errors
    """
    # Address derivation errors
    SEED_CONSTRAINT_VIOLATION = "1001"
    INVALID_SEEDS = "1002"
    ILLEGAL_OWNER = "1003"
    NO_VALID_ADDRESS = "1004"
    INVALID_PUBKEY = "1005"

    # Instruction encoding errors
    ENCODING_INVALID_FIELD = "2001"
    ENCODING_INVALID_DATA = "2002"
    ENCODING_UNKNOWN_VARIANT = "2003"

    # Registry errors
    UNKNOWN_PROGRAM = "3001"

    # Configuration errors
    CONFIG_INVALID = "9001"
    CONFIG_MISSING = "9002"


class ProgramKitError(Exception):
    """
    Base exception for all program kit errors

    Every failure in this package is a deterministic function of its inputs,
    so none of them is recoverable by retrying with the same arguments.

    Attributes:
        message: Human-readable error message
        code: Error code for programmatic handling
        recoverable: Whether the error might succeed on retry (always False here)
        original_error: The underlying exception if any
        details: Additional error context
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode,
        recoverable: bool = False,
        original_error: Optional[Exception] = None,
        details: Optional[dict] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.recoverable = recoverable
        self.original_error = original_error
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code.value}, message={self.message!r})"

    @property
    def should_retry(self) -> bool:
        """Indicate if the operation should be retried"""
        return self.recoverable


class SeedConstraintViolation(ProgramKitError):
    """
    Seed set violates the derivation limits

    Raised when:
    - More than MAX_SEEDS seeds are supplied
    - A single seed is longer than MAX_SEED_LEN bytes
    """

    def __init__(
        self,
        message: str,
        seed_index: Optional[int] = None,
        seed_length: Optional[int] = None,
        seed_count: Optional[int] = None,
    ):
        super().__init__(
            message,
            ErrorCode.SEED_CONSTRAINT_VIOLATION,
            details={
                "seed_index": seed_index,
                "seed_length": seed_length,
                "seed_count": seed_count,
            },
        )
        self.seed_index = seed_index
        self.seed_length = seed_length
        self.seed_count = seed_count

    @classmethod
    def too_many_seeds(cls, count: int, limit: int) -> "SeedConstraintViolation":
        return cls(
            f"Too many seeds: got {count}, at most {limit} allowed",
            seed_count=count,
        )

    @classmethod
    def seed_too_long(cls, index: int, length: int, limit: int) -> "SeedConstraintViolation":
        return cls(
            f"Seed {index} is {length} bytes, at most {limit} allowed",
            seed_index=index,
            seed_length=length,
        )


class InvalidSeeds(ProgramKitError):
    """
    Single-shot derivation produced an on-curve point

    Raised by create_program_address when the supplied seeds (bump included)
    hash to a valid ed25519 point, i.e. an address that could have a private key.
    """

    def __init__(self, message: str, program_id: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.INVALID_SEEDS,
            details={"program_id": program_id},
        )
        self.program_id = program_id

    @classmethod
    def on_curve(cls, program_id: str) -> "InvalidSeeds":
        return cls(
            f"Seeds derive an on-curve address for program {program_id}",
            program_id=program_id,
        )


class IllegalOwner(ProgramKitError):
    """
    Owner passed to create_with_seed ends with the PDA marker

    Such an owner would let a seeded address collide with a program-derived one.
    """

    def __init__(self, message: str, owner: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.ILLEGAL_OWNER,
            details={"owner": owner},
        )
        self.owner = owner

    @classmethod
    def pda_marker(cls, owner: str) -> "IllegalOwner":
        return cls(
            f"Owner {owner} ends with the program-derived address marker",
            owner=owner,
        )


class NoValidAddress(ProgramKitError):
    """
    Bump search exhausted without finding an off-curve address

    Terminal: the same inputs always produce this outcome, so callers must
    not retry with mutated seeds automatically.
    """

    def __init__(
        self,
        message: str,
        program_id: Optional[str] = None,
        seed_count: Optional[int] = None,
    ):
        super().__init__(
            message,
            ErrorCode.NO_VALID_ADDRESS,
            details={"program_id": program_id, "seed_count": seed_count},
        )
        self.program_id = program_id
        self.seed_count = seed_count

    @classmethod
    def exhausted(cls, program_id: str, seed_count: int) -> "NoValidAddress":
        return cls(
            f"No viable bump seed found for program {program_id} ({seed_count} seeds)",
            program_id=program_id,
            seed_count=seed_count,
        )


class InvalidPubkey(ProgramKitError):
    """
    Value cannot be interpreted as a 32-byte public key

    Raised when:
    - Raw bytes are not exactly 32 bytes long
    - A base58 string does not decode to 32 bytes
    """

    def __init__(self, message: str, value: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.INVALID_PUBKEY,
            details={"value": value},
        )
        self.value = value

    @classmethod
    def wrong_size(cls, value: str, size: int) -> "InvalidPubkey":
        return cls(f"Public key must be 32 bytes, got {size}", value=value)

    @classmethod
    def not_base58(cls, value: str) -> "InvalidPubkey":
        return cls(f"Not a valid base58 public key: {value!r}", value=value)


class InstructionEncodingError(ProgramKitError):
    """
    Instruction field or data buffer is malformed

    Raised when:
    - A field value does not fit its declared width or type
    - Instruction data cannot be decoded under the declared layout
    - A discriminator does not name a known variant
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.ENCODING_INVALID_FIELD,
        field: Optional[str] = None,
        offset: Optional[int] = None,
    ):
        super().__init__(
            message,
            code,
            details={"field": field, "offset": offset},
        )
        self.field = field
        self.offset = offset

    @classmethod
    def invalid_field(cls, field: str, reason: str) -> "InstructionEncodingError":
        return cls(f"Invalid value for field '{field}': {reason}", field=field)

    @classmethod
    def truncated(cls, field: str, offset: int, needed: int, available: int) -> "InstructionEncodingError":
        return cls(
            f"Data too short for field '{field}' at offset {offset}: need {needed} bytes, have {available}",
            ErrorCode.ENCODING_INVALID_DATA,
            field=field,
            offset=offset,
        )

    @classmethod
    def trailing_bytes(cls, offset: int, extra: int) -> "InstructionEncodingError":
        return cls(
            f"{extra} unexpected trailing bytes at offset {offset}",
            ErrorCode.ENCODING_INVALID_DATA,
            offset=offset,
        )

    @classmethod
    def invalid_utf8(cls, field: str, offset: int) -> "InstructionEncodingError":
        return cls(
            f"Field '{field}' is not valid UTF-8 (first invalid byte at {offset})",
            field=field,
            offset=offset,
        )

    @classmethod
    def unknown_variant(cls, program: str, discriminator: int) -> "InstructionEncodingError":
        return cls(
            f"Unknown {program} instruction discriminator: {discriminator}",
            ErrorCode.ENCODING_UNKNOWN_VARIANT,
            offset=0,
        )


class UnknownProgram(ProgramKitError):
    """
    No catalog is registered for a program id
    """

    def __init__(self, message: str, program_id: Optional[str] = None):
        super().__init__(
            message,
            ErrorCode.UNKNOWN_PROGRAM,
            details={"program_id": program_id},
        )
        self.program_id = program_id

    @classmethod
    def not_registered(cls, program_id: str, available: Sequence[str] = ()) -> "UnknownProgram":
        names = ", ".join(available) or "none"
        return cls(
            f"No catalog registered for program {program_id}. Available programs: {names}",
            program_id=program_id,
        )


class ConfigurationError(ProgramKitError):
    """
    Configuration-related errors

    Raised when:
    - Required configuration is missing
    - Configuration values are invalid
    """

    def __init__(
        self,
        message: str,
        code: ErrorCode = ErrorCode.CONFIG_INVALID,
    ):
        super().__init__(message, code, recoverable=False)

    @classmethod
    def missing(cls, param: str) -> "ConfigurationError":
        return cls(f"Missing required configuration: {param}", ErrorCode.CONFIG_MISSING)

    @classmethod
    def invalid(cls, param: str, reason: str) -> "ConfigurationError":
        return cls(f"Invalid configuration '{param}': {reason}", ErrorCode.CONFIG_INVALID)
