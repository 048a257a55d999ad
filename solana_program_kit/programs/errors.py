"""
Program error catalogs

Each on-chain program reports failures as a numeric custom error code.
The codes are part of the wire contract: they never change once published.
Messages are for diagnostics only and must not be parsed.

Usage:
    err = TokenError.from_code(19)      # TokenError.NonNativeNotSupported
    err.message()                       # "Instruction does not support non-native tokens"
    TokenError.from_code(9999)          # None

    resolve_error(TokenError, 9999, "token")  # UnknownErrorCode(program="token", code=9999)
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Optional, Type, Union


class ProgramError(IntEnum):
    """
    Base for per-program error enumerations

    Members are declared as (code, message) pairs; the member value is the code.
    """

    def __new__(cls, code: int, text: str):
        obj = int.__new__(cls, code)
        obj._value_ = code
        obj._text = text
        return obj

    @classmethod
    def from_code(cls, code: int) -> Optional["ProgramError"]:
        """Look up a variant; None for any code outside the enumeration"""
        try:
            return cls(code)
        except ValueError:
            return None

    def to_code(self) -> int:
        return int(self.value)

    def message(self) -> str:
        return self._text


class TokenError(ProgramError):
    """Errors returned by the SPL Token program"""
    NotRentExempt = (0, "Lamport balance below rent-exempt threshold")
    InsufficientFunds = (1, "Insufficient funds")
    InvalidMint = (2, "Invalid mint")
    MintMismatch = (3, "Account not associated with this mint")
    OwnerMismatch = (4, "Owner does not match")
    FixedSupply = (5, "Fixed supply")
    AlreadyInUse = (6, "Already in use")
    InvalidNumberOfProvidedSigners = (7, "Invalid number of provided signers")
    InvalidNumberOfRequiredSigners = (8, "Invalid number of required signers")
    UninitializedState = (9, "State is uninitialized")
    NativeNotSupported = (10, "Instruction does not support native tokens")
    NonNativeHasBalance = (11, "Non-native account can only be closed if its balance is zero")
    InvalidInstruction = (12, "Invalid instruction")
    InvalidState = (13, "State is invalid for requested operation")
    Overflow = (14, "Operation overflowed")
    AuthorityTypeNotSupported = (15, "Account does not support specified authority type")
    MintCannotFreeze = (16, "This token mint cannot freeze accounts")
    AccountFrozen = (17, "Account is frozen")
    MintDecimalsMismatch = (18, "Mint decimals mismatch")
    NonNativeNotSupported = (19, "Instruction does not support non-native tokens")


class AssociatedTokenError(ProgramError):
    """Errors returned by the Associated Token Account program"""
    InvalidOwner = (0, "Associated token account owner does not match address derivation")


class SystemProgramError(ProgramError):
    """Errors returned by the System program"""
    AccountAlreadyInUse = (0, "an account with the same address already exists")
    ResultWithNegativeLamports = (1, "account does not have enough SOL to perform the operation")
    InvalidProgramId = (2, "cannot assign account to this program id")
    InvalidAccountDataLength = (3, "cannot allocate account data of this length")
    MaxSeedLengthExceeded = (4, "length of requested seed is too long")
    AddressWithSeedMismatch = (5, "provided address does not match addressed derived from seed")
    NonceNoRecentBlockhashes = (6, "advancing stored nonce requires a populated RecentBlockhashes sysvar")
    NonceBlockhashNotExpired = (7, "stored nonce is still in recent_blockhashes")
    NonceUnexpectedBlockhashValue = (8, "specified nonce does not match stored nonce")


class StakeError(ProgramError):
    """Errors returned by the Stake program"""
    NoCreditsToRedeem = (0, "Not enough credits to redeem")
    LockupInForce = (1, "Lockup has not yet expired")
    AlreadyDeactivated = (2, "Stake already deactivated")
    TooSoonToRedelegate = (3, "One re-delegation permitted per epoch")
    InsufficientStake = (4, "Split amount is more than is staked")
    MergeTransientStake = (5, "Stake account with transient stake cannot be merged")
    MergeMismatch = (6, "Stake account merge failed due to different authority, lockups or state")
    CustodianMissing = (7, "Custodian address not present")
    CustodianSignatureMissing = (8, "Custodian signature not present")
    InsufficientReferenceVotes = (9, "Insufficient voting activity in the reference vote account")
    VoteAddressMismatch = (10, "Stake account is not delegated to the provided vote account")
    MinimumDelinquentEpochsForDeactivationNotMet = (
        11,
        "Stake account has not been delinquent for the minimum epochs required for deactivation",
    )
    InsufficientDelegation = (12, "Delegation amount is less than the minimum")
    RedelegateTransientOrInactiveStake = (
        13,
        "Stake account with transient or inactive stake cannot be redelegated",
    )
    RedelegateToSameVoteAccount = (14, "Stake redelegation to the same vote account is not permitted")
    RedelegatedStakeMustFullyActivateBeforeDeactivationIsPermitted = (
        15,
        "Redelegated stake must be fully activated before deactivation",
    )
    EpochRewardsActive = (16, "Stake action is not permitted while the epoch rewards period is active")


@dataclass(frozen=True)
class UnknownErrorCode:
    """
    A custom error code outside a program's catalog

    Keeps the raw number so callers can still report it.
    """
    program: str
    code: int

    def to_code(self) -> int:
        return self.code

    def message(self) -> str:
        return f"Unknown {self.program} error code {self.code}"


def resolve_error(
    catalog: Type[ProgramError],
    code: int,
    program: Optional[str] = None,
) -> Union[ProgramError, UnknownErrorCode]:
    """
    Map a custom error code to a catalog variant

    Args:
        catalog: Error enumeration of the program that failed
        code: Raw custom error code
        program: Program name for the unknown-code result (defaults to the catalog name)

    Returns:
        The variant, or UnknownErrorCode carrying the raw value
    """
    variant = catalog.from_code(code)
    if variant is not None:
        return variant
    return UnknownErrorCode(program or catalog.__name__, int(code))
