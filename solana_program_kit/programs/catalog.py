"""
Program catalog definition

A catalog bundles everything needed to talk to one on-chain program:
its id, its instruction variants with their data layouts, and its error
enumeration. Builders encode through the catalog's layouts and the
registry decodes through them, so both directions share one description.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, Mapping, Optional, Type

from solders.pubkey import Pubkey

from ..codec import DISC_U8, Layout, read_discriminator
from ..errors import InstructionEncodingError
from .errors import ProgramError, UnknownErrorCode, resolve_error


@dataclass(frozen=True)
class DecodedInstruction:
    """
    Instruction data parsed back into its variant and fields

    Attributes:
        program: Catalog name
        variant: Instruction enum member (None for programs without a discriminator)
        fields: Field name -> decoded value
    """
    program: str
    variant: Optional[IntEnum]
    fields: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class ProgramCatalog:
    """
    Description of one program's instruction interface

    Attributes:
        name: Registry name (e.g. "token", "associated-token")
        program_id: Default deployed program id
        instructions: Instruction enum (None for discriminator-less programs)
        layouts: Variant -> data layout (key None for discriminator-less programs)
        errors: Error enumeration, if the program publishes one
        discriminator_format: struct format of the discriminator
    """
    name: str
    program_id: Pubkey
    instructions: Optional[Type[IntEnum]]
    layouts: Mapping[Optional[IntEnum], Layout]
    errors: Optional[Type[ProgramError]] = None
    discriminator_format: str = DISC_U8

    def layout(self, variant: Optional[IntEnum]) -> Layout:
        try:
            return self.layouts[variant]
        except KeyError:
            raise InstructionEncodingError.unknown_variant(self.name, int(variant) if variant is not None else -1)

    def encode(self, variant: Optional[IntEnum], values: Optional[Mapping[str, Any]] = None) -> bytes:
        """Encode instruction data for a variant"""
        return self.layout(variant).encode(values)

    def decode(self, data: bytes) -> DecodedInstruction:
        """
        Parse instruction data produced for this program

        Raises:
            InstructionEncodingError: Unknown discriminator or malformed data
        """
        if self.instructions is None:
            return DecodedInstruction(self.name, None, self.layout(None).decode(data))

        disc = read_discriminator(data, self.discriminator_format)
        try:
            variant = self.instructions(disc)
        except ValueError:
            raise InstructionEncodingError.unknown_variant(self.name, disc)

        return DecodedInstruction(self.name, variant, self.layout(variant).decode(data))

    def resolve_error(self, code: int):
        """Map a custom error code; UnknownErrorCode when outside the catalog"""
        if self.errors is None:
            return UnknownErrorCode(self.name, int(code))
        return resolve_error(self.errors, code, self.name)
