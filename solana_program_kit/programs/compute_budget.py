"""
Compute Budget program instruction builders

None of these instructions take accounts. Clients normally prepend
set_compute_unit_limit / set_compute_unit_price to a transaction.
"""

from enum import IntEnum
from typing import List, Optional

from ..codec import Field, Layout
from ..errors import InstructionEncodingError
from ..types import Instruction
from .catalog import ProgramCatalog
from .constants import COMPUTE_BUDGET_PROGRAM_ID

# Heap frame bounds enforced by the runtime
MIN_HEAP_FRAME_BYTES = 32 * 1024
MAX_HEAP_FRAME_BYTES = 256 * 1024
HEAP_FRAME_GRANULARITY = 1024

MAX_COMPUTE_UNIT_LIMIT = 1_400_000


class ComputeBudgetInstruction(IntEnum):
    """Instruction discriminators of the compute budget program"""
    RequestHeapFrame = 1
    SetComputeUnitLimit = 2
    SetComputeUnitPrice = 3
    SetLoadedAccountsDataSizeLimit = 4


_FIELDS = {
    ComputeBudgetInstruction.RequestHeapFrame: [Field("bytes", "u32")],
    ComputeBudgetInstruction.SetComputeUnitLimit: [Field("units", "u32")],
    ComputeBudgetInstruction.SetComputeUnitPrice: [Field("micro_lamports", "u64")],
    ComputeBudgetInstruction.SetLoadedAccountsDataSizeLimit: [Field("bytes", "u32")],
}

LAYOUTS = {
    variant: Layout(variant.name, variant, _FIELDS[variant])
    for variant in ComputeBudgetInstruction
}

CATALOG = ProgramCatalog(
    name="compute-budget",
    program_id=COMPUTE_BUDGET_PROGRAM_ID,
    instructions=ComputeBudgetInstruction,
    layouts=LAYOUTS,
)


def _build(variant: ComputeBudgetInstruction, **values) -> Instruction:
    return Instruction.new(CATALOG.program_id, [], CATALOG.encode(variant, values))


def request_heap_frame(bytes_: int) -> Instruction:
    """
    RequestHeapFrame (1)

    Args:
        bytes_: Heap size; a multiple of 1024 between 32 KiB and 256 KiB
    """
    if isinstance(bytes_, bool) or not isinstance(bytes_, int):
        raise InstructionEncodingError.invalid_field(
            "bytes", f"expected int, got {type(bytes_).__name__}"
        )
    if not MIN_HEAP_FRAME_BYTES <= bytes_ <= MAX_HEAP_FRAME_BYTES or bytes_ % HEAP_FRAME_GRANULARITY:
        raise InstructionEncodingError.invalid_field(
            "bytes",
            f"heap frame must be a multiple of {HEAP_FRAME_GRANULARITY} "
            f"in [{MIN_HEAP_FRAME_BYTES}, {MAX_HEAP_FRAME_BYTES}], got {bytes_}",
        )
    return _build(ComputeBudgetInstruction.RequestHeapFrame, bytes=bytes_)


def set_compute_unit_limit(units: int) -> Instruction:
    """SetComputeUnitLimit (2)"""
    return _build(ComputeBudgetInstruction.SetComputeUnitLimit, units=units)


def set_compute_unit_price(micro_lamports: int) -> Instruction:
    """SetComputeUnitPrice (3): priority fee in micro-lamports per compute unit"""
    return _build(ComputeBudgetInstruction.SetComputeUnitPrice, micro_lamports=micro_lamports)


def set_loaded_accounts_data_size_limit(bytes_: int) -> Instruction:
    """SetLoadedAccountsDataSizeLimit (4)"""
    return _build(ComputeBudgetInstruction.SetLoadedAccountsDataSizeLimit, bytes=bytes_)


def priority_fee_instructions(units: int, micro_lamports: Optional[int] = None) -> List[Instruction]:
    """Limit + optional price pair, in the order clients prepend them"""
    instructions = [set_compute_unit_limit(units)]
    if micro_lamports is not None:
        instructions.append(set_compute_unit_price(micro_lamports))
    return instructions
