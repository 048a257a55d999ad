"""
Memo program instruction builder

The memo program has no discriminator: the whole instruction data is the
UTF-8 memo text. Every account passed is a signer that must have signed
the transaction.
"""

from typing import Optional, Sequence, Union

from ..codec import Field, Layout
from ..types import AccountMeta, Instruction, PubkeyLike, as_pubkey
from .catalog import ProgramCatalog
from .constants import MEMO_PROGRAM_ID

LAYOUTS = {
    None: Layout("Memo", None, [Field("memo", "utf8_tail")]),
}

CATALOG = ProgramCatalog(
    name="memo",
    program_id=MEMO_PROGRAM_ID,
    instructions=None,
    layouts=LAYOUTS,
)


def memo(
    text: Union[str, bytes],
    signers: Optional[Sequence[PubkeyLike]] = None,
    program_id: Optional[PubkeyLike] = None,
) -> Instruction:
    """
    Build a memo instruction

    Args:
        text: Memo text (bytes must be valid UTF-8)
        signers: Accounts that must sign the memo
        program_id: Memo program override (e.g. MEMO_V1_PROGRAM_ID)

    Raises:
        InstructionEncodingError: If bytes are not valid UTF-8 (offset of the bad byte is set)
    """
    target = as_pubkey(program_id) if program_id is not None else CATALOG.program_id
    accounts = [AccountMeta.readonly_signer(as_pubkey(s)) for s in signers or ()]
    return Instruction.new(target, accounts, CATALOG.encode(None, {"memo": text}))
