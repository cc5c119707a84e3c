"""Structural classification of decoded scripts into standard templates."""

from enum import Enum
from typing import Sequence


class ScriptType(str, Enum):
    """Template tag assigned to a script"""
    P2PK = "p2pk"
    P2PKH = "p2pkh"
    P2SH = "p2sh"
    P2MS = "p2ms"
    RETURN = "return"
    UNKNOWN = "unknown"


def classify(asm: Sequence[str], strict: bool = True) -> ScriptType:
    """
    Classify a token sequence by its shape.

    Rules are tried in priority order and the first match wins:
    P2PK, P2PKH, P2SH, P2MS, RETURN, then UNKNOWN. Wildcard positions
    (the key or hash slots) are not inspected.

    Args:
        asm: Decoded token sequence
        strict: Require the fixed mnemonics at every non-wildcard position.
            When False only lengths are compared for P2PK/P2PKH/P2SH and any
            non-empty script counts as RETURN, which is how the original
            tool behaved.

    Returns:
        The template tag
    """
    tokens = list(asm)

    if strict:
        if len(tokens) == 2 and tokens[1] == "OP_CHECKSIG":
            return ScriptType.P2PK
        if (len(tokens) == 5
                and tokens[:2] == ["OP_DUP", "OP_HASH160"]
                and tokens[3:] == ["OP_EQUALVERIFY", "OP_CHECKSIG"]):
            return ScriptType.P2PKH
        if (len(tokens) == 3
                and tokens[0] == "OP_HASH160"
                and tokens[2] == "OP_EQUAL"):
            return ScriptType.P2SH
    else:
        if len(tokens) == 2:
            return ScriptType.P2PK
        if len(tokens) == 5:
            return ScriptType.P2PKH
        if len(tokens) == 3:
            return ScriptType.P2SH

    if tokens and tokens[-1] == "OP_CHECKMULTISIG":
        return ScriptType.P2MS

    if tokens and (not strict or tokens[0] == "OP_RETURN"):
        return ScriptType.RETURN

    return ScriptType.UNKNOWN
