"""
Opcode registry.

Maps opcode bytes to mnemonics and back. The registry is built once, on
first use, and is read-only afterwards.
"""

import threading
from typing import Dict, Optional

OP_0 = 0x00
OP_PUSHDATA1 = 0x4c
OP_1 = 0x51
OP_16 = 0x60
OP_RETURN = 0x6a
OP_DUP = 0x76
OP_EQUAL = 0x87
OP_EQUALVERIFY = 0x88
OP_HASH160 = 0xa9
OP_CHECKSIG = 0xac
OP_CHECKMULTISIG = 0xae

MAX_PUSH_LENGTH = 75

_NAMED_OPCODES = {
    OP_DUP: "OP_DUP",
    OP_EQUAL: "OP_EQUAL",
    OP_EQUALVERIFY: "OP_EQUALVERIFY",
    OP_CHECKSIG: "OP_CHECKSIG",
    OP_CHECKMULTISIG: "OP_CHECKMULTISIG",
    OP_HASH160: "OP_HASH160",
    OP_RETURN: "OP_RETURN",
}

# Only valid in the name -> byte direction
_ALIASES = {
    "OP_FALSE": OP_0,
    "OP_TRUE": OP_1,
}


def is_push_length(opcode: int) -> bool:
    """Return True if the byte is a direct push prefix (1-75)"""
    return 1 <= opcode <= MAX_PUSH_LENGTH


class OpcodeRegistry:
    """Bidirectional opcode table"""

    def __init__(self):
        names: Dict[int, str] = {OP_0: "OP_0"}
        for n in range(1, 17):
            names[OP_1 - 1 + n] = f"OP_{n}"
        names.update(_NAMED_OPCODES)

        codes = {name: code for code, name in names.items()}
        codes.update(_ALIASES)

        self._names = names
        self._codes = codes

    def name_of(self, opcode: int) -> Optional[str]:
        """Mnemonic for a byte, or None if the byte is not a known opcode"""
        return self._names.get(opcode)

    def code_of(self, name: str) -> Optional[int]:
        """Byte for a mnemonic (aliases included), or None if unknown"""
        return self._codes.get(name)

    def small_int(self, name: str) -> Optional[int]:
        """
        Value pushed by a numeric-constant mnemonic.

        Returns 0 for OP_0/OP_FALSE, 1-16 for OP_1..OP_16/OP_TRUE, and None
        for anything else.
        """
        code = self._codes.get(name)
        if code == OP_0:
            return 0
        if code is not None and OP_1 <= code <= OP_16:
            return code - (OP_1 - 1)
        return None

    def __contains__(self, name: str) -> bool:
        return name in self._codes

    def __len__(self) -> int:
        return len(self._names)


_registry: Optional[OpcodeRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> OpcodeRegistry:
    """Return the shared registry, building it on first call"""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = OpcodeRegistry()
    return _registry
