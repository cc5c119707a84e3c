"""
Script codec.

Converts between the raw byte encoding of a script and its ASM form (a
sequence of mnemonics and hex push-data tokens). A Script holds both forms
along with its template tag.
"""

import binascii
import re
from typing import List, Optional, Sequence, Tuple

from pydantic import BaseModel, ConfigDict

from stackscript.classify import ScriptType, classify
from stackscript.errors import DataTooLarge, FormatError, InvalidOpcode
from stackscript.opcodes import (
    MAX_PUSH_LENGTH,
    OP_1,
    OP_PUSHDATA1,
    OpcodeRegistry,
    get_registry,
    is_push_length,
)

_SMALL_INT_RE = re.compile(r"^OP_([0-9]+)$")
_HEX_RE = re.compile(r"[0-9a-fA-F]*")


def hex_to_bytes(text: str) -> bytes:
    """Decode a hex string, raising FormatError on bad input"""
    # bytes.fromhex skips whitespace, which would leave non-canonical hex
    if not _HEX_RE.fullmatch(text):
        raise FormatError(f"Invalid hex {text!r}: non-hex character")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise FormatError(f"Invalid hex {text!r}: {e}") from e


def disassemble_script(
    script: bytes,
    registry: Optional[OpcodeRegistry] = None
) -> List[str]:
    """
    Decode raw script bytes into ASM tokens.

    Bytes 0x01-0x4b push that many following bytes, which become one
    lowercase hex token; OP_PUSHDATA1 takes its length from the next byte.
    Known opcodes become their mnemonic and any other
    byte becomes its two-digit hex. A push whose declared length runs past
    the end of the script stops decoding; the tokens read so far are
    returned.

    Args:
        script: Raw script bytes
        registry: Opcode table (default: the shared registry)

    Returns:
        List of ASM tokens
    """
    registry = registry or get_registry()
    asm: List[str] = []

    i = 0
    while i < len(script):
        opcode = script[i]
        i += 1

        if is_push_length(opcode) or opcode == OP_PUSHDATA1:
            data_len = opcode
            if opcode == OP_PUSHDATA1:
                if i >= len(script):
                    break
                data_len = script[i]
                i += 1
            if i + data_len > len(script):
                break
            asm.append(binascii.hexlify(script[i:i + data_len]).decode())
            i += data_len
            continue

        name = registry.name_of(opcode)
        asm.append(name if name is not None else f"{opcode:02x}")

    return asm


def assemble_script(
    asm: Sequence[str],
    registry: Optional[OpcodeRegistry] = None
) -> bytes:
    """
    Encode ASM tokens into raw script bytes.

    Known mnemonics are emitted as their opcode byte. OP_1 through OP_16 are
    emitted as small-integer opcodes and any other OP_<n> is rejected.
    Everything else is read as hex push data.

    Args:
        asm: ASM tokens
        registry: Opcode table (default: the shared registry)

    Returns:
        Script bytes

    Raises:
        InvalidOpcode: OP_<n> with n outside 1..16
        DataTooLarge: Push data longer than 255 bytes
        FormatError: Token is not valid hex
    """
    registry = registry or get_registry()
    script = bytearray()

    for token in asm:
        code = registry.code_of(token)
        if code is not None:
            script.append(code)
            continue

        match = _SMALL_INT_RE.match(token)
        if match:
            n = int(match.group(1))
            if not 1 <= n <= 16:
                raise InvalidOpcode(f"Invalid small integer opcode {token}")
            script.append(OP_1 - 1 + n)
            continue

        data = hex_to_bytes(token)
        if len(data) <= MAX_PUSH_LENGTH:
            script.append(len(data))
        elif len(data) <= 0xff:
            script.append(OP_PUSHDATA1)
            script.append(len(data))
        else:
            raise DataTooLarge(f"Push of {len(data)} bytes exceeds 255")
        script.extend(data)

    return bytes(script)


class Script(BaseModel):
    """A parsed script in both its hex and ASM forms"""
    model_config = ConfigDict(frozen=True)

    hex: str
    asm: Tuple[str, ...]
    script_type: ScriptType = ScriptType.UNKNOWN

    @classmethod
    def from_hex(
        cls,
        text: str,
        registry: Optional[OpcodeRegistry] = None,
        strict: bool = True
    ) -> "Script":
        """Build a Script from hex text (any case)"""
        text = text.strip()
        asm = disassemble_script(hex_to_bytes(text), registry)
        return cls(
            hex=text.lower(),
            asm=tuple(asm),
            script_type=classify(asm, strict=strict),
        )

    @classmethod
    def from_asm(
        cls,
        text: str,
        registry: Optional[OpcodeRegistry] = None,
        strict: bool = True
    ) -> "Script":
        """Build a Script from whitespace-separated ASM tokens"""
        asm = text.split()
        script = assemble_script(asm, registry)
        return cls(
            hex=script.hex(),
            asm=tuple(asm),
            script_type=classify(asm, strict=strict),
        )

    def to_bytes(self) -> bytes:
        return bytes.fromhex(self.hex)

    def __str__(self) -> str:
        return " ".join(self.asm)


def parse(
    text: str,
    registry: Optional[OpcodeRegistry] = None,
    strict: bool = True
) -> Script:
    """
    Parse script text in either hex or ASM form.

    Text containing a space or "OP_" is treated as ASM, anything else as hex.

    Args:
        text: Script text
        registry: Opcode table (default: the shared registry)
        strict: Classify with exact template matching

    Returns:
        Parsed Script

    Raises:
        FormatError: Text is neither valid hex nor valid ASM
    """
    text = text.strip()
    if " " in text or "OP_" in text:
        return Script.from_asm(text, registry, strict)
    return Script.from_hex(text, registry, strict)
