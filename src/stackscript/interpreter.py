"""
Stack machine interpreter.

Runs the concatenated ASM of one or more scripts against a byte-vector
stack. Signature opcodes are placeholders that always succeed; no real
signature verification is performed.
"""

import hashlib
import logging
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Sequence

from pydantic import BaseModel

from stackscript.classify import ScriptType
from stackscript.errors import (
    FormatError,
    ScriptExecutionError,
    ScriptFailure,
    ScriptInvalid,
    StackUnderflow,
)
from stackscript.opcodes import (
    OP_1,
    OP_16,
    OP_CHECKMULTISIG,
    OP_CHECKSIG,
    OP_DUP,
    OP_EQUAL,
    OP_EQUALVERIFY,
    OP_HASH160,
    OP_RETURN,
    OpcodeRegistry,
    get_registry,
)
from stackscript.script import Script, hex_to_bytes, parse as parse_script

logger = logging.getLogger(__name__)

TRUE = b'\x01'
FALSE = b''

Stack = List[bytes]


def hash160(data: bytes) -> bytes:
    """Compute HASH160 (RIPEMD160(SHA256(data)))"""
    sha256_hash = hashlib.sha256(data).digest()
    return hashlib.new('ripemd160', sha256_hash).digest()


def is_valid(stack: Sequence[bytes]) -> bool:
    """A run succeeds if the stack is non-empty and its top is non-empty"""
    return len(stack) > 0 and len(stack[-1]) > 0


@dataclass
class ExecutionStep:
    """State after one token has been executed"""
    token: str
    remaining: List[str]
    stack: Stack


StepObserver = Callable[[ExecutionStep], None]


class VerificationResult(BaseModel):
    """Outcome of verifying an unlocking script against a locking script"""
    valid: bool
    stack: List[str]
    script_type: ScriptType
    error: Optional[str] = None
    error_kind: Optional[str] = None


def build_execution(
    locking: Script,
    unlocking: Script,
    registry: Optional[OpcodeRegistry] = None
) -> List[Script]:
    """
    Order the scripts to run for a locking/unlocking pair.

    For P2SH the last push of the unlocking script is decoded as the redeem
    script and runs after the unlocking script in place of the locking
    script. Everything else runs unlocking then locking.

    Raises:
        FormatError: P2SH with an empty unlocking script, or a redeem script
            that is not valid hex
    """
    if locking.script_type == ScriptType.P2SH:
        if not unlocking.asm:
            raise FormatError("P2SH unlocking script has no redeem script")
        redeem = Script.from_hex(unlocking.asm[-1], registry)
        logger.debug(f"Redeem script: {redeem}")
        return [unlocking, redeem]
    return [unlocking, locking]


class ScriptInterpreter:
    """Executes ASM token sequences"""

    def __init__(
        self,
        registry: Optional[OpcodeRegistry] = None,
        strict_stubs: bool = True,
        strict_templates: bool = True,
        push_small_ints: bool = False
    ):
        """
        Initialize the interpreter.

        Args:
            registry: Opcode table (default: the shared registry)
            strict_stubs: Raise StackUnderflow when OP_CHECKSIG is short of
                elements instead of popping whatever is there
            strict_templates: Classify with exact template matching
            push_small_ints: Make OP_0 push an empty element and OP_1..OP_16
                push 1..16. When False they are no-ops like every other
                unmodelled opcode.
        """
        self.registry = registry or get_registry()
        self.strict_stubs = strict_stubs
        self.strict_templates = strict_templates
        self.push_small_ints = push_small_ints

    @classmethod
    def from_config(cls, config) -> "ScriptInterpreter":
        """Build an interpreter from an InterpreterConfig"""
        return cls(
            strict_stubs=config.getboolean('strict_stubs'),
            strict_templates=config.getboolean('strict_templates'),
            push_small_ints=config.getboolean('push_small_ints'),
        )

    def parse(self, text: str) -> Script:
        """Parse script text using this interpreter's registry and settings"""
        return parse_script(text, self.registry, strict=self.strict_templates)

    def steps(self, scripts: Sequence[Script]) -> Iterator[ExecutionStep]:
        """
        Execute scripts one token at a time.

        The ASM of all scripts is concatenated in order. After each token an
        ExecutionStep is yielded; execution resumes when the consumer asks for
        the next step. The stack in each step is a copy.

        Raises:
            ScriptExecutionError: A subclass describing why execution stopped
            FormatError: A push-data token was not valid hex
        """
        remaining: List[str] = [token for s in scripts for token in s.asm]
        stack: Stack = []

        while remaining:
            token = remaining.pop(0)
            try:
                self._execute(token, stack)
            except ScriptExecutionError as e:
                e.remaining = list(remaining)
                e.stack = list(stack)
                logger.debug(f"{token} failed: {e}")
                raise

            logger.debug(f"{token} -> stack depth {len(stack)}")
            yield ExecutionStep(token, list(remaining), list(stack))

    def run(
        self,
        scripts: Sequence[Script],
        observer: Optional[StepObserver] = None
    ) -> Stack:
        """
        Execute scripts to completion.

        Args:
            scripts: Scripts to run, in order
            observer: Called with each ExecutionStep

        Returns:
            Final stack (bottom to top)
        """
        stack: Stack = []
        for step in self.steps(scripts):
            stack = step.stack
            if observer is not None:
                observer(step)
        return stack

    def verify(
        self,
        locking: Script,
        unlocking: Script,
        observer: Optional[StepObserver] = None
    ) -> VerificationResult:
        """
        Verify an unlocking script against a locking script.

        Execution failures are reported in the result rather than raised, so
        callers can tell a script that evaluated false (error is None) from
        one that could not complete.

        Args:
            locking: Locking script
            unlocking: Unlocking script
            observer: Called with each ExecutionStep

        Returns:
            VerificationResult
        """
        scripts = build_execution(locking, unlocking, self.registry)
        try:
            stack = self.run(scripts, observer)
        except ScriptExecutionError as e:
            logger.info(f"Script execution failed: {e}")
            return VerificationResult(
                valid=False,
                stack=[item.hex() for item in e.stack],
                script_type=locking.script_type,
                error=str(e),
                error_kind=type(e).__name__,
            )

        valid = is_valid(stack)
        logger.info(f"Script {'valid' if valid else 'invalid'} ({locking.script_type.value})")
        return VerificationResult(
            valid=valid,
            stack=[item.hex() for item in stack],
            script_type=locking.script_type,
        )

    def _execute(self, token: str, stack: Stack) -> None:
        """Apply a single token to the stack"""
        code = self.registry.code_of(token)

        if code is None:
            stack.append(hex_to_bytes(token))
            return

        if code == OP_DUP:
            self._require(stack, 1, token)
            stack.append(stack[-1])

        elif code == OP_HASH160:
            self._require(stack, 1, token)
            stack.append(hash160(stack.pop()))

        elif code == OP_EQUAL:
            self._require(stack, 2, token)
            b = stack.pop()
            a = stack.pop()
            stack.append(TRUE if a == b else FALSE)

        elif code == OP_EQUALVERIFY:
            self._require(stack, 2, token)
            b = stack.pop()
            a = stack.pop()
            if a != b:
                raise ScriptFailure("OP_EQUALVERIFY failed")

        elif code == OP_CHECKSIG:
            # Placeholder: signature and pubkey are popped, never checked
            if self.strict_stubs:
                self._require(stack, 2, token)
            del stack[-2:]
            stack.append(TRUE)

        elif code == OP_CHECKMULTISIG:
            self._check_multisig(stack)

        elif code == OP_RETURN:
            raise ScriptInvalid("OP_RETURN makes script invalid")

        elif self.push_small_ints:
            value = self.registry.small_int(token)
            if value is not None:
                stack.append(bytes([value]) if value else FALSE)

        # Other known opcodes are not modelled and only consume their token

    def _check_multisig(self, stack: Stack) -> None:
        """
        Placeholder OP_CHECKMULTISIG.

        Pops a count and that many signatures, then a count and that many
        keys, then one more element. The extra pop reproduces the off-by-one
        of the reference implementation and must be present on the stack.
        """
        self._require(stack, 1, "OP_CHECKMULTISIG")
        n_sigs = self._read_count(stack.pop())
        self._require(stack, n_sigs, "OP_CHECKMULTISIG")
        del stack[len(stack) - n_sigs:]

        self._require(stack, 1, "OP_CHECKMULTISIG")
        n_keys = self._read_count(stack.pop())
        self._require(stack, n_keys, "OP_CHECKMULTISIG")
        del stack[len(stack) - n_keys:]

        self._require(stack, 1, "OP_CHECKMULTISIG")
        stack.pop()
        stack.append(TRUE)

    @staticmethod
    def _read_count(item: bytes) -> int:
        """
        Decode a multisig count element.

        Accepts either the value pushed by OP_0..OP_16 or the encoded opcode
        byte itself pushed as data (0x51-0x60).
        """
        if len(item) == 0:
            return 0
        if len(item) == 1:
            if OP_1 <= item[0] <= OP_16:
                return item[0] - (OP_1 - 1)
            if item[0] <= 16:
                return item[0]
        raise ScriptFailure(f"Invalid multisig count {item.hex()}")

    @staticmethod
    def _require(stack: Stack, count: int, token: str) -> None:
        if len(stack) < count:
            raise StackUnderflow(
                f"{token} needs {count} stack element(s), found {len(stack)}"
            )
