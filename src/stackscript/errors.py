"""Exceptions raised while parsing and executing scripts."""

from typing import List, Optional, Sequence


class ScriptError(ValueError):
    """Base class for all script errors"""


class FormatError(ScriptError):
    """Malformed hex or a token that is neither an opcode nor push data"""


class InvalidOpcode(ScriptError):
    """OP_<n> mnemonic outside the numeric-constant range"""


class DataTooLarge(ScriptError):
    """Push payload longer than OP_PUSHDATA1 can describe"""


class ScriptExecutionError(ScriptError):
    """
    Execution aborted before the instruction list was exhausted.

    Carries the tokens that were still pending and the stack as it stood
    when the failing opcode ran, so the failure point can be reconstructed.
    """

    def __init__(
        self,
        message: str,
        remaining: Optional[Sequence[str]] = None,
        stack: Optional[Sequence[bytes]] = None
    ):
        super().__init__(message)
        self.remaining: List[str] = list(remaining or [])
        self.stack: List[bytes] = list(stack or [])


class StackUnderflow(ScriptExecutionError):
    """An opcode needed more stack elements than were present"""


class ScriptFailure(ScriptExecutionError):
    """A verifying opcode failed"""


class ScriptInvalid(ScriptExecutionError):
    """OP_RETURN was reached"""
