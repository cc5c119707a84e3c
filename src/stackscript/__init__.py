"""Stackscript - a minimal transaction script decoder, classifier and interpreter."""

__version__ = "0.1.0"

from stackscript.classify import ScriptType, classify
from stackscript.errors import (
    DataTooLarge,
    FormatError,
    InvalidOpcode,
    ScriptError,
    ScriptExecutionError,
    ScriptFailure,
    ScriptInvalid,
    StackUnderflow,
)
from stackscript.interpreter import ScriptInterpreter, VerificationResult, is_valid
from stackscript.opcodes import OpcodeRegistry, get_registry
from stackscript.script import Script, parse

__all__ = [
    "__version__",
    "ScriptType",
    "classify",
    "DataTooLarge",
    "FormatError",
    "InvalidOpcode",
    "ScriptError",
    "ScriptExecutionError",
    "ScriptFailure",
    "ScriptInvalid",
    "StackUnderflow",
    "ScriptInterpreter",
    "VerificationResult",
    "is_valid",
    "OpcodeRegistry",
    "get_registry",
    "Script",
    "parse",
]
