"""
Test the opcode registry.
"""

import unittest
import sys
from pathlib import Path

# Add src to path
src_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(src_dir))

from stackscript.opcodes import OpcodeRegistry, get_registry, is_push_length


class TestOpcodeRegistry(unittest.TestCase):
    """Test OpcodeRegistry"""

    def setUp(self):
        self.registry = OpcodeRegistry()

    def test_named_opcodes(self):
        """Test byte -> mnemonic for the behavioral opcodes"""
        expected = {
            0x76: "OP_DUP",
            0x87: "OP_EQUAL",
            0x88: "OP_EQUALVERIFY",
            0xa9: "OP_HASH160",
            0xac: "OP_CHECKSIG",
            0xae: "OP_CHECKMULTISIG",
            0x6a: "OP_RETURN",
        }
        for code, name in expected.items():
            self.assertEqual(self.registry.name_of(code), name)
            self.assertEqual(self.registry.code_of(name), code)

    def test_numeric_constants(self):
        """Test OP_0 and OP_1 through OP_16"""
        self.assertEqual(self.registry.name_of(0x00), "OP_0")
        for n in range(1, 17):
            self.assertEqual(self.registry.name_of(0x50 + n), f"OP_{n}")
            self.assertEqual(self.registry.code_of(f"OP_{n}"), 0x50 + n)
            self.assertEqual(self.registry.small_int(f"OP_{n}"), n)
        self.assertEqual(self.registry.small_int("OP_0"), 0)
        self.assertIsNone(self.registry.small_int("OP_DUP"))

    def test_aliases_are_reverse_only(self):
        """OP_FALSE and OP_TRUE resolve to bytes but never decode back"""
        self.assertEqual(self.registry.code_of("OP_FALSE"), 0x00)
        self.assertEqual(self.registry.code_of("OP_TRUE"), 0x51)
        self.assertEqual(self.registry.name_of(0x00), "OP_0")
        self.assertEqual(self.registry.name_of(0x51), "OP_1")
        self.assertIn("OP_TRUE", self.registry)
        self.assertEqual(self.registry.small_int("OP_TRUE"), 1)

    def test_unknown_lookups(self):
        """Unknown bytes and names return None"""
        self.assertIsNone(self.registry.name_of(0xff))
        self.assertIsNone(self.registry.name_of(0x4c))
        self.assertIsNone(self.registry.code_of("deadbeef"))
        self.assertIsNone(self.registry.code_of("OP_NOP"))

    def test_registry_size(self):
        """OP_0, sixteen small integers and seven named opcodes"""
        self.assertEqual(len(self.registry), 24)

    def test_shared_registry(self):
        """get_registry always returns the same instance"""
        self.assertIs(get_registry(), get_registry())

    def test_is_push_length(self):
        self.assertFalse(is_push_length(0))
        self.assertTrue(is_push_length(1))
        self.assertTrue(is_push_length(75))
        self.assertFalse(is_push_length(76))


if __name__ == '__main__':
    unittest.main()
