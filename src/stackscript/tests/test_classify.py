"""
Test script template classification.
"""

import unittest
import sys
from pathlib import Path

# Add src to path
src_dir = Path(__file__).parent.parent.parent
sys.path.insert(0, str(src_dir))

from stackscript.classify import ScriptType, classify

HASH = "89abcdefabbaabbaabbaabbaabbaabbaabbaabba"
PUBKEY = "02" + "11" * 32


class TestClassify(unittest.TestCase):
    """Test classify() with exact template matching"""

    def test_p2pk(self):
        self.assertEqual(classify([PUBKEY, "OP_CHECKSIG"]), ScriptType.P2PK)

    def test_p2pkh(self):
        asm = ["OP_DUP", "OP_HASH160", HASH, "OP_EQUALVERIFY", "OP_CHECKSIG"]
        self.assertEqual(classify(asm), ScriptType.P2PKH)

    def test_p2sh(self):
        self.assertEqual(classify(["OP_HASH160", HASH, "OP_EQUAL"]), ScriptType.P2SH)

    def test_p2ms(self):
        asm = ["OP_2", "aa", "bb", "cc", "OP_3", "OP_CHECKMULTISIG"]
        self.assertEqual(classify(asm), ScriptType.P2MS)

    def test_p2ms_ignores_earlier_content(self):
        self.assertEqual(classify(["OP_CHECKMULTISIG"]), ScriptType.P2MS)
        self.assertEqual(classify(["OP_RETURN", "OP_CHECKMULTISIG"]), ScriptType.P2MS)

    def test_return(self):
        self.assertEqual(classify(["OP_RETURN"]), ScriptType.RETURN)
        self.assertEqual(classify(["OP_RETURN", "68656c6c6f"]), ScriptType.RETURN)

    def test_wildcards_are_not_inspected(self):
        """Key and hash slots may hold any token"""
        self.assertEqual(classify(["OP_DUP", "OP_CHECKSIG"]), ScriptType.P2PK)
        asm = ["OP_DUP", "OP_HASH160", "OP_DUP", "OP_EQUALVERIFY", "OP_CHECKSIG"]
        self.assertEqual(classify(asm), ScriptType.P2PKH)

    def test_fixed_positions_are_checked(self):
        """A right-length sequence with the wrong mnemonics is unknown"""
        self.assertEqual(classify(["aa", "bb"]), ScriptType.UNKNOWN)
        self.assertEqual(classify(["aa", "bb", "cc", "dd", "ee"]), ScriptType.UNKNOWN)
        self.assertEqual(classify(["OP_HASH160", HASH, "OP_EQUALVERIFY"]), ScriptType.UNKNOWN)
        asm = ["OP_DUP", "OP_HASH160", HASH, "OP_EQUAL", "OP_CHECKSIG"]
        self.assertEqual(classify(asm), ScriptType.UNKNOWN)

    def test_unknown(self):
        self.assertEqual(classify([]), ScriptType.UNKNOWN)
        self.assertEqual(classify(["OP_DUP"]), ScriptType.UNKNOWN)
        self.assertEqual(classify(["aa", "OP_RETURN"]), ScriptType.UNKNOWN)

    def test_priority(self):
        """Earlier rules win over later ones"""
        # Two tokens ending in OP_CHECKSIG, starting with OP_RETURN
        self.assertEqual(classify(["OP_RETURN", "OP_CHECKSIG"]), ScriptType.P2PK)

    def test_deterministic(self):
        asm = ["OP_HASH160", HASH, "OP_EQUAL"]
        self.assertEqual({classify(asm) for _ in range(10)}, {ScriptType.P2SH})

    def test_every_sequence_gets_one_tag(self):
        tokens = ["OP_DUP", "OP_HASH160", "OP_EQUAL", "OP_EQUALVERIFY",
                  "OP_CHECKSIG", "OP_CHECKMULTISIG", "OP_RETURN", "aa"]
        for length in range(0, 7):
            for start in range(len(tokens)):
                asm = [tokens[(start + i) % len(tokens)] for i in range(length)]
                self.assertIsInstance(classify(asm), ScriptType)


class TestClassifyShapeOnly(unittest.TestCase):
    """Test classify() with strict=False"""

    def test_length_only(self):
        self.assertEqual(classify(["aa", "bb"], strict=False), ScriptType.P2PK)
        self.assertEqual(classify(["aa", "bb", "cc"], strict=False), ScriptType.P2SH)
        asm = ["aa", "bb", "cc", "dd", "ee"]
        self.assertEqual(classify(asm, strict=False), ScriptType.P2PKH)

    def test_multisig_still_checked(self):
        asm = ["OP_1", "aa", "OP_1", "OP_CHECKMULTISIG"]
        self.assertEqual(classify(asm, strict=False), ScriptType.P2MS)

    def test_any_other_non_empty_is_return(self):
        self.assertEqual(classify(["OP_DUP"], strict=False), ScriptType.RETURN)
        self.assertEqual(classify([], strict=False), ScriptType.UNKNOWN)


if __name__ == '__main__':
    unittest.main()
