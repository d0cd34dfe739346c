"""Tests for plaintext Mersenne reduction."""
import random
import unittest

from mersenne.mersenne_coeff import InvalidModulusError, MersenneModulus
from mersenne.mersenne_native import mul_mod_mersenne_native, mul_mod_native, reduce_native

MODULI = [
    127,
    251,
    1013,
    2**61 - 1,
    2**127 - 1,
    2**192 - 2**64 - 1,
    2**255 - 19,
    2**256 - 2**32 - 977,
    2**521 - 1,
]


class TestReduceNative(unittest.TestCase):
    """reduce_native agrees with the built-in remainder."""

    def setUp(self):
        self.rng = random.Random(1234)

    def test_mul_mod_251(self):
        self.assertEqual(reduce_native(249 * 248, 251), (249 * 248) % 251)
        self.assertEqual(reduce_native(249 * 248, 251), 6)
        self.assertEqual(mul_mod_mersenne_native(249, 248, 251), mul_mod_native(249, 248, 251))

    def test_products_of_residues(self):
        for p in MODULI:
            for _ in range(50):
                x = self.rng.randrange(p)
                y = self.rng.randrange(p)
                self.assertEqual(mul_mod_mersenne_native(x, y, p), (x * y) % p)

    def test_wide_inputs(self):
        for p in MODULI:
            n = (p - 1).bit_length()
            for _ in range(20):
                x = self.rng.getrandbits(4 * n)
                self.assertEqual(reduce_native(x, p), x % p)

    def test_very_wide_input(self):
        """Thousands of folds must not hit the recursion limit."""
        x = 2**10000 + 12345
        self.assertEqual(reduce_native(x, 127), x % 127)

    def test_fold_count_bounded(self):
        """Each fold drops at least n - bits(multiplier) - 1 bits until x < 2^(n+1)."""
        for p in (2**255 - 19, 2**256 - 2**32 - 977):
            modulus = MersenneModulus(p)
            n = modulus.n
            shrink = n - modulus.double_gap.multiplier.bit_length() - 1
            for _ in range(10):
                x = self.rng.getrandbits(4 * n) | (1 << (4 * n - 1))
                with self.assertLogs('mersenne.mersenne_native', level='DEBUG') as logs:
                    self.assertEqual(reduce_native(x, p), x % p)
                folds = sum(1 for record in logs.records
                            if record.getMessage().startswith('bits:'))
                self.assertLessEqual(folds, -(-(x.bit_length() - n) // shrink) + 3)

    def test_boundaries(self):
        for p in MODULI:
            n = (p - 1).bit_length()
            for x in (0, 1, p - 1, p, p + 1, 2**n - 1, 2**n, 2 * p - 1, p * p - 1):
                self.assertEqual(reduce_native(x, p), x % p)

    def test_already_reduced(self):
        self.assertEqual(reduce_native(0, 251), 0)
        self.assertEqual(reduce_native(250, 251), 250)

    def test_between_p_and_power_of_two(self):
        """Values in [p, 2^n) have no high part to fold."""
        for x in range(251, 256):
            self.assertEqual(reduce_native(x, 251), x - 251)

    def test_descriptor_argument(self):
        modulus = MersenneModulus(2**255 - 19)
        self.assertEqual(reduce_native(2**300, modulus), 2**300 % (2**255 - 19))

    def test_negative_input(self):
        with self.assertRaises(ValueError):
            reduce_native(-1, 251)

    def test_invalid_modulus(self):
        with self.assertRaises(InvalidModulusError):
            reduce_native(1000, 156)


if __name__ == '__main__':
    unittest.main()
