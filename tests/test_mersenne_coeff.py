"""Tests for deriving generalized Mersenne coefficients."""
import unittest

import numpy as np

from mersenne.mersenne_coeff import (DoubleGap, InvalidModulusError, MersenneModulus,
                                     SingleGap, mersenne_coeff, mersenne_coeff_double,
                                     mersenne_coeff_single, mersenne_modulus)

SECP256K1_P = 2**256 - 2**32 - 977
P192 = 2**192 - 2**64 - 1


class TestMersenneCoeff(unittest.TestCase):
    """Coefficient derivation for single-term, two-term and sparse forms."""

    def test_single_term(self):
        self.assertEqual(mersenne_coeff_single(127), (7, 1))
        self.assertEqual(mersenne_coeff_single(251), (8, 5))
        self.assertEqual(mersenne_coeff_single(2**255 - 19), (255, 19))
        self.assertEqual(mersenne_coeff_single(SECP256K1_P), (256, 2**32 + 977))

    def test_single_term_numpy_integer(self):
        """Fixed-width plaintext integers are accepted."""
        self.assertEqual(mersenne_coeff_single(np.uint8(251)), (8, 5))
        self.assertEqual(mersenne_coeff_single(np.uint64(2**61 - 1)), (61, 1))

    def test_power_of_two(self):
        self.assertEqual(mersenne_coeff_single(256), (8, 0))
        self.assertEqual(mersenne_coeff_double(256), (8, None, 0))

    def test_double_term(self):
        self.assertEqual(mersenne_coeff_double(251), (8, 2, 1))
        self.assertEqual(mersenne_coeff_double(SECP256K1_P), (256, 32, 977))
        self.assertEqual(mersenne_coeff_double(P192), (192, 64, 1))
        self.assertEqual(mersenne_coeff_double(1013), (10, 3, 3))

    def test_double_term_degenerate_gap(self):
        """A gap of one has no second power-of-two term."""
        self.assertEqual(mersenne_coeff_double(127), (7, None, 1))

    def test_sparse_exponents(self):
        n, p, q, c = mersenne_coeff([256, 32, 977])
        self.assertEqual(n, 256)
        self.assertEqual(p, SECP256K1_P)
        self.assertEqual(q, 2**256)
        self.assertEqual(c, 2**32 + 977)

        self.assertEqual(mersenne_coeff([192, 64, 1]), (192, P192, 2**192, 2**64 + 1))
        self.assertEqual(mersenne_coeff([7, 1]), (7, 127, 128, 1))

    def test_invalid_inputs(self):
        for p in (0, -5):
            with self.assertRaises(InvalidModulusError):
                mersenne_coeff_single(p)
            with self.assertRaises(InvalidModulusError):
                mersenne_coeff_double(p)
        with self.assertRaises(InvalidModulusError):
            mersenne_coeff([8])
        with self.assertRaises(InvalidModulusError):
            mersenne_coeff([2, 3, 0])

    def test_invalid_modulus_is_value_error(self):
        self.assertTrue(issubclass(InvalidModulusError, ValueError))


class TestMersenneModulus(unittest.TestCase):
    """Setup-time validation of a modulus descriptor."""

    def test_gap_forms(self):
        modulus = MersenneModulus(251)
        self.assertEqual(modulus.n, 8)
        self.assertEqual(modulus.c, 5)
        self.assertEqual(modulus.single_gap, SingleGap(5))
        self.assertEqual(modulus.double_gap, DoubleGap(2, 1))
        self.assertEqual(modulus.gap(), SingleGap(5))
        self.assertEqual(modulus.gap(two_term=True).multiplier, 5)

    def test_degenerate_double_gap(self):
        modulus = MersenneModulus(127)
        self.assertEqual(modulus.double_gap, SingleGap(1))

    def test_from_exponents(self):
        modulus = MersenneModulus.from_exponents([256, 32, 977])
        self.assertEqual(modulus.p, SECP256K1_P)
        self.assertEqual(modulus.double_gap, DoubleGap(32, 977))
        self.assertEqual(modulus.double_gap.multiplier, modulus.c)

    def test_gap_too_large(self):
        """2^8 - 156 = 100 is above 2^4."""
        with self.assertRaises(InvalidModulusError):
            MersenneModulus(156)

    def test_too_small(self):
        with self.assertRaises(InvalidModulusError):
            MersenneModulus(1)

    def test_non_prime_warns(self):
        with self.assertLogs('mersenne.mersenne_coeff', level='WARNING'):
            MersenneModulus(256)

    def test_cached_descriptor(self):
        self.assertIs(mersenne_modulus(251), mersenne_modulus(251))


if __name__ == '__main__':
    unittest.main()
