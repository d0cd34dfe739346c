"""Plaintext Mersenne reduction, the reference for the encrypted engine.

Only shifts, small-constant multiplications and additions are used, i.e. the
same operations the encrypted engine has available.
"""
import logging

from mersenne.mersenne_coeff import MersenneModulus, mersenne_modulus
from util.number_theory import to_int

logger = logging.getLogger(__name__)


def _as_modulus(p):
    if isinstance(p, MersenneModulus):
        return p
    return mersenne_modulus(to_int(p))


def reduce_native(x, p):
    """Calculates x mod p by folding with the Mersenne coefficients of p.

    Writes x = a*2^n + b and replaces it with a*(2^m + c) + b until the value
    drops below p. Each fold removes about n - bits(2^m + c) bits, so the
    number of folds is logarithmic in the size of x.

    Args:
        x (int): Non-negative value to reduce.
        p (int or MersenneModulus): Modulus.

    Returns:
        x mod p.
    """
    x = to_int(x)
    if x < 0:
        raise ValueError('Cannot reduce negative value ' + str(x))
    modulus = _as_modulus(p)
    n = modulus.n
    multiplier = modulus.double_gap.multiplier
    # Every fold subtracts a*p, so the loop ends
    while x >= modulus.p:
        a = x >> n
        b = x - (a << n)
        if a == 0:
            # x < 2^n < 2p: folding is the identity here, one subtraction finishes
            return x - modulus.p

        # x mod p = (2^m + c)*a + b
        x = a * multiplier + b
        logger.debug("bits: %d", x.bit_length())
    return x


def mul_mod_native(x, y, p):
    """Calculates x * y mod p with the built-in remainder."""
    return (to_int(x) * to_int(y)) % to_int(p)


def mul_mod_mersenne_native(x, y, p):
    """Calculates x * y mod p with Mersenne folding."""
    return reduce_native(to_int(x) * to_int(y), p)
