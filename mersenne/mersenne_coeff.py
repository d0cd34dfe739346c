"""A module to describe a modulus in generalized Mersenne form.

A modulus p is written against the power of two just above it,
p = 2^n - c, or with one more power-of-two term, p = 2^n - 2^m - c. Since
2^n = c (mod p), the high part of a value can be folded onto its low part
with a multiplication by the small constant c (or 2^m + c) instead of a
division. That only converges quickly when c is small, so the gap is
required to be at most 2^ceil(n/2).
"""
import functools
import logging
from dataclasses import dataclass

from util.number_theory import ilog2_ceil, ilog2_floor, is_prime, to_int

logger = logging.getLogger(__name__)


class InvalidModulusError(ValueError):
    """Raised when a modulus cannot be used for Mersenne reduction."""


def mersenne_coeff(coeff):
    """Calculates n, p, 2^n and c from a sparse exponent list.

    Args:
        coeff (list): Exponents [n_0, n_1, ..., n_{k-1}, n_k] describing
            p = 2^n_0 - 2^n_1 - ... - 2^n_{k-1} - n_k. The last entry is a
            plain constant, not an exponent.

    Returns:
        A tuple (n, p, q, c) with n = n_0, q = 2^n and c = q - p.
    """
    coeff = [to_int(e) for e in coeff]
    if len(coeff) < 2:
        raise InvalidModulusError('Expected at least two coefficients, got ' + str(coeff))
    n = coeff[0]
    q = 1 << n
    p = q
    for exponent in coeff[1:-1]:
        p -= 1 << exponent
    p -= coeff[-1]
    if p <= 0:
        raise InvalidModulusError('Coefficients ' + str(coeff) + ' describe a non-positive modulus')
    return n, p, q, q - p


def mersenne_coeff_single(p):
    """Calculates n, c such that p = 2^n - c.

    Args:
        p (int): Modulus, as a Python or NumPy integer.

    Returns:
        A tuple (n, c) with n = ceil(log2(p)) and c = 2^n - p.
    """
    p = to_int(p)
    if p <= 0:
        raise InvalidModulusError('Modulus must be positive, got ' + str(p))
    n = ilog2_ceil(p)
    return n, (1 << n) - p


def mersenne_coeff_double(p):
    """Calculates n, m, c such that p = 2^n - 2^m - c.

    Args:
        p (int): Modulus, as a Python or NumPy integer.

    Returns:
        A tuple (n, m, c). m is None when the gap 2^n - p is 0 or 1, in which
        case c is that gap.
    """
    n, gap = mersenne_coeff_single(p)
    if gap <= 1:
        return n, None, gap
    m = ilog2_floor(gap)
    return n, m, gap - (1 << m)


@dataclass(frozen=True)
class SingleGap:
    """Gap of p = 2^n - c."""

    c: int

    @property
    def multiplier(self):
        """The constant 2^n reduces to modulo p."""
        return self.c


@dataclass(frozen=True)
class DoubleGap:
    """Gap of p = 2^n - 2^m - c."""

    m: int
    c: int

    @property
    def multiplier(self):
        """The constant 2^n reduces to modulo p."""
        return (1 << self.m) + self.c


class MersenneModulus:
    """A modulus together with its generalized Mersenne coefficients.

    Built once per modulus at setup time and shared by every reduction.

    Attributes:
        p (int): The modulus.
        n (int): ceil(log2(p)).
        c (int): Single-term gap 2^n - p.
        single_gap (SingleGap): Gap for p = 2^n - c.
        double_gap (SingleGap or DoubleGap): Gap for p = 2^n - 2^m - c, or
            a SingleGap when the gap has no second term.
    """

    def __init__(self, p):
        """Derives and validates the coefficients of p.

        Args:
            p (int): Modulus, as a Python or NumPy integer.

        Raises:
            InvalidModulusError: If p < 2 or its gap exceeds 2^ceil(n/2).
        """
        p = to_int(p)
        if p < 2:
            raise InvalidModulusError('Modulus must be at least 2, got ' + str(p))
        self.p = p
        self.n, self.c = mersenne_coeff_single(p)
        if self.c > 1 << ((self.n + 1) // 2):
            raise InvalidModulusError('Gap 2^' + str(self.n) + ' - p = ' + str(self.c)
                                      + ' is too large for Mersenne reduction')

        self.single_gap = SingleGap(self.c)
        _, m, c = mersenne_coeff_double(p)
        self.double_gap = SingleGap(c) if m is None else DoubleGap(m, c)

        if not is_prime(p):
            logger.warning("modulus %d is not prime", p)

    @classmethod
    def from_exponents(cls, coeff):
        """Builds the modulus p = 2^n_0 - 2^n_1 - ... - n_k from its exponent list."""
        _, p, _, _ = mersenne_coeff(coeff)
        return cls(p)

    def gap(self, two_term=False):
        """Returns the gap form to reduce with.

        Args:
            two_term (bool): Whether to use the p = 2^n - 2^m - c form.
        """
        return self.double_gap if two_term else self.single_gap

    def __repr__(self):
        return 'MersenneModulus(p=' + str(self.p) + ', n=' + str(self.n) + ', c=' + str(self.c) + ')'


@functools.lru_cache(maxsize=None)
def mersenne_modulus(p):
    """Returns the cached MersenneModulus of p."""
    return MersenneModulus(p)
