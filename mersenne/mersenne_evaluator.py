"""A module to reduce and multiply encrypted radix integers modulo a generalized Mersenne prime.

Encrypted values cannot be compared with p, so the plaintext loop "fold
until below p" is unrolled into a fixed sequence of three folds. The block
width kept after each fold is derived from public data only, the gap
multiplier and the input width: wide enough to hold the largest value the
fold can produce at that point. The value left after the third fold lies in
[0, 2p); a conditional subtraction built from the same shift/add/multiply
primitives brings it into [0, p) without looking at it.

Widths below are in blocks; NB is the residue width.
"""
import logging
import random
import time
from concurrent.futures import ThreadPoolExecutor

from mersenne.mersenne_coeff import DoubleGap, MersenneModulus, mersenne_modulus
from util.block_decomposition import blocks_for_bits
from util.number_theory import to_int

logger = logging.getLogger(__name__)


class MersenneEvaluator:
    """Modular reduction and multiplication of radix ciphertexts.

    Attributes:
        evaluator (RadixEvaluator): Evaluation context, used read-only.
        modulus (MersenneModulus): Modulus and its coefficients.
        num_blocks (int): Residue width NB, blocks needed for values below p.
        gap (SingleGap or DoubleGap): Gap form used by the folds.
        gap_blocks (int): Blocks needed for the gap multiplier.
    """

    def __init__(self, evaluator, modulus, num_blocks, two_term=False):
        """Fixes the modulus, the residue width and the gap form.

        Args:
            evaluator (RadixEvaluator): Evaluation context.
            modulus (int or MersenneModulus): Modulus p.
            num_blocks (int): Residue width NB.
            two_term (bool): Fold with p = 2^n - 2^m - c instead of p = 2^n - c.

        Raises:
            InvalidModulusError: If p is not a usable Mersenne modulus.
            ValueError: If NB blocks cannot hold n bits, or if three folds
                cannot bring every 2*NB-block value below 2p.
        """
        if not isinstance(modulus, MersenneModulus):
            modulus = mersenne_modulus(to_int(modulus))
        bits_per_block = evaluator.params.message_bits
        if num_blocks * bits_per_block < modulus.n:
            raise ValueError(str(num_blocks) + ' blocks of ' + str(bits_per_block)
                             + ' bits cannot hold residues modulo ' + str(modulus.p))

        self.evaluator = evaluator
        self.modulus = modulus
        self.num_blocks = num_blocks
        self.gap = modulus.gap(two_term)
        self.gap_blocks = blocks_for_bits(self.gap.multiplier.bit_length(), bits_per_block)

        # Pass widths also follow the largest value each pass can produce from
        # a full 2*NB-block input, which is wider than 2n bits once
        # NB*bits_per_block > n.
        bound = self._fold_bound((1 << (2 * num_blocks * bits_per_block)) - 1)
        self._first_blocks = max(num_blocks + self.gap_blocks + 1, self._blocks_for(bound))
        self._second_input_blocks = max(num_blocks + self.gap_blocks, self._blocks_for(bound))
        bound = self._fold_bound(bound)
        self._second_blocks = max(num_blocks + 1, self._blocks_for(bound))
        bound = self._fold_bound(bound)
        self._third_blocks = max(2 + self.gap_blocks, self._blocks_for(bound))
        if bound >= 2 * modulus.p:
            raise ValueError('Three folds cannot reduce ' + str(2 * num_blocks)
                             + '-block values below 2p for p = ' + str(modulus.p)
                             + '; use fewer blocks')
        self._fast_blocks = max(2 + self.gap_blocks,
                                self._blocks_for(self._fold_bound(2 * modulus.p - 1)))

    def _blocks_for(self, bound):
        return blocks_for_bits(bound.bit_length(), self.evaluator.params.message_bits)

    def _fold_bound(self, bound):
        """Largest value one fold returns for inputs in [0, bound]."""
        n = self.modulus.n
        multiplier = self.gap.multiplier
        high = bound >> n
        if high == 0:
            return bound
        # either a is at its maximum with the largest b left, or a is one
        # less and b is 2^n - 1
        return max(multiplier * high + bound - (high << n),
                   multiplier * (high - 1) + (1 << n) - 1)

    def _fit(self, ciphertext, num_blocks):
        """Trims or zero-extends the most significant blocks to num_blocks."""
        excess = ciphertext.num_blocks - num_blocks
        if excess > 0:
            return self.evaluator.trim_radix_blocks_msb(ciphertext, excess)
        return self.evaluator.extend_radix_with_trivial_zero_blocks_msb(ciphertext, -excess)

    def _multiply_gap(self, high):
        evaluator = self.evaluator
        if isinstance(self.gap, DoubleGap):
            # c*a and a << m are independent; run them side by side and join
            with ThreadPoolExecutor(max_workers=2) as executor:
                shifted = executor.submit(evaluator.scalar_left_shift, high, self.gap.m)
                scaled = executor.submit(evaluator.scalar_mul, high, self.gap.c)
                return evaluator.add(scaled.result(), shifted.result())
        return evaluator.scalar_mul(high, self.gap.c)

    def _fold(self, x, high_blocks):
        """One split-and-combine step: x = a*2^n + b becomes (2^m + c)*a + b.

        Args:
            x (RadixCiphertext): Value to fold.
            high_blocks (int): Width a is fitted to; it must hold a times the
                gap multiplier.

        Returns:
            A RadixCiphertext congruent to x modulo p.
        """
        evaluator = self.evaluator
        n = self.modulus.n
        high = evaluator.scalar_right_shift(x, n)
        low = evaluator.sub(x, evaluator.scalar_left_shift(high, n))
        high = self._fit(high, high_blocks)
        # b < 2^n always fits in NB blocks
        low = self._fit(low, self.num_blocks)
        return evaluator.add(self._multiply_gap(high), low)

    def _conditional_subtract(self, x):
        """Maps x in [0, 2p) to x mod p with a fixed sequence of operations.

        x + (2^n - p) reaches 2^n exactly when x >= p, so bit n of that sum is
        the number of times p has to be subtracted. Adding that bit times
        2^n - p and dropping bit n subtracts p.
        """
        evaluator = self.evaluator
        n = self.modulus.n
        c = self.modulus.c
        # NB + 1 blocks hold 2p + c < 2^(n+1)
        x = self._fit(x, self.num_blocks + 1)
        overflow = evaluator.scalar_right_shift(evaluator.scalar_add(x, c), n)
        x = evaluator.add(x, evaluator.scalar_mul(overflow, c))
        x = evaluator.sub(x, evaluator.scalar_left_shift(evaluator.scalar_right_shift(x, n), n))
        return self._fit(x, self.num_blocks)

    def reduce(self, x):
        """Calculates x mod p for x of at most 2*NB blocks.

        Any value the 2*NB blocks can hold is accepted.

        Args:
            x (RadixCiphertext): Value to reduce.

        Returns:
            A RadixCiphertext of NB blocks encrypting x mod p.
        """
        nb = self.num_blocks
        if x.num_blocks > 2 * nb:
            raise ValueError('Cannot reduce a ' + str(x.num_blocks) + '-block value with a '
                             + str(nb) + '-block residue width')
        x = self.evaluator.extend_radix_with_trivial_zero_blocks_msb(x, 2 * nb - x.num_blocks)

        # first pass, 2*NB blocks in: a will be multiplied by the gap, so it
        # needs at least NB + gap_blocks + 1 blocks
        x_mod_p = self._fold(x, self._first_blocks)
        # second pass, the value is below (gap + 1)*2^(2*NB*bits - n)
        x_mod_p = self._fit(x_mod_p, self._second_input_blocks)
        x_mod_p = self._fold(x_mod_p, self._second_blocks)
        # final pass, at most a few multiples of 2^n are left
        x_mod_p = self._fold(x_mod_p, self._third_blocks)
        return self._conditional_subtract(x_mod_p)

    def reduce_fast(self, x):
        """Calculates x mod p for x already below 2p, e.g. the sum of two residues.

        Args:
            x (RadixCiphertext): Value below 2p.

        Returns:
            A RadixCiphertext of NB blocks encrypting x mod p.
        """
        # a is 0 or 1 here
        x_mod_p = self._fold(x, self._fast_blocks)
        return self._conditional_subtract(x_mod_p)

    def mul_mod(self, a, b):
        """Calculates a * b mod p.

        Args:
            a (RadixCiphertext): Residue of at most NB blocks.
            b (RadixCiphertext): Residue of at most NB blocks.

        Returns:
            A RadixCiphertext of NB blocks encrypting a * b mod p.
        """
        ops_start = time.perf_counter()
        task_ref = random.randrange(1000)
        logger.debug("mul mod mersenne start -- ref %d", task_ref)

        evaluator = self.evaluator
        a_expanded = evaluator.extend_radix_with_trivial_zero_blocks_msb(
            a, 2 * self.num_blocks - a.num_blocks)
        product = evaluator.mul(a_expanded, b)
        res = self.reduce(product)

        logger.debug("mul mod mersenne done in %.2fs -- ref %d",
                     time.perf_counter() - ops_start, task_ref)
        return res


def reduce_encrypted(x, p, num_blocks, evaluator):
    """Calculates x mod p with the p = 2^n - c form. See MersenneEvaluator.reduce."""
    return MersenneEvaluator(evaluator, p, num_blocks).reduce(x)


def reduce_encrypted_two_term(x, p, num_blocks, evaluator):
    """Calculates x mod p with the p = 2^n - 2^m - c form. See MersenneEvaluator.reduce."""
    return MersenneEvaluator(evaluator, p, num_blocks, two_term=True).reduce(x)


def reduce_encrypted_fast(x, p, num_blocks, evaluator):
    """Calculates x mod p for x < 2p. See MersenneEvaluator.reduce_fast."""
    return MersenneEvaluator(evaluator, p, num_blocks).reduce_fast(x)


def mul_mod(a, b, p, num_blocks, evaluator):
    """Calculates a * b mod p with the p = 2^n - c form."""
    return MersenneEvaluator(evaluator, p, num_blocks).mul_mod(a, b)


def mul_mod_two_term(a, b, p, num_blocks, evaluator):
    """Calculates a * b mod p with the p = 2^n - 2^m - c form."""
    return MersenneEvaluator(evaluator, p, num_blocks, two_term=True).mul_mod(a, b)
