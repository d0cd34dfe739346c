"""A module to perform arithmetic on radix ciphertexts."""
import threading

import numpy as np

from radix.radix_ciphertext import BlockCiphertext, RadixCiphertext
from radix.radix_decryptor import RadixDecryptor
from radix.radix_encryptor import RadixEncryptor
from util.block_decomposition import decompose


class RadixEvaluator:
    """An instance of an evaluator for radix ciphertexts.

    This is the evaluation context: it holds the bootstrapping key and never
    changes after construction, so several threads may share it. Every
    radix-level operation returns a new ciphertext whose blocks have been
    carry-propagated (degree below message_modulus), and wraps modulo
    2^(num_blocks * message_bits).

    This is a toy evaluator, not a secure one. Its bootstrapping key wraps
    the LWE secret key, and lookup tables are applied by decrypting the
    block, evaluating the table and encrypting the result again. The
    evaluator therefore sees plaintext block values. Only the Mersenne
    engine built on top of it is confined to public data.

    Attributes:
        params (RadixParameters): Parameters of the scheme.
        bootstrapping_key (BootstrappingKey): Key used to refresh blocks.
    """

    def __init__(self, params, bootstrapping_key):
        """Inits Evaluator.

        Args:
            params (RadixParameters): Parameters of the scheme.
            bootstrapping_key (BootstrappingKey): Key used to refresh blocks.
        """
        self.params = params
        self.bootstrapping_key = bootstrapping_key
        self._refresh_encryptor = RadixEncryptor(params, bootstrapping_key.secret_key)
        self._refresh_decryptor = RadixDecryptor(params, bootstrapping_key.secret_key)
        self._local = threading.local()

    def _rng(self):
        # numpy generators are not thread safe, so each thread draws from its own
        rng = getattr(self._local, 'rng', None)
        if rng is None:
            rng = np.random.default_rng()
            self._local.rng = rng
        return rng

    # Block level.

    def _trivial_block(self, message):
        mask = np.zeros(self.params.lwe_dimension, dtype=np.int64)
        return BlockCiphertext(mask, (self.params.delta * message) % self.params.ciphertext_modulus,
                               message)

    def _check_degree(self, degree):
        if degree > self.params.max_degree():
            raise ValueError('Block degree ' + str(degree) + ' exceeds the carry space '
                             + str(self.params.max_degree()))

    def _add_block(self, lhs, rhs):
        degree = lhs.degree + rhs.degree
        self._check_degree(degree)
        q = self.params.ciphertext_modulus
        return BlockCiphertext((lhs.mask + rhs.mask) % q, (lhs.body + rhs.body) % q, degree)

    def _scalar_mul_block(self, block, scalar):
        degree = block.degree * scalar
        self._check_degree(degree)
        q = self.params.ciphertext_modulus
        return BlockCiphertext((block.mask * scalar) % q, (block.body * scalar) % q, degree)

    def _apply_lookup_table(self, block, func):
        """Evaluates func on the value of a block and returns a fresh block.

        Stands in for programmable bootstrapping: the output noise is fresh and
        the output degree is the largest value func takes on [0, block.degree].

        Args:
            block (BlockCiphertext): Input block.
            func (function): Function from block values to block values.

        Returns:
            A BlockCiphertext encrypting func(value).
        """
        degree = max(func(v) for v in range(block.degree + 1))
        if block.degree == 0:
            return self._trivial_block(degree)
        value = func(self._refresh_decryptor.decrypt_block(block))
        return self._refresh_encryptor.encrypt_block(value, degree=degree, rng=self._rng())

    def _apply_bivariate_lookup_table(self, lhs, rhs, func):
        """Evaluates func(lhs, rhs) on two clean blocks.

        The blocks are packed into one as lhs * message_modulus + rhs, then a
        single lookup table is applied.
        """
        modulus = self.params.message_modulus
        if lhs.degree >= modulus or rhs.degree >= modulus:
            raise ValueError('Bivariate lookup tables need carry-free blocks.')
        packed = self._add_block(self._scalar_mul_block(lhs, modulus), rhs)
        return self._apply_lookup_table(packed, lambda v: func(v // modulus, v % modulus))

    def _propagate(self, blocks):
        """Moves every carry into the next block; the carry out of the top block is dropped."""
        modulus = self.params.message_modulus
        result = []
        carry = None
        for block in blocks:
            if carry is not None:
                block = self._add_block(block, carry)
                carry = None
            if block.degree < modulus:
                result.append(block)
                continue
            carry = self._apply_lookup_table(block, lambda v: v // modulus)
            result.append(self._apply_lookup_table(block, lambda v: v % modulus))
        return result

    def _zero_blocks(self, num_blocks):
        return [self._trivial_block(0) for _ in range(num_blocks)]

    def _align(self, lhs, rhs):
        # Pad the narrower operand with trivial zeros so both have the same width
        num_blocks = max(lhs.num_blocks, rhs.num_blocks)
        return (lhs.blocks + self._zero_blocks(num_blocks - lhs.num_blocks),
                rhs.blocks + self._zero_blocks(num_blocks - rhs.num_blocks))

    # Radix level.

    def create_trivial_radix(self, value, num_blocks):
        """Creates a noiseless radix ciphertext of a public value.

        Args:
            value (int): Public value.
            num_blocks (int): Number of blocks.

        Returns:
            A RadixCiphertext with all-zero masks.
        """
        digits = decompose(value, num_blocks, self.params.message_bits)
        return RadixCiphertext([self._trivial_block(int(digit)) for digit in digits])

    def extend_radix_with_trivial_zero_blocks_msb(self, ciphertext, num_blocks):
        """Appends num_blocks trivial zero blocks on the most significant side."""
        if num_blocks < 0:
            raise ValueError('Cannot extend by a negative number of blocks: ' + str(num_blocks))
        return RadixCiphertext([block.copy() for block in ciphertext.blocks]
                               + self._zero_blocks(num_blocks))

    def trim_radix_blocks_msb(self, ciphertext, num_blocks):
        """Removes num_blocks blocks from the most significant side.

        The removed blocks must be known to hold zero (or don't-care values);
        they are discarded without being looked at.
        """
        result = ciphertext.copy()
        self.trim_radix_blocks_msb_assign(result, num_blocks)
        return result

    def trim_radix_blocks_msb_assign(self, ciphertext, num_blocks):
        """Removes num_blocks blocks from the most significant side, in place."""
        if not 0 <= num_blocks <= ciphertext.num_blocks:
            raise ValueError('Cannot trim ' + str(num_blocks) + ' blocks from a '
                             + str(ciphertext.num_blocks) + '-block ciphertext')
        del ciphertext.blocks[ciphertext.num_blocks - num_blocks:]

    def full_propagate(self, ciphertext):
        """Returns a copy of ciphertext with every carry propagated."""
        return RadixCiphertext(self._propagate(ciphertext.blocks))

    def add(self, lhs, rhs):
        """Adds two radix ciphertexts.

        The result is as wide as the wider operand.

        Args:
            lhs (RadixCiphertext): First summand.
            rhs (RadixCiphertext): Second summand.

        Returns:
            A RadixCiphertext encrypting lhs + rhs.
        """
        lhs_blocks, rhs_blocks = self._align(lhs, rhs)
        summed = [self._add_block(l, r) for l, r in zip(lhs_blocks, rhs_blocks)]
        return RadixCiphertext(self._propagate(summed))

    def sub(self, lhs, rhs):
        """Subtracts two radix ciphertexts in two's complement.

        Args:
            lhs (RadixCiphertext): Minuend.
            rhs (RadixCiphertext): Subtrahend.

        Returns:
            A RadixCiphertext encrypting lhs - rhs modulo 2^(width).
        """
        lhs_blocks, rhs_blocks = self._align(lhs, rhs)
        top = self.params.message_modulus - 1
        # lhs - rhs = lhs + ~rhs + 1
        negated = [self._apply_lookup_table(block, lambda v: top - v) for block in rhs_blocks]
        summed = [self._add_block(l, r) for l, r in zip(lhs_blocks, negated)]
        summed[0] = self._add_block(summed[0], self._trivial_block(1))
        return RadixCiphertext(self._propagate(summed))

    def scalar_add(self, ciphertext, scalar):
        """Adds a public non-negative scalar to a radix ciphertext."""
        if scalar < 0:
            raise ValueError('Scalar must be non-negative, got ' + str(scalar))
        digits = decompose(scalar, ciphertext.num_blocks, self.params.message_bits)
        summed = [self._add_block(block, self._trivial_block(int(digit)))
                  for block, digit in zip(ciphertext.blocks, digits)]
        return RadixCiphertext(self._propagate(summed))

    def scalar_mul(self, ciphertext, scalar):
        """Multiplies a radix ciphertext by a public non-negative scalar.

        Shift-and-add over the radix digits of the scalar; the width of the
        ciphertext is kept.

        Args:
            ciphertext (RadixCiphertext): Ciphertext to multiply.
            scalar (int): Public multiplier.

        Returns:
            A RadixCiphertext encrypting ciphertext * scalar.
        """
        if scalar < 0:
            raise ValueError('Scalar must be non-negative, got ' + str(scalar))
        num_blocks = ciphertext.num_blocks
        digits = decompose(scalar, num_blocks, self.params.message_bits)
        result = None
        for shift, digit in enumerate(digits):
            if digit == 0:
                continue
            shifted = self._zero_blocks(shift) + ciphertext.blocks[:num_blocks - shift]
            term = RadixCiphertext(self._propagate(
                [self._scalar_mul_block(block, int(digit)) for block in shifted]))
            result = term if result is None else self.add(result, term)
        if result is None:
            return self.create_trivial_radix(0, num_blocks)
        return result

    def mul(self, lhs, rhs):
        """Multiplies two radix ciphertexts.

        Schoolbook multiplication over blocks; the result keeps the width of
        lhs, so extend lhs first for a full-width product.

        Args:
            lhs (RadixCiphertext): First factor.
            rhs (RadixCiphertext): Second factor.

        Returns:
            A RadixCiphertext encrypting lhs * rhs modulo 2^(width of lhs).
        """
        modulus = self.params.message_modulus
        num_blocks = lhs.num_blocks
        result = self.create_trivial_radix(0, num_blocks)
        for j, rhs_block in enumerate(rhs.blocks[:num_blocks]):
            if rhs_block.degree == 0:
                continue
            low = self._zero_blocks(j)
            high = self._zero_blocks(j + 1)
            for lhs_block in lhs.blocks[:num_blocks - j]:
                if lhs_block.degree == 0:
                    low.append(self._trivial_block(0))
                    high.append(self._trivial_block(0))
                    continue
                low.append(self._apply_bivariate_lookup_table(
                    lhs_block, rhs_block, lambda x, y: (x * y) % modulus))
                high.append(self._apply_bivariate_lookup_table(
                    lhs_block, rhs_block, lambda x, y: (x * y) // modulus))
            row = self.add(RadixCiphertext(low), RadixCiphertext(high[:num_blocks]))
            result = self.add(result, row)
        return result

    def scalar_left_shift(self, ciphertext, shift):
        """Shifts a radix ciphertext left by a public number of bits.

        Bits shifted past the top block are dropped.
        """
        if shift < 0:
            raise ValueError('Shift must be non-negative, got ' + str(shift))
        num_blocks = ciphertext.num_blocks
        block_shift, bit_shift = divmod(shift, self.params.message_bits)
        if block_shift >= num_blocks:
            return self.create_trivial_radix(0, num_blocks)
        blocks = self._zero_blocks(block_shift) + [block.copy() for block in
                                                   ciphertext.blocks[:num_blocks - block_shift]]
        if bit_shift:
            blocks = self._propagate([self._scalar_mul_block(block, 1 << bit_shift)
                                      for block in blocks])
        return RadixCiphertext(blocks)

    def scalar_right_shift(self, ciphertext, shift):
        """Shifts a radix ciphertext right by a public number of bits (logical shift)."""
        if shift < 0:
            raise ValueError('Shift must be non-negative, got ' + str(shift))
        num_blocks = ciphertext.num_blocks
        message_bits = self.params.message_bits
        modulus = self.params.message_modulus
        block_shift, bit_shift = divmod(shift, message_bits)
        if block_shift >= num_blocks:
            return self.create_trivial_radix(0, num_blocks)
        blocks = [block.copy() for block in ciphertext.blocks[block_shift:]] \
            + self._zero_blocks(block_shift)
        if not bit_shift:
            return RadixCiphertext(blocks)

        # Each output block takes the high bits of its own block and the low
        # bits of the next one
        def shift_pair(high, low):
            return (low >> bit_shift) | ((high << (message_bits - bit_shift)) % modulus)

        shifted = []
        for i, block in enumerate(blocks):
            upper = blocks[i + 1] if i + 1 < num_blocks else self._trivial_block(0)
            shifted.append(self._apply_bivariate_lookup_table(upper, block, shift_pair))
        return RadixCiphertext(shifted)
