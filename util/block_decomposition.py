"""A module to split integers into radix blocks and put them back together.
"""
import numpy as np


def blocks_for_bits(num_bits, bits_per_block):
    """Number of blocks needed to hold a value of the given bit length.

    Args:
        num_bits (int): Bit length of the value.
        bits_per_block (int): Message bits carried by a single block.

    Returns:
        ceil(num_bits / bits_per_block).
    """
    return -(-num_bits // bits_per_block)


def decompose(value, num_blocks, bits_per_block):
    """Decomposes a non-negative integer into little-endian radix digits.

    The value is taken modulo 2^(num_blocks * bits_per_block), the same
    wrap-around the radix ciphertexts have.

    Args:
        value (int): Value to decompose.
        num_blocks (int): Number of digits to produce.
        bits_per_block (int): Bits per digit.

    Returns:
        numpy.ndarray of num_blocks digits, least significant first.
    """
    if value < 0:
        raise ValueError('Cannot decompose negative value ' + str(value))
    digit_mask = (1 << bits_per_block) - 1
    # Python ints keep arbitrary precision; only the small digits go into numpy
    digits = np.zeros(num_blocks, dtype=np.int64)
    for i in range(num_blocks):
        digits[i] = (value >> (i * bits_per_block)) & digit_mask
    return digits


def recompose(digits, bits_per_block):
    """Recomposes little-endian radix digits into an integer.

    Digits larger than the radix (blocks still holding a carry) are
    accumulated with their weight.

    Args:
        digits (array-like): Digits, least significant first.
        bits_per_block (int): Bits per digit.

    Returns:
        The recomposed Python int.
    """
    value = 0
    for i, digit in enumerate(digits):
        value += int(digit) << (i * bits_per_block)
    return value
