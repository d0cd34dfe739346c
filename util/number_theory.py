"""A module with number theory functions needed to describe generalized Mersenne moduli.
"""
import numpy as np
import sympy


def to_int(val):
    """Converts a plaintext integer to a Python integer.

    Accepts Python integers and NumPy integer scalars, so moduli can be given
    as fixed-width plaintext integers as well as big integers.

    Args:
        val (int): Value to convert.

    Returns:
        The value as a Python int.
    """
    if isinstance(val, (bool, np.bool_)):
        raise TypeError('Expected an integer, got a boolean.')
    if isinstance(val, np.integer):
        return int(val)
    if not isinstance(val, int):
        raise TypeError('Expected an integer, got ' + type(val).__name__ + '.')
    return val


def ilog2_ceil(val):
    """Computes ceil(log2(val)) for a positive integer.

    Args:
        val (int): Positive integer.

    Returns:
        The smallest n such that 2^n >= val.
    """
    if val <= 0:
        raise ValueError('ilog2_ceil requires a positive value, got ' + str(val))
    return (val - 1).bit_length()


def ilog2_floor(val):
    """Computes floor(log2(val)) for a positive integer.

    Args:
        val (int): Positive integer.

    Returns:
        The largest n such that 2^n <= val.
    """
    if val <= 0:
        raise ValueError('ilog2_floor requires a positive value, got ' + str(val))
    return val.bit_length() - 1


def is_prime(number):
    """Determines whether a number is prime.

    Args:
        number (int): Number to perform primality test on.

    Returns:
        True if number is prime, False otherwise.
    """
    # sympy switches to BPSW for large inputs, which is deterministic in practice
    return bool(sympy.isprime(number))
