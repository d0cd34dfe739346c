"""A module to encrypt for the radix integer scheme."""
import numpy as np

from radix.radix_ciphertext import BlockCiphertext, RadixCiphertext
from util.block_decomposition import decompose


class RadixEncryptor:
    """An object that can encrypt integers into radix ciphertexts.

    Attributes:
        params (RadixParameters): Parameters of the scheme.
        secret_key (SecretKey): Secret key used for encryption.
        rng (numpy.random.Generator): Source of masks and noise.
    """

    def __init__(self, params, secret_key, seed=None):
        """Inits Encryptor with the given parameters and secret key.

        Args:
            params (RadixParameters): Parameters of the scheme.
            secret_key (SecretKey): Secret key used for encryption.
            seed (int): Optional seed for masks and noise.
        """
        self.params = params
        self.secret_key = secret_key
        self.rng = np.random.default_rng(seed)

    def encrypt_block(self, message, degree=None, rng=None):
        """Encrypts a single block message.

        Args:
            message (int): Block value, at most plain_modulus - 1.
            degree (int): Public upper bound to record for the block. Defaults
                to the message itself.
            rng (numpy.random.Generator): Generator to draw mask and noise from.
                Defaults to the encryptor's own generator.

        Returns:
            A BlockCiphertext encrypting message.
        """
        params = self.params
        if not 0 <= message < params.plain_modulus:
            raise ValueError('Block message ' + str(message) + ' out of range [0, '
                             + str(params.plain_modulus) + ')')
        if rng is None:
            rng = self.rng
        q = params.ciphertext_modulus
        mask = rng.integers(0, q, size=params.lwe_dimension, dtype=np.int64)
        noise = int(np.rint(rng.normal(0, params.noise_std)))
        body = (int(np.dot(mask, self.secret_key.s)) + params.delta * message + noise) % q
        return BlockCiphertext(mask, body, message if degree is None else degree)

    def encrypt_radix(self, value, num_blocks):
        """Encrypts an integer into a radix ciphertext.

        Args:
            value (int): Non-negative integer, taken modulo
                2^(num_blocks * message_bits).
            num_blocks (int): Number of blocks of the ciphertext.

        Returns:
            A RadixCiphertext encrypting value.
        """
        digits = decompose(int(value), num_blocks, self.params.message_bits)
        # Fresh blocks may hold any digit, so the degree is the full message space
        max_digit = self.params.message_modulus - 1
        return RadixCiphertext([self.encrypt_block(int(digit), degree=max_digit)
                                for digit in digits])
