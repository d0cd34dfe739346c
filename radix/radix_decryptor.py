"""A module to decrypt for the radix integer scheme."""
import numpy as np

from util.block_decomposition import recompose


class RadixDecryptor:
    """An object that can decrypt radix ciphertexts.

    Attributes:
        params (RadixParameters): Parameters of the scheme.
        secret_key (SecretKey): Secret key used for decryption.
    """

    def __init__(self, params, secret_key):
        """Inits Decryptor with the given parameters and secret key.

        Args:
            params (RadixParameters): Parameters of the scheme.
            secret_key (SecretKey): Secret key used for decryption.
        """
        self.params = params
        self.secret_key = secret_key

    def decrypt_block(self, block):
        """Decrypts a single block.

        Rounds the phase b - <a, s> to the nearest multiple of delta.

        Args:
            block (BlockCiphertext): Block to decrypt.

        Returns:
            The block value, including any carry it still holds.
        """
        params = self.params
        q = params.ciphertext_modulus
        phase = (block.body - int(np.dot(block.mask, self.secret_key.s))) % q
        message = ((phase + params.delta // 2) // params.delta) % (2 * params.plain_modulus)
        # Messages at or above plain_modulus would sit in the padding bit
        return message % params.plain_modulus

    def decrypt_radix(self, ciphertext):
        """Decrypts a radix ciphertext.

        Args:
            ciphertext (RadixCiphertext): Ciphertext to decrypt.

        Returns:
            The decrypted integer.
        """
        digits = [self.decrypt_block(block) for block in ciphertext.blocks]
        return recompose(digits, self.params.message_bits)
