"""A module to keep track of parameters for the radix integer scheme."""


class RadixParameters:
    """An instance of parameters for the radix integer scheme.

    Each block of a radix ciphertext is an LWE ciphertext over Z_q with
    q = 2^ciphertext_bits. A block encodes message_bits of payload,
    carry_bits of room for carries, and one padding bit on top.

    Attributes:
        lwe_dimension (int): Length of the LWE secret key and of every mask.
        message_bits (int): Number of message bits in a block.
        carry_bits (int): Number of carry bits in a block.
        ciphertext_bits (int): Bit length of the ciphertext modulus q.
        noise_std (float): Standard deviation of fresh encryption noise.
        message_modulus (int): 2^message_bits.
        carry_modulus (int): 2^carry_bits.
        plain_modulus (int): message_modulus * carry_modulus, the values a
            block can hold before a carry overflows into the padding bit.
        ciphertext_modulus (int): q.
        delta (int): Scaling factor q / (2 * plain_modulus).
    """

    def __init__(self, lwe_dimension, message_bits, carry_bits, ciphertext_bits=32,
                 noise_std=1024.0):
        """Inits Parameters with the given parameters.

        Args:
            lwe_dimension (int): Length of the LWE secret key.
            message_bits (int): Number of message bits in a block.
            carry_bits (int): Number of carry bits in a block.
            ciphertext_bits (int): Bit length of the ciphertext modulus.
            noise_std (float): Standard deviation of fresh encryption noise.
        """
        if message_bits < 1:
            raise ValueError('A block must carry at least one message bit.')
        # Carry-propagation lookup tables need room for a full block product
        if carry_bits < message_bits:
            raise ValueError('Carry space must be at least as large as the message space: '
                             + str(carry_bits) + ' < ' + str(message_bits))
        if message_bits + carry_bits + 1 >= ciphertext_bits:
            raise ValueError('Ciphertext modulus too small for ' + str(message_bits)
                             + ' message bits and ' + str(carry_bits) + ' carry bits.')

        self.lwe_dimension = lwe_dimension
        self.message_bits = message_bits
        self.carry_bits = carry_bits
        self.ciphertext_bits = ciphertext_bits
        self.noise_std = noise_std

        self.message_modulus = 1 << message_bits
        self.carry_modulus = 1 << carry_bits
        self.plain_modulus = self.message_modulus * self.carry_modulus
        self.ciphertext_modulus = 1 << ciphertext_bits
        self.delta = self.ciphertext_modulus // (2 * self.plain_modulus)

    def max_degree(self):
        """Largest value a block may hold before it must be propagated."""
        return self.plain_modulus - 1


PARAM_MESSAGE_2_CARRY_2 = RadixParameters(lwe_dimension=256, message_bits=2, carry_bits=2)
