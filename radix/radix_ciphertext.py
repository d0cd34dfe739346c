"""A module to keep track of block and radix ciphertexts."""


class BlockCiphertext:
    """An LWE ciphertext encrypting one radix block.

    Attributes:
        mask (numpy.ndarray): Mask vector a in Z_q^n.
        body (int): Body b = <a, s> + delta * m + e (mod q).
        degree (int): Public upper bound on the encrypted block value.
    """

    def __init__(self, mask, body, degree):
        """Sets block ciphertext to given mask, body and degree.

        Args:
            mask (numpy.ndarray): Mask vector.
            body (int): Body of the ciphertext.
            degree (int): Upper bound on the encrypted value.
        """
        self.mask = mask
        self.body = body
        self.degree = degree

    def is_trivial(self):
        """True if the block has an all-zero mask, i.e. its value is public."""
        return not self.mask.any()

    def copy(self):
        return BlockCiphertext(self.mask.copy(), self.body, self.degree)

    def __str__(self):
        return 'BlockCiphertext(body=' + str(self.body) + ', degree=' + str(self.degree) + ')'


class RadixCiphertext:
    """A fixed-width encrypted integer made of radix blocks.

    Blocks are stored least significant first. A radix ciphertext of k blocks
    with b message bits per block represents an integer modulo 2^(k*b).

    Attributes:
        blocks (list): List of BlockCiphertext, least significant first.
    """

    def __init__(self, blocks):
        """Sets radix ciphertext to the given blocks.

        Args:
            blocks (list): List of BlockCiphertext, least significant first.
        """
        self.blocks = list(blocks)

    @property
    def num_blocks(self):
        return len(self.blocks)

    def copy(self):
        """Returns a deep copy, so the result shares no block with self."""
        return RadixCiphertext([block.copy() for block in self.blocks])

    def __len__(self):
        return len(self.blocks)

    def __str__(self):
        return 'RadixCiphertext(num_blocks=' + str(self.num_blocks) + ')'
