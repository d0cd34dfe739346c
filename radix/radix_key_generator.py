"""A module to generate keys for the radix integer scheme."""
import logging

import numpy as np

from radix.radix_decryptor import RadixDecryptor
from radix.radix_encryptor import RadixEncryptor
from radix.radix_evaluator import RadixEvaluator

logger = logging.getLogger(__name__)


class SecretKey:
    """A binary LWE secret key.

    Attributes:
        s (numpy.ndarray): Secret vector with entries in {0, 1}.
    """

    def __init__(self, s):
        self.s = s


class BootstrappingKey:
    """Key material used by the evaluator to refresh blocks through lookup tables.

    This toy scheme has no blind rotation: the bootstrapping key wraps the LWE
    secret and the evaluator uses it to evaluate block lookup tables. It gives
    the evaluator the interface of a real programmable-bootstrapping key, not
    its security.

    Attributes:
        secret_key (SecretKey): Wrapped LWE secret.
    """

    def __init__(self, secret_key):
        self.secret_key = secret_key


class RadixKeyGenerator:
    """An instance to generate the secret key and the bootstrapping key.

    Attributes:
        params (RadixParameters): Parameters including LWE dimension and
            block layout.
        secret_key (SecretKey): Secret key held by the client.
        bootstrapping_key (BootstrappingKey): Key handed to the evaluator.
    """

    def __init__(self, params, seed=None):
        """Generates secret and bootstrapping keys for the radix scheme.

        Args:
            params (RadixParameters): Parameters including LWE dimension and
                block layout.
            seed (int): Optional seed, for reproducible keys in tests.
        """
        self.params = params
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.generate_secret_key(params)
        self.generate_bootstrapping_key()
        logger.debug("generated radix keys: lwe_dimension=%d, %d+%d bits per block",
                     params.lwe_dimension, params.message_bits, params.carry_bits)

    def generate_secret_key(self, params):
        """Generates a binary secret key.

        Args:
            params (RadixParameters): Parameters including LWE dimension.
        """
        self.secret_key = SecretKey(self.rng.integers(0, 2, size=params.lwe_dimension,
                                                      dtype=np.int64))

    def generate_bootstrapping_key(self):
        """Generates the bootstrapping key from the secret key."""
        self.bootstrapping_key = BootstrappingKey(self.secret_key)

    def get_encryptor(self):
        """Returns an encryptor bound to the secret key."""
        seed = None if self.seed is None else self.seed + 1
        return RadixEncryptor(self.params, self.secret_key, seed=seed)

    def get_decryptor(self):
        """Returns a decryptor bound to the secret key."""
        return RadixDecryptor(self.params, self.secret_key)

    def get_evaluator(self):
        """Returns an evaluation context bound to the bootstrapping key."""
        return RadixEvaluator(self.params, self.bootstrapping_key)
