"""Universal hash family used as surrogate permutations for MinHash."""
from __future__ import annotations

import random
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from .errors import InvalidParameterError

# Mersenne prime 2**31 - 1
PRIME: int = 2_147_483_647

_INT32_BITS = 32
_INT32_OFFSET = 1 << (_INT32_BITS - 1)


class HashFunction(NamedTuple):
    """Affine map ``x -> (x * scalar + constant) mod PRIME``."""

    scalar: int
    constant: int

    def __call__(self, value: int) -> int:
        return apply(self, value)


def apply(function: HashFunction, integer_id: int) -> int:
    """Return the permuted rank of *integer_id* under *function*.

    Python integers never overflow and ``%`` with a positive modulus is a
    floor modulo, so the result lies in ``[0, PRIME)`` for every integer
    input, negative ones included.
    """
    return (integer_id * function.scalar + function.constant) % PRIME


class HashFamily:
    """Memoised sequence of random :class:`HashFunction` instances.

    The family draws from an injected :class:`random.Random`. Pass a seeded
    instance for reproducible signatures; leave *rng* as ``None`` for an
    unseeded production run. Position *k* always returns the same function
    once it has been drawn.
    """

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._functions: List[HashFunction] = []

    def __len__(self) -> int:
        return len(self._functions)

    def _draw_int32(self) -> int:
        return self._rng.getrandbits(_INT32_BITS) - _INT32_OFFSET

    def generate(self, count: int) -> List[HashFunction]:
        """Return the first *count* functions, drawing new ones as needed."""
        if count <= 0:
            raise InvalidParameterError(f"hash function count must be positive, got {count}")
        while len(self._functions) < count:
            scalar = self._draw_int32()
            constant = self._draw_int32()
            self._functions.append(HashFunction(scalar, constant))
        return self._functions[:count]

    def arrays(self, count: int) -> Tuple[np.ndarray, np.ndarray]:
        """Return ``(scalars, constants)`` of the first *count* functions as int64 arrays."""
        functions = self.generate(count)
        scalars = np.fromiter((f.scalar for f in functions), dtype=np.int64, count=count)
        constants = np.fromiter((f.constant for f in functions), dtype=np.int64, count=count)
        return scalars, constants
