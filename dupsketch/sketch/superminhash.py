# dupsketch/sketch/superminhash.py
"""
SuperMinHash accumulator.

Implements the single-pass algorithm from O. Ertl, "SuperMinHash - A New
Minwise Hashing Algorithm for Jaccard Similarity Estimation" (2017). Every
absorbed element drives a short Fisher-Yates shuffle seeded from the
element's hash; slot ``p[j]`` keeps the minimum of ``r + j`` seen so far.
The scan for an element stops at ``a``, the largest integer part still held
by any slot, so the work per element shrinks as the sketch fills up.

Two accumulators of the same size fed sets A and B agree in slot ``i`` with
probability ``|A & B| / |A | B|``.
"""
from __future__ import annotations

import random
from typing import List, Sequence, Union

import numpy as np
import xxhash

from ..errors import InvalidArgumentError

SignatureLike = Union[np.ndarray, Sequence[float]]

# Value of a slot no element has reached yet.
SLOT_MAX = float(np.finfo(np.float32).max)


def element_hash(element: bytes, seed: int = 0) -> int:
    """64-bit hash used to seed the per-element shuffle."""
    return xxhash.xxh3_64_intdigest(element, seed=seed)


def as_bits(signature: SignatureLike) -> np.ndarray:
    """Raw uint32 bit patterns of a float32 signature."""
    return np.ascontiguousarray(signature, dtype=np.float32).reshape(-1).view(np.uint32)


def estimate_jaccard(a: SignatureLike, b: SignatureLike) -> float:
    """Fraction of slots where ``a`` and ``b`` hold the same bit pattern."""
    bits_a = as_bits(a)
    bits_b = as_bits(b)
    if bits_a.shape != bits_b.shape:
        raise ValueError("signature size mismatch")
    if bits_a.size == 0:
        return 0.0
    return int(np.count_nonzero(bits_a == bits_b)) / bits_a.size


class SuperMinHash:
    """
    Mutable SuperMinHash state of ``size`` slots.

      - absorb(element_bytes) folds one element in.
      - signature() returns the current slots as float32 without resetting.
      - drain() returns the signature and resets to the empty state.
    """
    __slots__ = ("size", "seed", "_h", "_p", "_q", "_b", "_a", "_count")

    def __init__(self, size: int, seed: int = 0) -> None:
        if size <= 0:
            raise InvalidArgumentError("size must be greater than 0", parameter="size", value=size)
        self.size = size
        self.seed = seed
        self._h: List[float] = [SLOT_MAX] * size
        self._p: List[int] = list(range(size))
        self._q: List[int] = [-1] * size
        self._b: List[int] = [0] * size
        self._b[size - 1] = size
        self._a = size - 1
        self._count = 0

    @property
    def count(self) -> int:
        """Number of elements absorbed since the last reset."""
        return self._count

    def is_empty(self) -> bool:
        return self._count == 0

    def absorb(self, element: bytes) -> None:
        m = self.size
        h, p, q, b = self._h, self._p, self._q, self._b
        stamp = self._count
        rng = random.Random(element_hash(element, self.seed))

        j = 0
        while j <= self._a:
            r = rng.random()
            k = rng.randrange(j, m)
            # q marks which entries of p were already touched by this element
            if q[j] != stamp:
                q[j] = stamp
                p[j] = j
            if q[k] != stamp:
                q[k] = stamp
                p[k] = k
            p[j], p[k] = p[k], p[j]

            slot = p[j]
            value = r + j
            if value < h[slot]:
                previous = min(int(h[slot]), m - 1)
                h[slot] = value
                if j < previous:
                    b[previous] -= 1
                    b[j] += 1
                    while b[self._a] == 0:
                        self._a -= 1
            j += 1

        self._count += 1

    def update(self, elements) -> None:
        """Absorb every element of an iterable of bytes."""
        for element in elements:
            self.absorb(element)

    def signature(self) -> np.ndarray:
        return np.asarray(self._h, dtype=np.float32)

    def reinit(self) -> None:
        """Return to the empty state, reusing the existing buffers."""
        m = self.size
        self._h[:] = [SLOT_MAX] * m
        self._p[:] = range(m)
        self._q[:] = [-1] * m
        self._b[:] = [0] * m
        self._b[m - 1] = m
        self._a = m - 1
        self._count = 0

    def drain(self) -> np.ndarray:
        sig = self.signature()
        self.reinit()
        return sig
