# dupsketch/sketch/sketcher.py
"""
Streaming text sketcher built on SuperMinHash.

A ``SuperMinHasher`` owns one accumulator. ``sketch`` folds text in,
``finalize`` hands the signature out and empties the accumulator, so one
instance can process any number of documents one after another.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from ..errors import InvalidArgumentError
from .normalize import TextNormalizer, shingles
from .superminhash import SuperMinHash

if TYPE_CHECKING:
    from ..config import SketchConfig

logger = logging.getLogger(__name__)


class SuperMinHasher:
    """
    Turns documents into fixed-size SuperMinHash signatures.

    Args:
        size: Number of signature slots
        n_gram: Shingle width in code points
        lowercase: Lowercase text before shingling
        unicode_normalize: Apply NFKC normalization
        script_unify: Fold traditional Chinese to simplified
        punct_norm: Collapse whitespace/punctuation runs to a single space

    Raises:
        InvalidArgumentError: if ``size`` or ``n_gram`` is not positive
    """

    def __init__(
        self,
        size: int,
        n_gram: int = 5,
        lowercase: bool = True,
        unicode_normalize: bool = True,
        script_unify: bool = True,
        punct_norm: bool = True,
    ) -> None:
        if size <= 0:
            raise InvalidArgumentError("size must be greater than 0", parameter="size", value=size)
        if n_gram <= 0:
            raise InvalidArgumentError("n_gram must be greater than 0", parameter="n_gram", value=n_gram)

        self._n_gram = n_gram
        self._normalizer = TextNormalizer(
            unicode_normalize=unicode_normalize,
            punct_norm=punct_norm,
            script_unify=script_unify,
            lowercase=lowercase,
        )
        self._minhash = SuperMinHash(size)

    @classmethod
    def from_config(cls, config: "SketchConfig") -> "SuperMinHasher":
        return cls(
            config.size,
            n_gram=config.n_gram,
            lowercase=config.lowercase,
            unicode_normalize=config.unicode_normalize,
            script_unify=config.script_unify,
            punct_norm=config.punct_norm,
        )

    @property
    def size(self) -> int:
        return self._minhash.size

    @property
    def n_gram(self) -> int:
        return self._n_gram

    @property
    def normalizer(self) -> TextNormalizer:
        return self._normalizer

    def sketch(self, text: str) -> None:
        """Fold the shingles of ``text`` into the live accumulator."""
        text = self._normalizer(text)
        for shingle in shingles(text, self._n_gram):
            self._minhash.absorb(shingle.encode("utf-8"))

    def finalize(self) -> np.ndarray:
        """Return the accumulated signature and reset for the next document."""
        return self._minhash.drain()

    def sketch_and_finalize(self, text: str) -> np.ndarray:
        self.sketch(text)
        return self.finalize()

    def reset(self) -> None:
        """Discard anything sketched since the last finalize."""
        if not self._minhash.is_empty():
            logger.debug("Discarding %d pending shingles", self._minhash.count)
        self._minhash.reinit()

    def __repr__(self) -> str:
        n = self._normalizer
        return (
            f"SuperMinHasher(size={self.size}, n_gram={self._n_gram}, "
            f"lowercase={n.lowercase}, unicode_normalize={n.unicode_normalize}, "
            f"script_unify={n.script_unify}, punct_norm={n.punct_norm})"
        )
