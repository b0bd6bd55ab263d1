"""
Duplicate-aware facade: text in, ``{id: similarity}`` out.

Combines a ``SuperMinHasher`` with an ``LSH`` index so callers never handle
signatures directly.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List

import numpy as np

from .index.lsh import LSH, IndexStats
from .sketch.sketcher import SuperMinHasher

if TYPE_CHECKING:
    from .config import SketchConfig

logger = logging.getLogger(__name__)


class SuperMinHasherLSH:
    """
    Near-duplicate detector over raw text.

    Accepts the same arguments as ``SuperMinHasher``.
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
        self.minhasher = SuperMinHasher(
            size,
            n_gram=n_gram,
            lowercase=lowercase,
            unicode_normalize=unicode_normalize,
            script_unify=script_unify,
            punct_norm=punct_norm,
        )
        self.lsh = LSH()

    @classmethod
    def from_config(cls, config: "SketchConfig") -> "SuperMinHasherLSH":
        return cls(
            config.size,
            n_gram=config.n_gram,
            lowercase=config.lowercase,
            unicode_normalize=config.unicode_normalize,
            script_unify=config.script_unify,
            punct_norm=config.punct_norm,
        )

    def check_and_add(
        self,
        new_id: str,
        data: str,
        threshold: float = 0.5,
        add: bool = True,
        add_if_dup: bool = False,
    ) -> Dict[str, float]:
        """
        Sketch ``data`` and look it up in the index.

        Args:
            new_id: Id to store the document under
            data: Document text
            threshold: Minimum similarity to report
            add: Insert the document (subject to ``add_if_dup``); if False
                the index is only queried
            add_if_dup: Insert even when matches were found

        Returns:
            Matches found before any insert, as ``{id: similarity}``
        """
        # finalize() empties the accumulator before the index is touched
        signature = self.minhasher.sketch_and_finalize(data)
        if add:
            result = self.lsh.check_and_add(new_id, signature, threshold, add_if_dup)
        else:
            result = self.lsh.check(signature, threshold)
        if result:
            logger.debug("%r matched %d document(s)", new_id, len(result))
        return result

    def keys(self) -> List[str]:
        return self.lsh.keys()

    def values(self) -> List[np.ndarray]:
        return self.lsh.values()

    def length(self) -> int:
        return self.lsh.length()

    def __len__(self) -> int:
        return self.lsh.length()

    def stats(self) -> IndexStats:
        return self.lsh.stats()
