# dupsketch/index/lsh.py
"""
In-memory candidate index for SuperMinHash signatures.

Every slot value of an accepted signature becomes a bucket key, whatever
slot it came from. A query unions the buckets of its own slot values to get
candidates, then keeps those whose position-aligned agreement with the
query reaches the threshold. The index only grows; there is no removal.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import DefaultDict, Dict, List, Optional, Set

import numpy as np

from ..sketch.superminhash import SignatureLike, as_bits

logger = logging.getLogger(__name__)


@dataclass
class IndexStats:
    total_documents: int = 0
    total_buckets: int = 0
    avg_bucket_size: float = 0.0
    max_bucket_size: int = 0

    def as_dict(self) -> Dict[str, float]:
        return {
            "total_documents": float(self.total_documents),
            "total_buckets": float(self.total_buckets),
            "avg_bucket_size": float(self.avg_bucket_size),
            "max_bucket_size": float(self.max_bucket_size),
        }


def _similarity(query: np.ndarray, stored: np.ndarray) -> float:
    """Position-aligned agreement of two bit arrays, normalized by the query size."""
    n = min(query.size, stored.size)
    matches = int(np.count_nonzero(query[:n] == stored[:n]))
    return matches / query.size


class LSH:
    """
    Corpus of (id, signature) records plus the slot-value inverted index.

    Not thread-safe; callers serialize access to one instance.
    """

    def __init__(self) -> None:
        self._buckets: DefaultDict[int, Set[int]] = defaultdict(set)
        self._signatures: List[np.ndarray] = []  # uint32 bit views, corpus order
        self._ids: List[str] = []
        self._id_map: Dict[str, int] = {}

    # --- introspection ---

    def keys(self) -> List[str]:
        return list(self._ids)

    def values(self) -> List[np.ndarray]:
        return [bits.view(np.float32).copy() for bits in self._signatures]

    def length(self) -> int:
        return len(self._ids)

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self._id_map

    def get(self, doc_id: str) -> Optional[np.ndarray]:
        """Signature of the most recent record inserted under ``doc_id``."""
        pos = self._id_map.get(doc_id)
        if pos is None:
            return None
        return self._signatures[pos].view(np.float32).copy()

    def stats(self) -> IndexStats:
        sizes = [len(members) for members in self._buckets.values()]
        return IndexStats(
            total_documents=len(self._ids),
            total_buckets=len(sizes),
            avg_bucket_size=(sum(sizes) / len(sizes)) if sizes else 0.0,
            max_bucket_size=max(sizes) if sizes else 0,
        )

    # --- query / insert ---

    def check(self, data: SignatureLike, threshold: float = 0.5) -> Dict[str, float]:
        """
        Return ``{id: similarity}`` for stored documents whose agreement with
        ``data`` is at least ``threshold``.
        """
        return self._check_bits(as_bits(data), threshold)

    def check_and_add(
        self,
        new_id: str,
        data: SignatureLike,
        threshold: float = 0.5,
        add_if_dup: bool = False,
    ) -> Dict[str, float]:
        """
        Check ``data`` against the corpus, then insert it if nothing matched
        or ``add_if_dup`` is set.

        The returned mapping describes the corpus as it was before the insert.
        """
        bits = as_bits(data)
        result = self._check_bits(bits, threshold)
        if not result or add_if_dup:
            self._insert(new_id, bits)
        else:
            logger.debug(
                "Skipped %r: %d match(es) at threshold %.3f", new_id, len(result), threshold,
                extra={"document_id": new_id, "matches": len(result), "threshold": threshold},
            )
        return result

    def _check_bits(self, bits: np.ndarray, threshold: float) -> Dict[str, float]:
        candidates: Set[int] = set()
        for key in bits.tolist():
            members = self._buckets.get(key)
            if members:
                candidates.update(members)

        result: Dict[str, float] = {}
        for pos in candidates:
            similarity = _similarity(bits, self._signatures[pos])
            if similarity >= threshold:
                result[self._ids[pos]] = similarity
        return result

    def _insert(self, new_id: str, bits: np.ndarray) -> None:
        pos = len(self._ids)
        self._id_map[new_id] = pos
        self._ids.append(new_id)
        stored = bits.copy()
        for key in stored.tolist():
            self._buckets[key].add(pos)
        self._signatures.append(stored)
        logger.debug("Inserted %r at position %d", new_id, pos, extra={"document_id": new_id})
