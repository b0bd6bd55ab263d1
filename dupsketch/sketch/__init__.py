"""
Sketching: text normalization, shingling and SuperMinHash signatures.
"""

from .normalize import TextNormalizer, shingles
from .sketcher import SuperMinHasher
from .superminhash import SuperMinHash, as_bits, estimate_jaccard

__all__ = [
    'TextNormalizer',
    'shingles',
    'SuperMinHasher',
    'SuperMinHash',
    'as_bits',
    'estimate_jaccard',
]
