"""
Candidate index for near-duplicate lookup over signatures.
"""

from .lsh import LSH, IndexStats

__all__ = ['LSH', 'IndexStats']
