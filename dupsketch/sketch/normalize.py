# dupsketch/sketch/normalize.py
"""
Text preprocessing and character shingling.

The four normalization stages always run in the same order:
NFKC, whitespace/punctuation folding, traditional-to-simplified Chinese
folding, lowercasing. Each one can be switched off independently.
"""
from __future__ import annotations

import unicodedata
from dataclasses import dataclass
from typing import Iterator

import regex
import zhconv

# Any run of whitespace or Unicode punctuation collapses to one space.
_SPACE_PUNCT_RE = regex.compile(r"[\s\p{P}]+")


def unicode_normalize(text: str) -> str:
    return unicodedata.normalize("NFKC", text)


def fold_punctuation(text: str) -> str:
    return _SPACE_PUNCT_RE.sub(" ", text)


def unify_script(text: str) -> str:
    return zhconv.convert(text, "zh-hans")


@dataclass(frozen=True)
class TextNormalizer:
    """
    Configurable normalization pipeline applied before shingling.
    """

    unicode_normalize: bool = True
    punct_norm: bool = True
    script_unify: bool = True
    lowercase: bool = True

    def __call__(self, text: str) -> str:
        return self.normalize(text)

    def normalize(self, text: str) -> str:
        if self.unicode_normalize:
            text = unicode_normalize(text)
        if self.punct_norm:
            text = fold_punctuation(text)
        if self.script_unify:
            text = unify_script(text)
        if self.lowercase:
            text = text.lower()
        return text


def shingles(text: str, n_gram: int) -> Iterator[str]:
    """
    Yield overlapping windows of ``n_gram`` code points, left to right.

    Text shorter than ``n_gram`` (the empty string included) yields the
    whole text as its only shingle.
    """
    if len(text) < n_gram:
        yield text
        return
    for i in range(len(text) - n_gram + 1):
        yield text[i:i + n_gram]
