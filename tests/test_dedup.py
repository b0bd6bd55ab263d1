"""
Tests for the text-level duplicate detector.
"""

import numpy as np
import pytest

from dupsketch import SuperMinHasherLSH, is_release_build
from dupsketch.config import SketchConfig
from dupsketch.errors import InvalidArgumentError
from dupsketch.sketch.sketcher import SuperMinHasher
from dupsketch.sketch.superminhash import SLOT_MAX

ARTICLE = (
    "The city council approved the new budget on Tuesday after a long debate "
    "about public transport, school funding and the maintenance of old bridges. "
    "The mayor said the plan balances growth with careful spending."
)
ARTICLE_EDITED = ARTICLE.replace("Tuesday", "Wednesday")
UNRELATED = (
    "A small bakery on the corner started selling sourdough pretzels, and the "
    "queue of customers now reaches the bus stop every weekend morning."
)


@pytest.fixture
def detector():
    return SuperMinHasherLSH(128)


class TestConstruction:

    def test_invalid_size(self):
        with pytest.raises(InvalidArgumentError, match="size must be greater than 0"):
            SuperMinHasherLSH(0)

    def test_invalid_n_gram(self):
        with pytest.raises(InvalidArgumentError, match="n_gram must be greater than 0"):
            SuperMinHasherLSH(64, n_gram=0)

    def test_from_config(self):
        detector = SuperMinHasherLSH.from_config(SketchConfig(size=64, n_gram=3, lowercase=False))

        assert detector.minhasher.size == 64
        assert detector.minhasher.n_gram == 3
        assert not detector.minhasher.normalizer.lowercase
        assert detector.length() == 0


class TestCheckAndAdd:

    def test_same_text_twice(self, detector):
        assert detector.check_and_add("a", ARTICLE) == {}
        assert detector.check_and_add("b", ARTICLE) == {"a": 1.0}
        assert detector.keys() == ["a"]

    def test_add_if_dup(self, detector):
        detector.check_and_add("a", ARTICLE)

        assert detector.check_and_add("b", ARTICLE, add_if_dup=True) == {"a": 1.0}
        assert detector.keys() == ["a", "b"]
        assert len(detector) == 2

    def test_check_only(self, detector):
        detector.check_and_add("a", ARTICLE)

        assert detector.check_and_add("b", ARTICLE, add=False) == {"a": 1.0}
        assert detector.check_and_add("c", UNRELATED, add=False) == {}
        assert detector.keys() == ["a"]

    def test_near_duplicate_found(self, detector):
        detector.check_and_add("original", ARTICLE)

        result = detector.check_and_add("edited", ARTICLE_EDITED, threshold=0.7)

        assert set(result) == {"original"}
        assert 0.7 <= result["original"] < 1.0

    def test_unrelated_text_not_matched(self, detector):
        detector.check_and_add("article", ARTICLE)

        assert detector.check_and_add("bakery", UNRELATED) == {}
        assert detector.length() == 2

    def test_accumulator_empty_after_each_call(self, detector):
        detector.check_and_add("a", ARTICLE)
        assert np.all(detector.minhasher.finalize() == np.float32(SLOT_MAX))

        detector.check_and_add("b", UNRELATED, add=False)
        assert np.all(detector.minhasher.finalize() == np.float32(SLOT_MAX))

    def test_stored_signature_has_no_carry_over(self, detector):
        detector.check_and_add("a", ARTICLE)
        detector.check_and_add("b", UNRELATED)

        fresh = SuperMinHasher(128).sketch_and_finalize(UNRELATED)
        assert np.array_equal(detector.values()[1], fresh)

    def test_stats_delegate(self, detector):
        detector.check_and_add("a", ARTICLE)

        stats = detector.stats()
        assert stats.total_documents == 1
        assert stats.total_buckets > 0


def test_is_release_build_matches_interpreter_flag():
    assert is_release_build() is (not __debug__)
