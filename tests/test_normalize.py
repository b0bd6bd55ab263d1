"""
Tests for text normalization and shingling.
"""

from dupsketch.sketch.normalize import (
    TextNormalizer,
    fold_punctuation,
    shingles,
    unicode_normalize,
    unify_script,
)


class TestNormalizationStages:

    def test_nfkc_folds_compatibility_forms(self):
        assert unicode_normalize("\uff46\uff55\uff4c\uff4c") == "full"
        assert unicode_normalize("\ufb01ne") == "fine"

    def test_nfkc_composes(self):
        assert unicode_normalize("e\u0301") == "\u00e9"

    def test_punctuation_runs_collapse(self):
        assert fold_punctuation("Hello,  world!!") == "Hello world "
        assert fold_punctuation("a\t\n-- b") == "a b"

    def test_cjk_punctuation_collapses(self):
        assert fold_punctuation("你好，世界。") == "你好 世界 "

    def test_symbols_are_not_punctuation(self):
        assert fold_punctuation("1+1=2") == "1+1=2"

    def test_traditional_to_simplified(self):
        assert unify_script("漢語") == "汉语"
        assert unify_script("plain ascii") == "plain ascii"


class TestTextNormalizer:

    def test_full_pipeline(self):
        normalizer = TextNormalizer()
        assert normalizer("ＨＥＬＬＯ,  World!") == "hello world "

    def test_all_stages_disabled_is_identity(self):
        normalizer = TextNormalizer(
            unicode_normalize=False,
            punct_norm=False,
            script_unify=False,
            lowercase=False,
        )
        text = "ＨＥＬＬＯ,  漢語!"
        assert normalizer(text) == text

    def test_stages_toggle_independently(self):
        only_lower = TextNormalizer(unicode_normalize=False, punct_norm=False, script_unify=False)
        assert only_lower("A, B") == "a, b"

        only_punct = TextNormalizer(unicode_normalize=False, script_unify=False, lowercase=False)
        assert only_punct("A, B") == "A B"

    def test_nfkc_runs_before_punctuation_folding(self):
        # U+2105 CARE OF is a symbol; NFKC turns it into "c/o"
        normalizer = TextNormalizer(script_unify=False, lowercase=False)
        assert normalizer("a\u2105b") == "ac ob"


class TestShingles:

    def test_overlapping_windows(self):
        assert list(shingles("abcdef", 3)) == ["abc", "bcd", "cde", "def"]

    def test_exact_length(self):
        assert list(shingles("abc", 3)) == ["abc"]

    def test_short_text_is_single_shingle(self):
        assert list(shingles("ab", 5)) == ["ab"]

    def test_empty_text_is_single_empty_shingle(self):
        assert list(shingles("", 5)) == [""]

    def test_windows_count_code_points(self):
        assert list(shingles("😀😁😂", 2)) == ["😀😁", "😁😂"]
        assert len(list(shingles("日本語のテキスト", 2))) == 7

    def test_unigrams(self):
        assert list(shingles("aba", 1)) == ["a", "b", "a"]
