import pytest

from inventory_assistant.fuzzy_matcher import FuzzyMatcher, levenshtein_distance


class TestLevenshteinDistance:
    """Edit distance used by the fuzzy matcher."""

    @pytest.mark.parametrize(
        "left,right,expected",
        [
            ("kitten", "sitting", 3),
            ("stock", "stok", 1),
            ("", "abc", 3),
            ("same", "same", 0),
            (None, None, 0),
            (None, "abcd", 4),
        ],
    )
    def test_known_distances(self, left, right, expected):
        assert levenshtein_distance(left, right) == expected

    @pytest.mark.parametrize("left,right", [("forecast", "forcast"), ("lvl", "level"), ("abc", "")])
    def test_symmetric(self, left, right):
        assert levenshtein_distance(left, right) == levenshtein_distance(right, left)


class TestFuzzyMatcher:
    """Typo tolerance for inventory vocabulary."""

    @pytest.fixture
    def matcher(self):
        return FuzzyMatcher()

    def test_known_misspelling_matches(self, matcher):
        assert matcher.matches("stok", "stock")
        assert matcher.matches("Transacton", "transaction")

    def test_unrelated_word_does_not_match(self, matcher):
        assert not matcher.matches("xyz", "stock")

    def test_blank_or_unknown_category(self, matcher):
        assert not matcher.matches("", "stock")
        assert not matcher.matches(None, "stock")
        assert not matcher.matches("stok", "pallet")

    def test_best_match_prefers_closest_variant(self, matcher):
        assert matcher.best_match("stok", "stock") == "stok"

    def test_best_match_returns_word_when_nothing_is_close(self, matcher):
        assert matcher.best_match("banana", "stock") == "banana"

    def test_contains_fuzzy_match(self, matcher):
        assert matcher.contains_fuzzy_match("what is my stok", "stock")
        assert not matcher.contains_fuzzy_match(None, "stock")

    def test_expand_appends_canonical_spelling(self, matcher):
        assert matcher.expand_with_fuzzy_matching("Stok") == "stok stock"

    def test_expand_leaves_blank_input_alone(self, matcher):
        assert matcher.expand_with_fuzzy_matching("") == ""
        assert matcher.expand_with_fuzzy_matching(None) is None

    def test_count_corrections(self, matcher):
        assert matcher.count_fuzzy_corrections("stok") == 1
        assert matcher.count_fuzzy_corrections("stock") == 0
        assert matcher.count_fuzzy_corrections("   ") == 0
