import pytest

from inventory_assistant.performer_matcher import PerformerMatcher, common_prefix_length


class TestPerformerMatcher:
    """Resolution of partial performer names."""

    @pytest.fixture
    def matcher(self):
        return PerformerMatcher()

    @pytest.mark.parametrize(
        "filter_text,candidate,expected",
        [
            ("ivan", "Ivan", 2000),
            ("iv", "Ivan Petrov", 1502),
            ("ivan petrov jr", "Ivan Petrov", 1411),
            ("petrov", "Ivan Petrov", 1206),
            ("ivanov", "ivanka", 904),
            ("xyz", "Ivan", 0),
            ("ivan", None, 0),
            ("  ", "Ivan", 0),
        ],
    )
    def test_score(self, matcher, filter_text, candidate, expected):
        assert matcher.score(filter_text, candidate) == expected

    def test_prefix_beats_substring(self, matcher):
        assert matcher.score("iva", "Ivan Petrov") > matcher.score("iva", "Mariva")

    def test_rank_drops_zero_scores(self, matcher):
        ranked = matcher.rank("petr", ["Ivan Petrov", "Maria", None, ""])
        assert [entry.value for entry in ranked] == ["Ivan Petrov"]

    def test_resolve_single_match(self, matcher):
        assert matcher.resolve("petr", ["Ivan Petrov", "Maria Lopez"]) == "Ivan Petrov"

    def test_short_ambiguous_filter(self, matcher):
        assert matcher.resolve("iv", ["Ivan Petrov", "Ivana K."]) is None

    def test_longer_filter_breaks_near_tie(self, matcher):
        assert matcher.resolve("maria", ["Maria Chen", "Maria Lopez"]) == "Maria Lopez"

    def test_clear_winner(self, matcher):
        assert matcher.resolve("ivan p", ["Ivan Petrov", "Ivana K."]) == "Ivan Petrov"

    @pytest.mark.parametrize("filter_text,candidates", [(None, ["Ivan"]), ("  ", ["Ivan"]), ("ivan", []), ("ivan", None)])
    def test_nothing_to_resolve(self, matcher, filter_text, candidates):
        assert matcher.resolve(filter_text, candidates) is None

    def test_common_prefix_length(self):
        assert common_prefix_length("inventory", "invoice") == 3
        assert common_prefix_length("", "abc") == 0

    def test_four_letter_filter_matching_two_names_equally(self, matcher):
        candidates = ["Ivan Petrov", "Ivana K."]

        assert [matcher.score("ivan", name) for name in candidates] == [1504, 1504]
        assert matcher.resolve("ivan", candidates) is None
