"""Edit-distance matching of tokens against known misspellings of domain terms"""

from typing import FrozenSet, Mapping, Optional

from .lexicon import FUZZY_VARIANTS, MAX_EDIT_DISTANCE


def levenshtein_distance(s1: Optional[str], s2: Optional[str]) -> int:
    """Classic DP edit distance with unit insert, delete and substitute costs"""
    if s1 is None:
        return 0 if s2 is None else len(s2)
    if s2 is None:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i in range(1, len(s1) + 1):
        current = [i] + [0] * len(s2)
        for j in range(1, len(s2) + 1):
            if s1[i - 1] == s2[j - 1]:
                current[j] = previous[j - 1]
            else:
                current[j] = 1 + min(previous[j], current[j - 1], previous[j - 1])
        previous = current

    return previous[len(s2)]


class FuzzyMatcher:
    """Tolerates typos in inventory vocabulary ("stok", "transacton", ...)"""

    def __init__(
        self,
        variants: Mapping[str, FrozenSet[str]] = FUZZY_VARIANTS,
        max_distance: int = MAX_EDIT_DISTANCE,
    ):
        self.variants = variants
        self.max_distance = max_distance

    @property
    def categories(self):
        return tuple(self.variants)

    def matches(self, word: Optional[str], category: str) -> bool:
        """True if ``word`` is a known variant of ``category`` or within edit distance"""
        if word is None or not word.strip():
            return False

        clean_word = word.lower().strip()
        variations = self._variations(category)

        if clean_word in variations:
            return True

        return any(
            levenshtein_distance(clean_word, variation) <= self.max_distance
            for variation in variations
        )

    def best_match(self, word: Optional[str], category: str) -> Optional[str]:
        """Closest variant within the distance threshold, else ``word`` unchanged"""
        if word is None or not word.strip():
            return word

        clean_word = word.lower().strip()
        best = word
        min_distance = None

        # sorted() keeps the result stable when two variants are equally close
        for variation in sorted(self._variations(category)):
            distance = levenshtein_distance(clean_word, variation)
            if distance <= self.max_distance and (min_distance is None or distance < min_distance):
                min_distance = distance
                best = variation

        return best

    def contains_fuzzy_match(self, message: Optional[str], category: str) -> bool:
        if message is None or not message.strip():
            return False
        return any(self.matches(word, category) for word in message.lower().split())

    def expand_with_fuzzy_matching(self, message: Optional[str]) -> Optional[str]:
        """Append the canonical spelling for every misspelled domain token.

        Additive: the misspelling stays in place so keyword checks see both.
        """
        if message is None or not message.strip():
            return message

        lowered = message.lower()
        corrections = self._corrections(lowered)
        if not corrections:
            return lowered
        return lowered + "".join(" " + canonical for canonical in corrections)

    def count_fuzzy_corrections(self, message: Optional[str]) -> int:
        """Number of canonical words ``expand_with_fuzzy_matching`` would append"""
        if message is None or not message.strip():
            return 0
        return len(self._corrections(message.lower()))

    def _corrections(self, lowered: str):
        corrections = []
        for word in lowered.split():
            for category in self.variants:
                if word != category and self.matches(word, category):
                    corrections.append(category)
        return corrections

    def _variations(self, category: Optional[str]) -> FrozenSet[str]:
        if not category:
            return frozenset()
        return self.variants.get(category.lower(), frozenset())
