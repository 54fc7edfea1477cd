"""
Test suite for phoneme-to-grapheme alignment.

Covers the per-character annotation of display text, the word scoping of
phoneme candidates and the priority order of the letter match strategies.
"""

from types import SimpleNamespace

import pytest

from src.transcription_annotation.alignment.grapheme_alignment import (
    MatchTier,
    annotate,
    group_candidates_by_word,
    match_letter,
    reset_annotations,
)
from src.transcription_annotation.models import CharacterKind, PhonemeScore


def _scores(annotations: list) -> list:
    return [a.accuracy_score for a in annotations]


def _phonemes(annotations: list) -> list[str]:
    return [a.phoneme for a in annotations]


@pytest.mark.unit
class TestAnnotate:
    """Test cases for annotate."""

    @pytest.mark.parametrize(
        "text",
        ["red", "red sun", "a  b", "red ", " red", "Red sun.", "x", "tab\there"],
    )
    def test_output_length_matches_text(
        self, text: str, red_phoneme_scores: list[PhonemeScore]
    ) -> None:
        """Every character of the text gets exactly one annotation."""
        annotations = annotate(text, red_phoneme_scores)

        assert len(annotations) == len(text), "Should annotate every character"
        assert "".join(a.character for a in annotations) == text, "Should keep characters in order"

    def test_red_example(self, red_phoneme_scores: list[PhonemeScore]) -> None:
        """Test the canonical single-word example."""
        annotations = annotate("red", red_phoneme_scores)

        assert _phonemes(annotations) == ["r", "eh", "d"]
        assert _scores(annotations) == [62.0, 88.0, 95.0]
        assert all(a.kind == CharacterKind.LETTER for a in annotations)

    def test_unscored_word_gets_defaults(self, sun_phoneme_scores: list[PhonemeScore]) -> None:
        """Letters of a word without phoneme data default to 100 with no symbol."""
        annotations = annotate("sun cat", sun_phoneme_scores)

        assert len(annotations) == 7
        assert _phonemes(annotations[:3]) == ["s", "ah", "n"]
        assert _scores(annotations[:3]) == [80.0, 70.0, 90.0]

        space = annotations[3]
        assert space.kind == CharacterKind.SPACE
        assert space.phoneme == ""
        assert space.accuracy_score is None

        for annotation in annotations[4:]:
            assert annotation.phoneme == "", "Unscored letter should have no symbol"
            assert annotation.accuracy_score == 100.0, "Unscored letter should default to 100"

    def test_spaces_are_space_annotations(self, red_phoneme_scores: list[PhonemeScore]) -> None:
        """Every single-space boundary becomes a space annotation."""
        annotations = annotate("red  red", red_phoneme_scores)

        kinds = [a.kind for a in annotations]
        assert kinds[3] == CharacterKind.SPACE
        assert kinds[4] == CharacterKind.SPACE
        assert all(a.accuracy_score is None for a in annotations if a.is_space)
        assert sum(1 for a in annotations if a.is_space) == 2

    def test_empty_scores_give_defaults(self) -> None:
        """With no phoneme scores every letter gets the default annotation."""
        annotations = annotate("hello world", [])

        letters = [a for a in annotations if not a.is_space]
        assert len(letters) == 10
        assert all(a.accuracy_score == 100.0 and a.phoneme == "" for a in letters)

    def test_phonemes_only_annotate_their_own_word(self) -> None:
        """A phoneme never scores a letter outside its word."""
        scores = [PhonemeScore("d", "red", 30.0)]

        annotations = annotate("red dog", scores)

        assert annotations[2].accuracy_score == 30.0, "Should score 'd' in 'red'"
        assert annotations[4].accuracy_score == 100.0, "Should not score 'd' in 'dog'"
        assert annotations[4].phoneme == ""

    def test_same_letter_scored_per_word(self) -> None:
        """Identical letters in different words take their own word's score."""
        scores = [
            PhonemeScore("r", "red", 62.0),
            PhonemeScore("eh", "red", 88.0),
            PhonemeScore("d", "red", 95.0),
            PhonemeScore("b", "bed", 50.0),
            PhonemeScore("eh", "bed", 40.0),
            PhonemeScore("d", "bed", 30.0),
        ]

        annotations = annotate("red bed", scores)

        assert _scores(annotations[:3]) == [62.0, 88.0, 95.0]
        assert _scores(annotations[4:]) == [50.0, 40.0, 30.0]

    def test_case_insensitive_matching(self) -> None:
        """Words and symbols match regardless of case; output keeps the text's case."""
        scores = [
            PhonemeScore("R", "Red", 62.0),
            PhonemeScore("EH", "RED", 88.0),
            PhonemeScore("D", "red", 95.0),
        ]

        annotations = annotate("RED", scores)

        assert [a.character for a in annotations] == ["R", "E", "D"]
        assert _phonemes(annotations) == ["r", "eh", "d"], "Symbols should be lower-cased"
        assert _scores(annotations) == [62.0, 88.0, 95.0]

    def test_capitalized_word_matches_lower_case(
        self, red_phoneme_scores: list[PhonemeScore]
    ) -> None:
        """A capitalized word gets the same phonemes and scores as its lower-case form."""
        upper = annotate("Red", red_phoneme_scores)
        lower = annotate("red", red_phoneme_scores)

        assert list(zip(_phonemes(upper), _scores(upper), strict=True)) == list(
            zip(_phonemes(lower), _scores(lower), strict=True)
        ), "Case of the display text should not change the alignment"

    def test_mapping_scores(self) -> None:
        """Phoneme scores given as mappings with relay or field names are used."""
        scores = [
            {"phoneme": "R", "fromWord": "red", "accuracyScore": 62.0},
            {"phoneme": "eh", "from_word": "Red", "accuracy_score": 88.0, "offset": 100},
            {"phoneme": "d", "fromWord": "red"},
            {"phoneme": 5, "fromWord": "red", "accuracyScore": 10.0},
        ]

        annotations = annotate("red", scores)

        assert _phonemes(annotations) == ["r", "eh", "d"]
        assert _scores(annotations) == [62.0, 88.0, 100.0], "Missing score should default to 100"

    def test_scores_pass_through_unchanged(self) -> None:
        """Out-of-range and non-numeric scores are carried over as given."""
        scores = [PhonemeScore("r", "red", 150.0), PhonemeScore("d", "red", "n/a")]

        annotations = annotate("red", scores)

        assert annotations[0].accuracy_score == 150.0
        assert annotations[2].accuracy_score == "n/a"

    def test_punctuation_is_part_of_the_word(self, red_phoneme_scores: list[PhonemeScore]) -> None:
        """Punctuation attached to a word prevents it from matching the scored word."""
        annotations = annotate("red.", red_phoneme_scores)

        assert len(annotations) == 4
        assert _scores(annotations) == [100.0] * 4

    @pytest.mark.parametrize("text", ["", None, 42, ["red"]])
    def test_non_text_yields_nothing(
        self, text: object, red_phoneme_scores: list[PhonemeScore]
    ) -> None:
        """Empty or non-string text yields no annotations."""
        assert annotate(text, red_phoneme_scores) == []

    def test_malformed_scores_are_excluded(self) -> None:
        """Scores with a missing or empty symbol or word never match."""
        scores = [
            PhonemeScore("", "red", 10.0),
            PhonemeScore("r", "", 10.0),
            SimpleNamespace(phoneme=None, from_word="red", accuracy_score=10.0),
            SimpleNamespace(phoneme="r", from_word=7, accuracy_score=10.0),
            SimpleNamespace(from_word="red"),
            "not a score",
        ]

        annotations = annotate("red", scores)

        assert _scores(annotations) == [100.0, 100.0, 100.0]
        assert _phonemes(annotations) == ["", "", ""]

    def test_accepts_duck_typed_scores(self) -> None:
        """Any object with phoneme, from_word and accuracy_score attributes is usable."""
        scores = [SimpleNamespace(phoneme="r", from_word="red", accuracy_score=55.0)]

        annotations = annotate("red", scores)

        assert annotations[0].accuracy_score == 55.0
        assert annotations[0].phoneme == "r"

    def test_none_scores_treated_as_empty(self) -> None:
        """Missing phoneme data behaves like an empty list."""
        annotations = annotate("hi", None)

        assert _scores(annotations) == [100.0, 100.0]

    def test_letter_order_does_not_depend_on_input_order(self) -> None:
        """Scores from different words may be interleaved in any order."""
        scores = [
            PhonemeScore("n", "sun", 90.0),
            PhonemeScore("d", "red", 95.0),
            PhonemeScore("s", "sun", 80.0),
            PhonemeScore("r", "red", 62.0),
        ]

        annotations = annotate("red sun", scores)

        assert annotations[0].accuracy_score == 62.0
        assert annotations[2].accuracy_score == 95.0
        assert annotations[4].accuracy_score == 80.0
        assert annotations[6].accuracy_score == 90.0


@pytest.mark.unit
class TestMatchLetter:
    """Test cases for the match strategy priority."""

    def test_exact_match_beats_earlier_table_match(self) -> None:
        """An exact symbol wins even when an earlier candidate matches via the table."""
        candidates = [PhonemeScore("dx", "at", 50.0), PhonemeScore("t", "at", 95.0)]

        match, tier = match_letter(letter="t", candidates=candidates)

        assert tier == MatchTier.EXACT
        assert match is not None and match.phoneme == "t"

    def test_table_match_uses_grapheme_membership(self) -> None:
        """A letter listed as a spelling of a key inside the symbol matches that candidate."""
        candidates = [PhonemeScore("r", "red", 62.0), PhonemeScore("eh", "red", 88.0)]

        match, tier = match_letter(letter="e", candidates=candidates)

        assert tier == MatchTier.TABLE
        assert match is not None and match.phoneme == "eh"

    def test_table_match_prefers_earlier_candidate(self) -> None:
        """Among table matches the first candidate in input order wins."""
        candidates = [PhonemeScore("s", "cat", 30.0), PhonemeScore("k", "cat", 60.0)]

        match, tier = match_letter(letter="c", candidates=candidates)

        assert tier == MatchTier.TABLE
        assert match is not None and match.phoneme == "s"

    def test_fuzzy_match_on_substring(self) -> None:
        """A letter inside a multi-letter symbol matches when no spelling lists it."""
        candidates = [
            PhonemeScore("sh", "ship", 70.0),
            PhonemeScore("ih", "ship", 85.0),
            PhonemeScore("p", "ship", 90.0),
        ]

        match, tier = match_letter(letter="h", candidates=candidates)

        assert tier == MatchTier.FUZZY
        assert match is not None and match.phoneme == "sh"

    def test_fuzzy_match_on_partial_spelling(self) -> None:
        """A letter contained in a multi-letter spelling matches in the fuzzy tier."""
        candidates = [PhonemeScore("r", "wrap", 40.0), PhonemeScore("ae", "wrap", 80.0)]

        match, tier = match_letter(letter="w", candidates=candidates)

        assert tier == MatchTier.FUZZY
        assert match is not None and match.phoneme == "r"

    def test_word_fallback_uses_first_candidate(self) -> None:
        """A letter no strategy resolves takes the word's first candidate."""
        candidates = [PhonemeScore("dx", "at", 50.0), PhonemeScore("t", "at", 95.0)]

        match, tier = match_letter(letter="a", candidates=candidates)

        assert tier == MatchTier.WORD_FALLBACK
        assert match is not None and match.phoneme == "dx"

    def test_no_candidates(self) -> None:
        """Without candidates there is no match."""
        assert match_letter(letter="a", candidates=[]) == (None, MatchTier.DEFAULT)

    def test_every_letter_of_scored_word_is_annotated(self) -> None:
        """Fallbacks make sure no letter of a scored word stays unscored."""
        annotations = annotate("at", [PhonemeScore("dx", "at", 50.0), PhonemeScore("t", "at", 95.0)])

        assert _phonemes(annotations) == ["dx", "t"]
        assert _scores(annotations) == [50.0, 95.0]

    def test_ship_annotation(self) -> None:
        """Test a word mixing table, fuzzy and exact matches."""
        scores = [
            PhonemeScore("sh", "ship", 70.0),
            PhonemeScore("ih", "ship", 85.0),
            PhonemeScore("p", "ship", 90.0),
        ]

        annotations = annotate("ship", scores)

        assert _phonemes(annotations) == ["sh", "sh", "ih", "p"]
        assert _scores(annotations) == [70.0, 70.0, 85.0, 90.0]


@pytest.mark.unit
class TestCandidatesAndReset:
    """Test cases for candidate grouping and the reset annotation."""

    def test_group_candidates_by_word(self) -> None:
        """Candidates are grouped under lower-cased words in input order."""
        scores = [
            PhonemeScore("R", "Red", 62.0),
            PhonemeScore("s", "sun", 80.0),
            PhonemeScore("D", "RED", 95.0),
        ]

        groups = group_candidates_by_word(scores)

        assert list(groups) == ["red", "sun"]
        assert [s.phoneme for s in groups["red"]] == ["r", "d"]

    def test_reset_annotations(self) -> None:
        """Reset yields the all-default annotation with spaces kept."""
        annotations = reset_annotations("hi there")

        assert len(annotations) == 8
        assert annotations[2].is_space
        letters = [a for a in annotations if not a.is_space]
        assert all(a.accuracy_score == 100.0 and a.phoneme == "" for a in letters)

    def test_reset_of_empty_text(self) -> None:
        """Reset of an empty text is empty."""
        assert reset_annotations("") == []
