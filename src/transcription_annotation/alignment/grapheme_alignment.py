"""Phoneme-to-grapheme alignment for the visual transcription display.

Reconstructs, character by character, which scored phoneme applies to each
letter of a displayed text. Phonemes are only eligible inside the word they
were recognized in, and each letter is resolved with a fixed priority of
match strategies; the first candidate of the word is used when no strategy
matches, so every letter of a scored word gets some annotation.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from enum import StrEnum
from typing import Any, Final

from fluentform_pyutils.logging import get_logger
from fluentform_pyutils.mappings import PHONEME_TO_GRAPHEMES
from src.transcription_annotation.constants import DEFAULT_ACCURACY_SCORE, WORD_SEPARATOR
from src.transcription_annotation.models import AnnotatedCharacter, PhonemeScore

logger = get_logger(__name__)

Matcher = Callable[[str, Sequence[PhonemeScore]], PhonemeScore | None]


class MatchTier(StrEnum):
    """Strategy that resolved a letter, in priority order."""

    EXACT = "exact"
    TABLE = "table"
    FUZZY = "fuzzy"
    WORD_FALLBACK = "word_fallback"
    DEFAULT = "default"


def _exact_match(letter: str, candidates: Sequence[PhonemeScore]) -> PhonemeScore | None:
    """Return the first candidate whose symbol is the letter itself."""
    for candidate in candidates:
        if candidate.phoneme == letter:
            return candidate
    return None


def _table_match(letter: str, candidates: Sequence[PhonemeScore]) -> PhonemeScore | None:
    """Return the first candidate whose symbol contains a table key spelled by the letter.

    Candidates are scanned in input order and, for each, table keys in table order.
    The letter must be one of the listed spellings exactly.
    """
    for candidate in candidates:
        for symbol, graphemes in PHONEME_TO_GRAPHEMES.items():
            if symbol in candidate.phoneme and letter in graphemes:
                return candidate
    return None


def _spelled_by_table(letter: str, phoneme: str) -> bool:
    """Check whether any table key inside ``phoneme`` has a spelling containing ``letter``."""
    return any(
        symbol in phoneme and any(letter in grapheme for grapheme in graphemes)
        for symbol, graphemes in PHONEME_TO_GRAPHEMES.items()
    )


def _fuzzy_match(letter: str, candidates: Sequence[PhonemeScore]) -> PhonemeScore | None:
    """Return the first candidate related to the letter by any substring check."""
    for candidate in candidates:
        if (
            letter in candidate.phoneme
            or candidate.phoneme in letter
            or _spelled_by_table(letter, candidate.phoneme)
        ):
            return candidate
    return None


MATCH_STRATEGIES: Final[tuple[tuple[MatchTier, Matcher], ...]] = (
    (MatchTier.EXACT, _exact_match),
    (MatchTier.TABLE, _table_match),
    (MatchTier.FUZZY, _fuzzy_match),
)


def match_letter(
    *, letter: str, candidates: Sequence[PhonemeScore]
) -> tuple[PhonemeScore | None, MatchTier]:
    """Pick the phoneme that scores a single lower-cased letter.

    Args:
        letter: Lower-cased character to resolve.
        candidates: Normalized phoneme scores of the letter's word, in input order.

    Returns:
        The selected phoneme score (None when the word has no candidates) and
        the tier that selected it.
    """
    if not candidates:
        return None, MatchTier.DEFAULT

    for tier, matcher in MATCH_STRATEGIES:
        match = matcher(letter, candidates)
        if match is not None:
            return match, tier

    return candidates[0], MatchTier.WORD_FALLBACK


# Mapping entries may use the relay's camel-case names.
_FIELD_ALIASES: Final[dict[str, tuple[str, ...]]] = {
    "phoneme": ("phoneme",),
    "from_word": ("from_word", "fromWord"),
    "accuracy_score": ("accuracy_score", "accuracyScore"),
    "offset": ("offset",),
    "duration": ("duration",),
}


def _field(score: Any, name: str, default: Any = None) -> Any:
    if isinstance(score, Mapping):
        for key in _FIELD_ALIASES[name]:
            if key in score:
                return score[key]
        return default
    return getattr(score, name, default)


def _normalize(score: Any) -> PhonemeScore | None:
    """Lower-case a phoneme score, or drop it when its symbol or word is unusable.

    Accepts ``PhonemeScore``-like objects and mappings with the same fields.
    """
    phoneme = _field(score, "phoneme")
    from_word = _field(score, "from_word")
    if not isinstance(phoneme, str) or not phoneme:
        return None
    if not isinstance(from_word, str) or not from_word:
        return None

    return PhonemeScore(
        phoneme=phoneme.lower(),
        from_word=from_word.lower(),
        accuracy_score=_field(score, "accuracy_score", DEFAULT_ACCURACY_SCORE),
        offset=_field(score, "offset"),
        duration=_field(score, "duration"),
    )


def group_candidates_by_word(
    phoneme_scores: Iterable[Any] | None,
) -> dict[str, list[PhonemeScore]]:
    """Normalize phoneme scores and index them by lower-cased word.

    Args:
        phoneme_scores: Raw phoneme scores; entries with a missing or empty symbol
            or word are excluded.

    Returns:
        Mapping of word to its candidates, preserving input order within each word.
    """
    candidates: dict[str, list[PhonemeScore]] = {}
    excluded = 0
    for score in phoneme_scores or ():
        normalized = _normalize(score)
        if normalized is None:
            excluded += 1
            continue
        candidates.setdefault(normalized.from_word, []).append(normalized)

    if excluded:
        logger.debug(f"Excluded {excluded} phoneme scores without a usable symbol or word")
    return candidates


def annotate(text: Any, phoneme_scores: Iterable[Any] | None) -> list[AnnotatedCharacter]:
    """Annotate every character of ``text`` with the phoneme that scored it.

    Words are split on single spaces. Each letter is resolved against the
    phonemes of its own word with exact, table and fuzzy matching, falling back
    to the word's first phoneme, or to an unscored annotation (score 100, no
    symbol) when the word has no phonemes. Spaces become space annotations.
    Scores are carried over unchanged.

    Args:
        text: Display text. Anything that is not a non-empty string yields no annotations.
        phoneme_scores: Scored phonemes tagged with their words, in any order.

    Returns:
        One annotation per character of ``text``, in order.
    """
    if not isinstance(text, str) or not text:
        return []

    candidates_by_word = group_candidates_by_word(phoneme_scores)
    words = text.split(WORD_SEPARATOR)
    annotations: list[AnnotatedCharacter] = []
    tier_counts: dict[MatchTier, int] = {}

    for index, word in enumerate(words):
        candidates = candidates_by_word.get(word.lower(), [])
        for character in word:
            score, tier = match_letter(letter=character.lower(), candidates=candidates)
            tier_counts[tier] = tier_counts.get(tier, 0) + 1
            if score is None:
                annotations.append(AnnotatedCharacter.unscored(character))
            else:
                annotations.append(AnnotatedCharacter.from_phoneme(character, score))

        if index < len(words) - 1:
            annotations.append(AnnotatedCharacter.space(WORD_SEPARATOR))

    logger.debug(
        f"Annotated {len(text)} characters across {len(words)} words: "
        + ", ".join(f"{tier.value}={count}" for tier, count in tier_counts.items())
    )
    return annotations


def reset_annotations(text: Any) -> list[AnnotatedCharacter]:
    """Return the neutral annotation of ``text``: no phonemes, every letter at score 100."""
    return annotate(text, None)
