"""Models for the transcription annotation pipeline.

This module contains the core data structures shared by the payload adapter,
the grapheme alignment engine and the display rules: scored phonemes coming
from the assessment service, the per-character annotations handed to the
rendering layer, and the overall assessment summary.
"""

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from src.transcription_annotation.constants import DEFAULT_ACCURACY_SCORE


class CharacterKind(StrEnum):
    """Kind of a displayed character."""

    LETTER = "letter"
    SPACE = "space"


@dataclass(frozen=True)
class PhonemeScore:
    """A single scored phoneme tagged with the word it was recognized in.

    Attributes:
        phoneme: Phoneme symbol as returned by the assessment service.
        from_word: Word the phoneme belongs to.
        accuracy_score: Accuracy sub-score, nominally 0-100. Passed through unvalidated.
        offset: Optional offset of the phoneme in the audio, in service ticks.
        duration: Optional duration of the phoneme, in service ticks.
    """

    phoneme: str
    from_word: str
    accuracy_score: Any = DEFAULT_ACCURACY_SCORE
    offset: int | None = None
    duration: int | None = None

    def __str__(self) -> str:
        """Return string representation of the phoneme score."""
        return f"{self.phoneme} ({self.from_word}): {self.accuracy_score}"


@dataclass(frozen=True)
class AnnotatedCharacter:
    """Annotation of one displayed character.

    Attributes:
        character: The character as it appears in the display text.
        kind: Whether the character is a letter or a word-separating space.
        phoneme: Symbol of the phoneme that scored this character, empty if none.
        accuracy_score: Score carried over from the phoneme, None for spaces.
    """

    character: str
    kind: CharacterKind = CharacterKind.LETTER
    phoneme: str = ""
    accuracy_score: Any = DEFAULT_ACCURACY_SCORE

    @classmethod
    def space(cls, character: str = " ") -> "AnnotatedCharacter":
        """Create a space annotation carrying no symbol and no score."""
        return cls(character=character, kind=CharacterKind.SPACE, phoneme="", accuracy_score=None)

    @classmethod
    def unscored(cls, character: str) -> "AnnotatedCharacter":
        """Create the default annotation for a letter with no phoneme data."""
        return cls(character=character)

    @classmethod
    def from_phoneme(cls, character: str, score: PhonemeScore) -> "AnnotatedCharacter":
        """Create a letter annotation scored by the given phoneme."""
        return cls(character=character, phoneme=score.phoneme, accuracy_score=score.accuracy_score)

    @property
    def is_space(self) -> bool:
        """Whether this annotation marks a word separator."""
        return self.kind == CharacterKind.SPACE


@dataclass
class AssessmentScores:
    """Overall scores reported by the assessment service for an utterance."""

    accuracy: float = 0.0
    fluency: float = 0.0
    completeness: float = 0.0
    prosody: float = 0.0
    pronunciation: float = 0.0


@dataclass
class AssessmentResult:
    """Recognition result reshaped for annotation.

    Attributes:
        transcription: Recognized text.
        scores: Overall utterance scores.
        phoneme_scores: Flat list of scored phonemes, each tagged with its word.
    """

    transcription: str
    scores: AssessmentScores = field(default_factory=AssessmentScores)
    phoneme_scores: list[PhonemeScore] = field(default_factory=list)
