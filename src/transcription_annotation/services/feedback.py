"""Coaching feedback text from an LLM chat-completions endpoint.

The feedback collaborator is opaque: it receives a prompt describing the
attempt and returns free text. ``ChatCompletionFeedbackClient`` talks to any
OpenAI-compatible ``/chat/completions`` endpoint with retries on transient
failures.
"""

from collections.abc import Iterable
from typing import Any, Final, Protocol

import requests
from tenacity import Retrying, retry_if_exception, stop_after_attempt, wait_exponential

from fluentform_pyutils.errors import FeedbackServiceError, HTTPError
from fluentform_pyutils.logging import get_logger
from src.transcription_annotation.constants import (
    EXCELLENT_THRESHOLD,
    FEEDBACK_API_URL,
    FEEDBACK_MODEL,
)
from src.transcription_annotation.models import AssessmentScores, PhonemeScore

logger = get_logger(__name__)

MAX_PROMPT_PHONEMES: Final[int] = 3
DEFAULT_TIMEOUT_SECONDS: Final[float] = 30.0
DEFAULT_MAX_TOKENS: Final[int] = 600
DEFAULT_TEMPERATURE: Final[float] = 0.7

RETRY_MAX_ATTEMPTS: Final[int] = 3
RETRY_MIN_WAIT: Final[float] = 1.0
RETRY_MAX_WAIT: Final[float] = 10.0

SYSTEM_PROMPT: Final[str] = (
    "You are a friendly speech therapist. Give short, encouraging, concrete advice "
    "on how to improve the pronunciation of the sounds the learner struggled with."
)


class FeedbackGenerator(Protocol):
    """Anything that turns a feedback prompt into coaching text."""

    def generate(self, *, prompt: str) -> str: ...


def _weakest_phonemes(phoneme_scores: Iterable[PhonemeScore]) -> list[PhonemeScore]:
    scored = [
        score
        for score in phoneme_scores
        if isinstance(score.accuracy_score, int | float)
        and not isinstance(score.accuracy_score, bool)
        and score.accuracy_score < EXCELLENT_THRESHOLD
    ]
    return sorted(scored, key=lambda score: score.accuracy_score)[:MAX_PROMPT_PHONEMES]


def build_feedback_prompt(
    *,
    transcription: str,
    scores: AssessmentScores,
    phoneme_scores: Iterable[PhonemeScore],
    reference_text: str | None = None,
) -> str:
    """Describe an attempt for the feedback model.

    Args:
        transcription: What the recognizer heard.
        scores: Overall utterance scores.
        phoneme_scores: Per-phoneme scores; the lowest ones below 90 are listed.
        reference_text: Sentence the learner was asked to read, if any.

    Returns:
        Prompt text.
    """
    lines = []
    if reference_text:
        lines.append(f'Target sentence: "{reference_text}"')
    lines.append(f'What the learner said: "{transcription}"')
    lines.append(
        f"Scores: accuracy {scores.accuracy:.0f}/100, fluency {scores.fluency:.0f}/100, "
        f"completeness {scores.completeness:.0f}/100, prosody {scores.prosody:.0f}/100, "
        f"pronunciation {scores.pronunciation:.0f}/100"
    )

    weakest = _weakest_phonemes(phoneme_scores)
    if weakest:
        lines.append("Weakest sounds:")
        lines.extend(
            f"- '{score.phoneme}' in \"{score.from_word}\": {score.accuracy_score:.0f}/100"
            for score in weakest
        )
    else:
        lines.append("No individual sound scored below 90.")

    lines.append("Write at most 120 words of feedback with one practice exercise.")
    return "\n".join(lines)


def _is_transient(exception: BaseException) -> bool:
    if isinstance(exception, requests.ConnectionError | requests.Timeout):
        return True
    return isinstance(exception, HTTPError) and exception.retryable


class ChatCompletionFeedbackClient:
    """Client for an OpenAI-compatible chat-completions API."""

    def __init__(
        self,
        *,
        api_key: str,
        api_url: str = FEEDBACK_API_URL,
        model: str = FEEDBACK_MODEL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        max_tokens: int = DEFAULT_MAX_TOKENS,
        temperature: float = DEFAULT_TEMPERATURE,
        retry_wait: float = RETRY_MIN_WAIT,
        session: requests.Session | None = None,
    ) -> None:
        """Initialize the feedback client.

        Args:
            api_key: Bearer token for the endpoint.
            api_url: Full chat-completions URL.
            model: Model identifier sent with each request.
            timeout_seconds: Per-request timeout.
            max_tokens: Completion token limit.
            temperature: Sampling temperature.
            retry_wait: Base of the exponential backoff between attempts, in seconds.
            session: Optional session to reuse; one is created otherwise.
        """
        self.api_url = api_url
        self.model = model
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens
        self.temperature = temperature
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
                "X-Title": "FluentForm",
            }
        )
        self._retrying = Retrying(
            retry=retry_if_exception(_is_transient),
            stop=stop_after_attempt(RETRY_MAX_ATTEMPTS),
            wait=wait_exponential(multiplier=retry_wait, max=RETRY_MAX_WAIT),
            reraise=True,
        )

    def __enter__(self) -> "ChatCompletionFeedbackClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP session."""
        self._session.close()

    def _post(self, body: dict[str, Any]) -> dict[str, Any]:
        response = self._session.post(self.api_url, json=body, timeout=self.timeout_seconds)
        if response.status_code >= 400:
            raise HTTPError(
                url=self.api_url,
                status_code=response.status_code,
                method="POST",
                response_text=response.text[:200],
                retryable=response.status_code >= 500 or response.status_code == 429,
            )
        data: dict[str, Any] = response.json()
        return data

    def generate(self, *, prompt: str) -> str:
        """Request feedback text for a prompt.

        Args:
            prompt: Description of the attempt.

        Returns:
            The model's reply, stripped.

        Raises:
            FeedbackServiceError: If the request fails after retries or the reply is malformed.
        """
        body = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "max_tokens": self.max_tokens,
            "temperature": self.temperature,
        }

        logger.info(f"Requesting feedback from {self.model}")
        try:
            data = self._retrying(self._post, body)
        except HTTPError as e:
            raise FeedbackServiceError(exception=e, retryable=e.retryable) from e
        except requests.RequestException as e:
            raise FeedbackServiceError(exception=e, retryable=True) from e
        except ValueError as e:
            raise FeedbackServiceError(exception=e) from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise FeedbackServiceError(exception=e) from e

        if not isinstance(content, str):
            raise FeedbackServiceError(
                exception=ValueError(f"Unexpected feedback content type: {type(content).__name__}")
            )
        return content.strip()
