"""
Evaluator for InterviewDesk

Scores a single answer. The session engine depends only on the
``Evaluator`` contract; ``HeuristicEvaluator`` is the built-in
keyword/length based implementation.
"""

import asyncio
import logging
import random
import re
from abc import ABC, abstractmethod

from interviewdesk.config.settings import get_settings
from interviewdesk.models.evaluation import EvaluationOutcome

logger = logging.getLogger(__name__)


class Evaluator(ABC):
    """
    Contract for answer scoring.

    ``evaluate`` never raises for well-formed input: timeouts and internal
    errors come back as a failed ``EvaluationOutcome`` so callers can tell
    "low score" apart from "could not score".
    """

    def __init__(self, timeout_seconds: float | None = None):
        if timeout_seconds is None:
            timeout_seconds = get_settings().evaluation_timeout_seconds
        self.timeout_seconds = timeout_seconds

    async def evaluate(
        self,
        question_text: str,
        answer_text: str,
        elapsed_seconds: int,
    ) -> EvaluationOutcome:
        """
        Score one answer.

        Args:
            question_text: The question as asked
            answer_text: The candidate's answer (may be the no-answer sentinel)
            elapsed_seconds: Seconds the candidate spent, >= 0

        Returns:
            Successful outcome with score and feedback, or a failed outcome
        """
        if elapsed_seconds < 0:
            raise ValueError(f"elapsed_seconds must be >= 0, got {elapsed_seconds}")

        try:
            return await asyncio.wait_for(
                self.score_answer(question_text, answer_text, elapsed_seconds),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Evaluation timed out after {self.timeout_seconds}s")
            return EvaluationOutcome.failure(
                f"Evaluation timed out after {self.timeout_seconds}s"
            )
        except Exception as e:
            logger.error(f"Evaluation error: {e}")
            return EvaluationOutcome.failure(f"Evaluation error: {e}")

    @abstractmethod
    async def score_answer(
        self,
        question_text: str,
        answer_text: str,
        elapsed_seconds: int,
    ) -> EvaluationOutcome:
        """Produce the outcome. Implementations may raise; ``evaluate`` converts."""


class HeuristicEvaluator(Evaluator):
    """
    Heuristic-based evaluation when no model is available.

    Scores on answer length, technical vocabulary and how much of the
    time budget was used, plus a small random jitter. Inject a seeded
    ``random.Random`` for reproducible scores.
    """

    TECHNICAL_KEYWORDS = re.compile(
        r"react|component|javascript|node|api|function|state|hook",
        re.IGNORECASE,
    )

    def __init__(
        self,
        rng: random.Random | None = None,
        timeout_seconds: float | None = None,
        jitter: float = 1.0,
    ):
        """
        Initialize heuristic evaluator.

        Args:
            rng: Random source for score jitter
            timeout_seconds: Upper bound on a single evaluation
            jitter: Half-width of the random adjustment (0 disables it)
        """
        super().__init__(timeout_seconds)
        self.rng = rng or random.Random()
        self.jitter = jitter

    async def score_answer(
        self,
        question_text: str,
        answer_text: str,
        elapsed_seconds: int,
    ) -> EvaluationOutcome:
        analysis = self._analyze_answer(answer_text, elapsed_seconds)

        adjustment = (self.rng.random() - 0.5) * 2 * self.jitter
        score = max(0.0, min(10.0, analysis["base_score"] + adjustment))
        score = round(score, 1)

        feedback = self._generate_feedback(score, analysis)
        return EvaluationOutcome.success(score, feedback)

    def _analyze_answer(self, answer_text: str, elapsed_seconds: int) -> dict:
        """Analyze answer text for scoring signals."""
        length = len(answer_text.strip())
        has_keywords = bool(self.TECHNICAL_KEYWORDS.search(answer_text))

        base_score = 5.0

        # Length
        if length > 200:
            base_score += 2
        elif length > 100:
            base_score += 1
        elif length < 20:
            base_score -= 2

        # Vocabulary
        if has_keywords:
            base_score += 1

        # Using most of a 60s reference budget
        if elapsed_seconds / 60 > 0.7:
            base_score += 0.5

        return {
            "length": length,
            "has_keywords": has_keywords,
            "base_score": base_score,
        }

    def _generate_feedback(self, score: float, analysis: dict) -> str:
        """Generate feedback based on heuristic analysis."""
        feedback = []

        if score >= 8:
            feedback.append("Excellent answer!")
        elif score >= 6:
            feedback.append("Good response with solid understanding.")
        elif score >= 4:
            feedback.append("Fair answer, but could be improved.")
        else:
            feedback.append("Needs improvement.")

        if analysis["length"] < 20:
            feedback.append("Consider providing more detailed explanations.")
        elif analysis["length"] > 300:
            feedback.append("Try to be more concise while maintaining depth.")

        if not analysis["has_keywords"]:
            feedback.append("Include more technical terms relevant to the question.")

        return " ".join(feedback)
