"""
Aggregator for InterviewDesk

Combines per-question scores into the final score and the summary
grouped by difficulty. Pure functions; never mutates the questions.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Sequence

from interviewdesk.core.errors import IncompleteScoring
from interviewdesk.models.question import Difficulty, Question
from interviewdesk.models.report import DifficultyScore, ScoreBreakdown, ScoreTier


def round_score(value: float | Decimal) -> float:
    """Round to one decimal place, halves away from zero."""
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return float(value.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def _mean(scores: Sequence[float]) -> Decimal:
    """Exact decimal mean of one-decimal scores; 0 for no scores."""
    if not scores:
        return Decimal(0)
    return sum((Decimal(str(s)) for s in scores), Decimal(0)) / len(scores)


def build_breakdown(questions: Sequence[Question]) -> ScoreBreakdown:
    """
    Build the structured score report.

    Raises:
        IncompleteScoring: Some question has no score yet
    """
    unscored = [q.id for q in questions if q.score is None]
    if unscored or not questions:
        raise IncompleteScoring(
            f"{len(unscored)} of {len(questions)} questions have no score"
        )

    overall = round_score(_mean([q.score for q in questions]))

    by_difficulty = []
    for difficulty in Difficulty.ordered():
        scores = [q.score for q in questions if q.difficulty == difficulty]
        by_difficulty.append(
            DifficultyScore(
                difficulty=difficulty,
                questions=len(scores),
                mean_score=round_score(_mean(scores)),
            )
        )

    return ScoreBreakdown(
        overall_score=overall,
        tier=ScoreTier.for_score(overall),
        by_difficulty=by_difficulty,
    )


def aggregate(questions: Sequence[Question]) -> tuple[float, str]:
    """
    Compute the final score and summary text for a scored question set.

    Returns:
        (final score rounded to one decimal, rendered summary)
    """
    breakdown = build_breakdown(questions)
    return breakdown.overall_score, breakdown.render()
