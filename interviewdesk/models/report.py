"""
Report models for InterviewDesk

Defines the structure of the final score breakdown.
"""

from enum import Enum

from pydantic import BaseModel, Field

from interviewdesk.models.question import Difficulty


class ScoreTier(str, Enum):
    """Qualitative label for an overall score."""

    OUTSTANDING = "Outstanding"  # 8-10
    GOOD = "Good"  # 6-8
    AVERAGE = "Average"  # 4-6
    BELOW_EXPECTATIONS = "Below expectations"  # 0-4

    @classmethod
    def for_score(cls, score: float) -> "ScoreTier":
        if score >= 8:
            return cls.OUTSTANDING
        elif score >= 6:
            return cls.GOOD
        elif score >= 4:
            return cls.AVERAGE
        else:
            return cls.BELOW_EXPECTATIONS

    @property
    def description(self) -> str:
        """Tier description for the summary text."""
        descriptions = {
            "Outstanding": "Outstanding performance! The candidate demonstrated excellent knowledge across the board.",
            "Good": "Good performance overall. The candidate shows solid understanding with room for improvement in some areas.",
            "Average": "Average performance. The candidate has basic understanding but needs significant improvement.",
            "Below expectations": "Below expectations. The candidate needs substantial development in the fundamentals.",
        }
        return descriptions[self.value]


class DifficultyScore(BaseModel):
    """Mean score for all questions of one difficulty."""

    difficulty: Difficulty
    questions: int = 0
    mean_score: float = Field(default=0.0, ge=0, le=10)


class ScoreBreakdown(BaseModel):
    """Structured final report for a session."""

    overall_score: float = Field(..., ge=0, le=10)
    tier: ScoreTier
    by_difficulty: list[DifficultyScore] = Field(
        default_factory=list,
        description="Always Easy, Medium, Hard"
    )

    def render(self) -> str:
        """Render the deterministic summary text."""
        lines = [
            f"Overall Score: {self.overall_score:.1f}/10",
            f"Tier: {self.tier.value}",
            "",
            self.tier.description,
            "",
            "Breakdown:",
        ]
        for entry in self.by_difficulty:
            lines.append(f"• {entry.difficulty.value} Questions: {entry.mean_score:.1f}/10")
        return "\n".join(lines)
