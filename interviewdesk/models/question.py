"""
Question models for InterviewDesk
"""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field


# Answer recorded when the countdown expires before the candidate responds
NO_ANSWER = "No answer provided (time ran out)"


class Difficulty(str, Enum):
    """Question difficulty levels, in the order they are asked."""

    EASY = "Easy"
    MEDIUM = "Medium"
    HARD = "Hard"

    @classmethod
    def ordered(cls) -> list["Difficulty"]:
        """Easiest first."""
        return [cls.EASY, cls.MEDIUM, cls.HARD]


class DifficultyPolicy(BaseModel):
    """How many questions to draw for one difficulty, and their time limit."""

    count: int = Field(..., ge=0)
    time_limit: int = Field(..., gt=0, description="Seconds allowed per question")


class Question(BaseModel):
    """A single interview question and the candidate's result for it."""

    # Identification
    id: str = Field(default_factory=lambda: str(uuid4()))

    # Content
    text: str = Field(..., description="The question text")
    difficulty: Difficulty
    time_limit: int = Field(..., gt=0, description="Seconds allowed")

    # Response (set once, on submit)
    answer: str | None = None
    time_spent: int | None = Field(default=None, ge=0)
    answered_at: datetime | None = None

    # Evaluation (set once, together)
    score: float | None = Field(default=None, ge=0, le=10)
    feedback: str | None = None

    @property
    def is_answered(self) -> bool:
        return self.answer is not None

    @property
    def is_scored(self) -> bool:
        return self.score is not None
