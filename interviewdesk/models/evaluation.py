"""
Evaluation models for InterviewDesk

Defines the result an evaluator hands back for one answer.
"""

from pydantic import BaseModel, Field, model_validator


class EvaluationOutcome(BaseModel):
    """
    Result of evaluating a single answer.

    Either ``score`` and ``feedback`` are both set (success), or ``error``
    is set (failure). A low score is a success; a failure means the answer
    could not be scored at all.
    """

    score: float | None = Field(default=None, ge=0, le=10)
    feedback: str | None = None
    error: str | None = None

    @model_validator(mode="after")
    def _exactly_one_result(self) -> "EvaluationOutcome":
        succeeded = self.score is not None and self.feedback is not None
        if succeeded == (self.error is not None):
            raise ValueError("outcome needs either score and feedback, or an error")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, score: float, feedback: str) -> "EvaluationOutcome":
        return cls(score=score, feedback=feedback)

    @classmethod
    def failure(cls, error: str) -> "EvaluationOutcome":
        return cls(error=error)
