"""
Question Bank for InterviewDesk

Holds the question catalog bucketed by difficulty and draws the question
set for a new session.
"""

import logging
import random
from typing import Mapping, Sequence

from interviewdesk.config.settings import Settings, get_settings
from interviewdesk.core.errors import ConfigurationError
from interviewdesk.models.question import Difficulty, DifficultyPolicy, Question

logger = logging.getLogger(__name__)


DEFAULT_CATALOG: dict[Difficulty, list[str]] = {
    Difficulty.EASY: [
        "What is the difference between let, const, and var in JavaScript?",
        "Explain the concept of props in React components.",
        "What is the purpose of the useState hook in React?",
        "How do you handle events in React?",
        "What is the difference between null and undefined in JavaScript?",
    ],
    Difficulty.MEDIUM: [
        "Explain the React component lifecycle methods and their purposes.",
        "How would you optimize a React application's performance?",
        "Describe the differences between REST and GraphQL APIs.",
        "How do you handle state management in a large React application?",
        "Explain the concept of middleware in Express.js and provide an example.",
    ],
    Difficulty.HARD: [
        "Design and implement a custom React hook for handling complex async operations with caching.",
        "How would you implement server-side rendering (SSR) in a React application and what are the trade-offs?",
        "Explain the event loop in Node.js and how it handles asynchronous operations.",
        "Design a scalable microservices architecture for an e-commerce platform.",
        "How would you implement real-time communication between multiple clients in a Node.js application?",
    ],
}


def default_policy(settings: Settings | None = None) -> dict[Difficulty, DifficultyPolicy]:
    """Question counts and time limits from settings (2 @20s, 2 @60s, 2 @120s)."""
    settings = settings or get_settings()
    return {
        Difficulty.EASY: DifficultyPolicy(
            count=settings.easy_question_count,
            time_limit=settings.easy_time_limit_seconds,
        ),
        Difficulty.MEDIUM: DifficultyPolicy(
            count=settings.medium_question_count,
            time_limit=settings.medium_time_limit_seconds,
        ),
        Difficulty.HARD: DifficultyPolicy(
            count=settings.hard_question_count,
            time_limit=settings.hard_time_limit_seconds,
        ),
    }


class QuestionBank:
    """
    Draws question sets from a difficulty-bucketed catalog.

    Selection is uniform with replacement, so a bucket may ask for more
    questions than its catalog holds. The result is always ordered
    Easy block, Medium block, Hard block.
    """

    def __init__(
        self,
        catalog: Mapping[Difficulty, Sequence[str]] | None = None,
        rng: random.Random | None = None,
    ):
        """
        Initialize the question bank.

        Args:
            catalog: Question prompts per difficulty (defaults to the built-in catalog)
            rng: Random source; pass a seeded instance for reproducible draws
        """
        source = DEFAULT_CATALOG if catalog is None else catalog
        self.catalog: dict[Difficulty, list[str]] = {
            difficulty: list(source.get(difficulty, []))
            for difficulty in Difficulty.ordered()
        }
        self.rng = rng or random.Random()

    def draw(self, counts: Mapping[Difficulty, DifficultyPolicy]) -> list[Question]:
        """
        Draw a question set for a new session.

        Args:
            counts: Count and time limit per difficulty; missing difficulties draw nothing

        Returns:
            Questions ordered Easy, Medium, Hard

        Raises:
            ConfigurationError: A bucket with count > 0 has an empty catalog
        """
        for difficulty, policy in counts.items():
            if policy.count > 0 and not self.catalog.get(difficulty):
                raise ConfigurationError(
                    f"No {difficulty.value} questions in catalog, {policy.count} requested"
                )

        questions: list[Question] = []
        for difficulty in Difficulty.ordered():
            policy = counts.get(difficulty)
            if policy is None:
                continue
            available = self.catalog[difficulty]
            for _ in range(policy.count):
                questions.append(
                    Question(
                        text=self.rng.choice(available),
                        difficulty=difficulty,
                        time_limit=policy.time_limit,
                    )
                )

        logger.info(f"Drew {len(questions)} questions")
        return questions
