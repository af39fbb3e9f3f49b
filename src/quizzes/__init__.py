"""Lesson quiz module.

Provides:
- Multiple-choice scoring against a 70% pass threshold (rounded up)
- Latest-attempt storage per learner and lesson
"""

from .models import PASS_THRESHOLD, QUIZZES_TABLES_CQL, QuizAttempt, QuizScore


__all__ = [
    "PASS_THRESHOLD",
    "QUIZZES_TABLES_CQL",
    "QuizAttempt",
    "QuizScore",
]
