"""Database models."""
from satprep.models.db.attempt import Attempt
from satprep.models.db.question_set import QuestionSet

__all__ = [
    "Attempt",
    "QuestionSet",
]
