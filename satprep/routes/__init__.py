"""API route modules."""
from satprep.routes import attempts, question_sets, sat, statistics, tests

__all__ = ["attempts", "question_sets", "sat", "statistics", "tests"]
