"""Generated practice test Pydantic models."""
import enum

from pydantic import BaseModel

from satprep.models.questions import Question, TestLength
from satprep.sat_flow import Difficulty


class TestType(str, enum.Enum):
    """Which sections a practice test draws from."""

    __test__ = False

    MATH = "math"
    READING_WRITING = "reading_writing"
    COMBINED = "combined"


class TestConfig(BaseModel):
    """User-chosen test configuration; transient, never stored on its own."""

    __test__ = False

    test_type: TestType
    length: TestLength
    difficulty: Difficulty = Difficulty.NORMAL
    timer_enabled: bool = True


class GeneratedTest(BaseModel):
    """A test assembled for one attempt. ``id`` is the attempt id."""

    id: str
    questions: list[Question]
    time_limit: int | None
    config: TestConfig
    adapted_difficulty: Difficulty
