"""Question and question set Pydantic models."""
import enum
from datetime import datetime

from pydantic import BaseModel, Field, model_validator

from satprep.sat_flow import Difficulty, Section


class QuestionType(str, enum.Enum):
    """How a question is answered."""

    MULTIPLE_CHOICE = "multiple_choice"
    GRID_IN = "grid_in"


class TestLength(str, enum.Enum):
    """Practice test lengths offered to the user."""

    __test__ = False

    QUICK = "quick"
    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"
    FULL = "full"


class Question(BaseModel):
    """A single authored SAT question."""

    id: str = Field(..., min_length=1, max_length=64, pattern=r"^[A-Za-z0-9_\-]+$")
    type: QuestionType = QuestionType.MULTIPLE_CHOICE
    section: Section
    difficulty: Difficulty = Difficulty.NORMAL
    topic: str = ""
    text: str = Field(..., min_length=1)
    options: list[str] = Field(default_factory=list)
    correct_answer: str = Field(..., min_length=1)
    explanation: str = ""


class QuestionView(BaseModel):
    """Question as shown while a module is in progress (no answer key)."""

    id: str
    type: QuestionType
    section: Section
    topic: str
    text: str
    options: list[str]


class QuestionSetCreate(BaseModel):
    """Model for authoring a question set."""

    title: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    test_type: Section
    difficulty: Difficulty = Difficulty.NORMAL
    length: TestLength = TestLength.MEDIUM
    is_official: bool = False
    section: str | None = None
    module_number: int | None = Field(None, ge=1, le=2)
    time_limit_minutes: int | None = Field(None, ge=1)
    questions: list[Question] = Field(..., min_length=1)

    @model_validator(mode="after")
    def _check_questions(self) -> "QuestionSetCreate":
        ids = [question.id for question in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate question ids")
        mismatched = [q.id for q in self.questions if q.section != self.test_type]
        if mismatched:
            raise ValueError(
                f"Questions outside {self.test_type.value}: {', '.join(mismatched)}"
            )
        return self


class QuestionSetSummary(BaseModel):
    """Question set metadata without the embedded questions."""

    id: str
    title: str
    description: str | None
    test_type: str
    difficulty: str
    length: str
    is_official: bool
    question_count: int
    created_by: str | None
    created_at: datetime

    class Config:
        from_attributes = True


class QuestionSetDetail(QuestionSetSummary):
    """Question set including its questions."""

    questions: list[Question]
