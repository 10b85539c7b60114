"""
Digital SAT structure and the module-by-module test flow.

The sitting is fixed: two Reading and Writing modules, a ten minute break,
then two Math modules. ``get_next_flow_state`` maps the current position in
that sequence to the next one and never raises.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, replace


class Section(str, enum.Enum):
    READING_WRITING = "reading_writing"
    MATH = "math"


class Difficulty(str, enum.Enum):
    EASY = "easy"
    NORMAL = "normal"
    HARD = "hard"


class FlowPhase(str, enum.Enum):
    START = "start"
    DIRECTIONS = "directions"
    TEST = "test"
    REVIEW = "review"
    BREAK = "break"
    COMPLETE = "complete"


@dataclass(frozen=True)
class ModuleConfig:
    section: Section
    module_number: int
    questions: int
    time_minutes: int

    @property
    def time_seconds(self) -> int:
        return self.time_minutes * 60


@dataclass(frozen=True)
class SectionConfig:
    name: Section
    display_name: str
    modules: tuple[ModuleConfig, ...]

    @property
    def total_questions(self) -> int:
        return sum(module.questions for module in self.modules)

    @property
    def total_time_minutes(self) -> int:
        return sum(module.time_minutes for module in self.modules)


SAT_TEST_STRUCTURE: dict[Section, SectionConfig] = {
    Section.READING_WRITING: SectionConfig(
        name=Section.READING_WRITING,
        display_name="Reading and Writing",
        modules=(
            ModuleConfig(Section.READING_WRITING, 1, questions=27, time_minutes=32),
            ModuleConfig(Section.READING_WRITING, 2, questions=27, time_minutes=32),
        ),
    ),
    Section.MATH: SectionConfig(
        name=Section.MATH,
        display_name="Math",
        modules=(
            ModuleConfig(Section.MATH, 1, questions=22, time_minutes=35),
            ModuleConfig(Section.MATH, 2, questions=22, time_minutes=35),
        ),
    ),
}

BREAK_DURATION_SECONDS = 600


@dataclass(frozen=True)
class ModuleDirections:
    title: str
    time: str
    questions: int
    text: str


MODULE_DIRECTIONS: dict[Section, dict[int, ModuleDirections]] = {
    Section.READING_WRITING: {
        1: ModuleDirections(
            title="Reading and Writing - Module 1",
            time="32 minutes",
            questions=27,
            text=(
                "The questions in this section address a number of important "
                "reading and writing skills. Each question includes one or more "
                "passages, which may include a table or graph. Read each passage "
                "and question carefully, and then choose the best answer to the "
                "question based on the passage(s).\n\n"
                "All questions in this section are multiple-choice with four "
                "answer choices. Each question has a single best answer."
            ),
        ),
        2: ModuleDirections(
            title="Reading and Writing - Module 2",
            time="32 minutes",
            questions=27,
            text=(
                "The second module contains questions that are tailored to your "
                "performance on the first module. Continue answering carefully "
                "and strategically."
            ),
        ),
    },
    Section.MATH: {
        1: ModuleDirections(
            title="Math - Module 1",
            time="35 minutes",
            questions=22,
            text=(
                "The questions in this section address a number of important "
                "math skills.\n\n"
                "Use of a calculator is permitted for all questions.\n\n"
                "Unless otherwise indicated:\n"
                "• All variables and expressions represent real numbers.\n"
                "• Figures provided are drawn to scale.\n"
                "• All figures lie in a plane.\n"
                "• The domain of a given function f is the set of all real "
                "numbers x for which f(x) is a real number."
            ),
        ),
        2: ModuleDirections(
            title="Math - Module 2",
            time="35 minutes",
            questions=22,
            text=(
                "The second module contains questions that are tailored to your "
                "performance on the first module."
            ),
        ),
    },
}


@dataclass(frozen=True)
class TestFlowState:
    """Position within one sitting of the four-module SAT."""

    __test__ = False  # not a pytest class

    phase: FlowPhase
    current_section: Section
    current_module: int

    @property
    def module_key(self) -> tuple[Section, int]:
        return (self.current_section, self.current_module)

    @property
    def is_complete(self) -> bool:
        return self.phase == FlowPhase.COMPLETE


INITIAL_TEST_FLOW = TestFlowState(FlowPhase.START, Section.READING_WRITING, 1)


def get_next_flow_state(current: TestFlowState) -> TestFlowState:
    """Return the state that follows ``current``.

    ``complete`` is terminal and anything unrecognised is returned as is.
    """
    phase = current.phase

    if phase == FlowPhase.START:
        return TestFlowState(FlowPhase.DIRECTIONS, Section.READING_WRITING, 1)

    if phase == FlowPhase.DIRECTIONS:
        return replace(current, phase=FlowPhase.TEST)

    # Module submitted (or timed out)
    if phase == FlowPhase.TEST:
        return replace(current, phase=FlowPhase.REVIEW)

    if phase == FlowPhase.REVIEW:
        if current.current_section == Section.READING_WRITING:
            if current.current_module == 1:
                return TestFlowState(FlowPhase.DIRECTIONS, Section.READING_WRITING, 2)
            # Break always precedes math
            return TestFlowState(FlowPhase.BREAK, Section.MATH, 1)
        if current.current_module == 1:
            return TestFlowState(FlowPhase.DIRECTIONS, Section.MATH, 2)
        return TestFlowState(FlowPhase.COMPLETE, Section.MATH, 2)

    if phase == FlowPhase.BREAK:
        return TestFlowState(FlowPhase.DIRECTIONS, Section.MATH, 1)

    return current


def return_to_module(current: TestFlowState) -> TestFlowState:
    """User navigation from the review screen back into the same module."""
    if current.phase == FlowPhase.REVIEW:
        return replace(current, phase=FlowPhase.TEST)
    return current


def module_time_limit_seconds(section: Section, module_number: int) -> int:
    for module in SAT_TEST_STRUCTURE[section].modules:
        if module.module_number == module_number:
            return module.time_seconds
    raise KeyError((section, module_number))
