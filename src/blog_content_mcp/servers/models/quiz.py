from enum import StrEnum
from typing import Self

from pydantic import BaseModel, Field, model_validator


class Difficulty(StrEnum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


DEFAULT_NUMBER_OF_QUESTIONS = 10
DEFAULT_DIFFICULTY = Difficulty.MEDIUM


class QuizQuestion(BaseModel):
    """A multiple-choice question (MCQ)."""

    id: int = Field(ge=1, description="Question identifier (>= 1). Must be unique within the quiz.")
    question: str = Field(min_length=1, description="Human-readable question text.")
    options: list[str] = Field(
        min_length=2,
        max_length=6,
        description="Ordered list of 2 to 6 non-empty answer choices (0-based indexing applies).",
    )
    correct_answer: int = Field(ge=0, description="0-based index into 'options' pointing to the correct answer.")
    explanation: str = Field(min_length=1, description="Short explanation/justification for the correct answer.")

    @model_validator(mode="after")
    def validate_options(self) -> Self:
        if any(not option for option in self.options):
            msg = "Each option must be a non-empty string."
            raise ValueError(msg)

        if self.correct_answer >= len(self.options):
            msg = "'correct_answer' must be a valid 0-based index within 'options'."
            raise ValueError(msg)

        return self


class Quiz(BaseModel):
    """A complete quiz (title, description, questions)."""

    title: str = Field(min_length=1, description="Human-readable quiz title (shown to end users).")
    description: str = Field(min_length=1, description="Short summary of the quiz goals/content.")
    questions: list[QuizQuestion] = Field(min_length=1, description="Ordered list of quiz questions.")

    @model_validator(mode="after")
    def validate_unique_ids(self) -> Self:
        ids = [question.id for question in self.questions]
        if len(set(ids)) != len(ids):
            msg = "Each question must have a unique 'id' within the quiz."
            raise ValueError(msg)

        return self


class BlogToQuizRequest(BaseModel):
    """The input of the blog-to-quiz workflow."""

    path: str = Field(description="Internal path of the article or tutorial.")
    number_of_questions: int = Field(default=DEFAULT_NUMBER_OF_QUESTIONS, ge=5, le=20, description="Number of quiz questions.")
    difficulty: Difficulty = Field(default=DEFAULT_DIFFICULTY, description="Difficulty level of the quiz.")


class BlogToQuizContext(BaseModel):
    """The content fetched by the first step of the blog-to-quiz workflow, forwarded to the quiz generation."""

    title: str = Field(min_length=1)
    content: str
    number_of_questions: int = Field(default=DEFAULT_NUMBER_OF_QUESTIONS, ge=5, le=20)
    difficulty: Difficulty = DEFAULT_DIFFICULTY
