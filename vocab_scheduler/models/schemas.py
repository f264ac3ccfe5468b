from pydantic import BaseModel, Field, field_validator
from typing import List, Optional
from datetime import datetime
from enum import Enum

from vocab_scheduler.models.config import CONFIG


class ReviewType(str, Enum):
    flashcard = "flashcard"
    fill_blank = "fill_blank"
    multiple_choice = "multiple_choice"
    context_matching = "context_matching"
    sentence_completion = "sentence_completion"


class VocabularyItem(BaseModel):
    id: str
    user_id: str
    word: str
    definition: Optional[str] = None
    example_sentence: Optional[str] = None
    source_context: Optional[str] = None
    mastery_level: Optional[int] = Field(None, ge=CONFIG["MIN_MASTERY_LEVEL"], le=CONFIG["MAX_MASTERY_LEVEL"])
    retention_score: Optional[float] = Field(None, ge=0.0, le=1.0)
    review_count: int = Field(0, ge=0)
    last_reviewed_at: Optional[datetime] = None
    next_review_at: Optional[datetime] = None

    @field_validator("review_count", mode="before")
    @classmethod
    def count_missing_as_zero(cls, value):
        # Старые записи хранят NULL вместо 0
        return 0 if value is None else value


class ReviewOutcome(BaseModel):
    vocabulary_id: str
    review_type: ReviewType
    is_correct: bool
    response_time_seconds: float = Field(..., ge=0)
    confidence_level: Optional[int] = Field(None, ge=CONFIG["CONFIDENCE_MIN"], le=CONFIG["CONFIDENCE_MAX"])
    user_answer: Optional[str] = None
    correct_answer: Optional[str] = None


class ReviewEvent(BaseModel):
    id: Optional[str] = None
    user_id: str
    vocabulary_id: str
    review_type: ReviewType
    is_correct: bool
    response_time_seconds: float
    confidence_level: Optional[int] = None
    user_answer: Optional[str] = None
    correct_answer: Optional[str] = None
    mastery_level_before: int
    mastery_level_after: int
    created_at: Optional[datetime] = None


class Transition(BaseModel):
    """Результат одного шага планировщика для слова."""
    mastery_level_before: int
    mastery_level_after: int
    retention_score: float
    interval_days: int
    last_reviewed_at: datetime
    next_review_at: datetime


class ReviewBatch(BaseModel):
    words: List[VocabularyItem]
    totalWords: int


class VocabularyStats(BaseModel):
    totalWords: int = 0
    masteredWords: int = 0
    learningWords: int = 0
    newWords: int = 0
    wordsDueForReview: int = 0
