from fastapi import APIRouter, HTTPException, Depends, status, Body
from typing import Any, Dict, List
import logging

from vocab_scheduler.api.auth import get_current_learner
from vocab_scheduler.services.picker import select_due
from vocab_scheduler.services.reviewer import submit_review
from vocab_scheduler.services.stats import get_vocabulary_stats, get_review_history
from vocab_scheduler.models.config import CONFIG
from vocab_scheduler.models.errors import (
    SchedulerError, NotAuthenticated, ItemNotFound, InvalidOutcome,
    ConcurrentUpdateConflict, StoreUnavailable
)
from vocab_scheduler.models.messages import ERROR_MESSAGES
from vocab_scheduler.models.schemas import ReviewBatch, ReviewEvent, VocabularyStats

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()

# Ошибка планировщика -> (HTTP статус, текст для пользователя)
ERROR_STATUS = {
    NotAuthenticated: (status.HTTP_401_UNAUTHORIZED, "unauthorized"),
    ItemNotFound: (status.HTTP_404_NOT_FOUND, "item_not_found"),
    InvalidOutcome: (status.HTTP_422_UNPROCESSABLE_ENTITY, "invalid_outcome"),
    ConcurrentUpdateConflict: (status.HTTP_409_CONFLICT, "concurrent_update"),
    StoreUnavailable: (status.HTTP_503_SERVICE_UNAVAILABLE, "store_unavailable"),
}


def to_http_error(error: SchedulerError) -> HTTPException:
    """Преобразует ошибку планировщика в HTTP ответ."""
    status_code, message_key = ERROR_STATUS.get(
        type(error), (status.HTTP_500_INTERNAL_SERVER_ERROR, "general_error")
    )
    return HTTPException(
        status_code=status_code,
        detail={"kind": error.kind, "message": ERROR_MESSAGES[message_key], "retryable": error.retryable}
    )


@router.get("/due", response_model=ReviewBatch)
def get_due_words(
    limit: int = CONFIG["DEFAULT_BATCH_SIZE"],
    learner_id: str = Depends(get_current_learner)
):
    """Возвращает слова, которые пора повторить."""
    try:
        words = select_due(learner_id, limit)
    except SchedulerError as e:
        logger.error(f"Error selecting due words: {e.kind}")
        raise to_http_error(e)

    return ReviewBatch(words=words, totalWords=len(words))


@router.post("/submit", response_model=ReviewEvent)
def submit_review_result(
    payload: Dict[str, Any] = Body(...),
    learner_id: str = Depends(get_current_learner)
):
    """Сохраняет результат повторения одного слова."""
    try:
        return submit_review(learner_id, payload)
    except SchedulerError as e:
        logger.error(f"Error submitting review: {e.kind}")
        raise to_http_error(e)


@router.get("/stats", response_model=VocabularyStats)
def vocabulary_stats(learner_id: str = Depends(get_current_learner)):
    """Возвращает статистику словаря пользователя."""
    try:
        return get_vocabulary_stats(learner_id)
    except SchedulerError as e:
        logger.error(f"Error loading vocabulary stats: {e.kind}")
        raise to_http_error(e)


@router.get("/history/{vocabulary_id}", response_model=List[ReviewEvent])
def review_history(vocabulary_id: str, learner_id: str = Depends(get_current_learner)):
    """Возвращает историю повторений слова."""
    try:
        return get_review_history(learner_id, vocabulary_id)
    except SchedulerError as e:
        logger.error(f"Error loading review history: {e.kind}")
        raise to_http_error(e)
