import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Union
from pydantic import ValidationError

from vocab_scheduler.db.database import fetch_item, apply_review
from vocab_scheduler.models.config import CONFIG
from vocab_scheduler.models.errors import (
    NotAuthenticated, ItemNotFound, InvalidOutcome, ConcurrentUpdateConflict
)
from vocab_scheduler.models.schemas import ReviewOutcome, ReviewEvent, Transition

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def next_interval_days(new_level: int, is_correct: bool) -> int:
    """Возвращает интервал до следующего повторения в днях."""
    if not is_correct:
        return CONFIG["WRONG_ANSWER_INTERVAL_DAYS"]
    if new_level >= CONFIG["MASTERED_LEVEL"]:
        return CONFIG["MASTERED_INTERVAL_DAYS"]
    if new_level >= CONFIG["LEARNING_LEVEL"]:
        return CONFIG["LEARNING_INTERVAL_DAYS"]
    return CONFIG["NEW_INTERVAL_DAYS"]


def compute_transition(
    mastery_level: Optional[int],
    retention_score: Optional[float],
    is_correct: bool,
    now: datetime
) -> Transition:
    """
    Один шаг планировщика: уровень меняется ровно на ±1 в пределах [0, 5],
    оценка запоминания на +0.1 / -0.2 в пределах [0.0, 1.0].
    Слово, которое ещё не повторяли, начинает с уровня 0 и оценки 0.5.
    """
    current_level = CONFIG["DEFAULT_MASTERY_LEVEL"] if mastery_level is None else mastery_level
    current_retention = CONFIG["DEFAULT_RETENTION"] if retention_score is None else retention_score

    if is_correct:
        new_level = min(current_level + 1, CONFIG["MAX_MASTERY_LEVEL"])
        new_retention = min(current_retention + CONFIG["RETENTION_STEP_UP"], 1.0)
    else:
        new_level = max(current_level - 1, CONFIG["MIN_MASTERY_LEVEL"])
        new_retention = max(current_retention - CONFIG["RETENTION_STEP_DOWN"], 0.0)

    interval_days = next_interval_days(new_level, is_correct)

    return Transition(
        mastery_level_before=current_level,
        mastery_level_after=new_level,
        # Округление убирает накопление ошибки float (0.7 + 0.1)
        retention_score=round(new_retention, 4),
        interval_days=interval_days,
        last_reviewed_at=now,
        next_review_at=now + timedelta(days=interval_days)
    )


def parse_outcome(payload: Union[ReviewOutcome, Dict[str, Any]]) -> ReviewOutcome:
    """Проверяет результат повторения, присланный клиентом."""
    if isinstance(payload, ReviewOutcome):
        return payload
    try:
        return ReviewOutcome(**payload)
    except (ValidationError, TypeError) as e:
        logger.warning(f"Invalid review outcome: {e}")
        raise InvalidOutcome(str(e)) from e


def submit_review(
    learner_id: str,
    outcome: Union[ReviewOutcome, Dict[str, Any]],
    now: Optional[datetime] = None
) -> ReviewEvent:
    """
    Записывает результат повторения слова.

    Состояние слова и событие повторения сохраняются одной транзакцией
    при условии, что слово не изменилось после чтения. При конфликте
    слово перечитывается и шаг выполняется ещё раз, затем
    ConcurrentUpdateConflict.
    """
    if not learner_id:
        raise NotAuthenticated()

    outcome = parse_outcome(outcome)
    if now is None:
        now = datetime.now(timezone.utc)

    attempts = CONFIG["CONFLICT_RETRIES"] + 1
    for attempt in range(1, attempts + 1):
        item = fetch_item(learner_id, outcome.vocabulary_id)
        if item is None:
            logger.info(f"Word {outcome.vocabulary_id} not found for user {learner_id}")
            raise ItemNotFound()

        transition = compute_transition(
            item.get('mastery_level'), item.get('retention_score'), outcome.is_correct, now
        )
        expected_count = item.get('review_count')

        item_update = {
            'mastery_level': transition.mastery_level_after,
            'retention_score': transition.retention_score,
            'review_count': (expected_count or 0) + 1,
            'last_reviewed_at': transition.last_reviewed_at,
            'next_review_at': transition.next_review_at,
        }
        event = ReviewEvent(
            user_id=learner_id,
            vocabulary_id=outcome.vocabulary_id,
            review_type=outcome.review_type,
            is_correct=outcome.is_correct,
            response_time_seconds=outcome.response_time_seconds,
            confidence_level=outcome.confidence_level,
            user_answer=outcome.user_answer,
            correct_answer=outcome.correct_answer,
            mastery_level_before=transition.mastery_level_before,
            mastery_level_after=transition.mastery_level_after
        )

        saved = apply_review(
            learner_id, outcome.vocabulary_id, expected_count, item_update, event.model_dump(mode='json')
        )
        if saved is not None:
            logger.info(
                f"Reviewed word {outcome.vocabulary_id} for user {learner_id}: "
                f"level {transition.mastery_level_before} -> {transition.mastery_level_after}, "
                f"next review in {transition.interval_days} days"
            )
            # Транзакция уже закрыта: берём из ответа базы только id и время
            saved_id = saved.get('id')
            return event.model_copy(update={
                'id': str(saved_id) if saved_id is not None else None,
                'created_at': saved.get('created_at')
            })

        logger.warning(
            f"Word {outcome.vocabulary_id} changed concurrently (attempt {attempt} of {attempts})"
        )

    raise ConcurrentUpdateConflict()
