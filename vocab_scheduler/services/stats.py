import logging
from datetime import datetime, timezone
from typing import List, Optional

from vocab_scheduler.db.database import fetch_item, fetch_schedule_rows, fetch_review_events
from vocab_scheduler.models.config import MASTERY_STAGES
from vocab_scheduler.models.errors import NotAuthenticated, ItemNotFound
from vocab_scheduler.models.schemas import ReviewEvent, VocabularyStats

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def get_vocabulary_stats(learner_id: str, now: Optional[datetime] = None) -> VocabularyStats:
    """Считает слова пользователя по стадиям освоения."""
    if not learner_id:
        raise NotAuthenticated()
    if now is None:
        now = datetime.now(timezone.utc)

    stats = VocabularyStats()
    for row in fetch_schedule_rows(learner_id):
        level = row['mastery_level'] or 0
        stats.totalWords += 1
        if level >= MASTERY_STAGES["mastered"]:
            stats.masteredWords += 1
        elif level >= MASTERY_STAGES["learning"]:
            stats.learningWords += 1
        else:
            stats.newWords += 1
        # Новые слова без даты сюда не входят
        if row['next_review_at'] is not None and row['next_review_at'] <= now:
            stats.wordsDueForReview += 1

    logger.info(f"Vocabulary stats for user {learner_id}: {stats.totalWords} words, {stats.wordsDueForReview} due")
    return stats


def get_review_history(learner_id: str, vocabulary_id: str) -> List[ReviewEvent]:
    """Возвращает историю повторений слова, принадлежащего пользователю."""
    if not learner_id:
        raise NotAuthenticated()
    if fetch_item(learner_id, vocabulary_id) is None:
        raise ItemNotFound()
    return [ReviewEvent(**row) for row in fetch_review_events(learner_id, vocabulary_id)]
