import logging
from datetime import datetime, timezone
from typing import List, Optional

from vocab_scheduler.db.database import learner_exists, fetch_due_items
from vocab_scheduler.models.config import CONFIG
from vocab_scheduler.models.errors import NotAuthenticated, InvalidOutcome
from vocab_scheduler.models.schemas import VocabularyItem

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def select_due(learner_id: str, limit: int = CONFIG["DEFAULT_BATCH_SIZE"], now: Optional[datetime] = None) -> List[VocabularyItem]:
    """
    Выбирает слова пользователя, которые пора повторить.
    Сначала слова без даты повторения (новые), затем по возрастанию next_review_at.
    Ничего не изменяет в базе.
    """
    if not learner_id:
        raise NotAuthenticated()

    # bool - подкласс int, но размером выборки быть не может
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= CONFIG["MAX_BATCH_SIZE"]:
        raise InvalidOutcome(f"limit must be between 1 and {CONFIG['MAX_BATCH_SIZE']}, got {limit!r}")

    if not learner_exists(learner_id):
        raise NotAuthenticated()

    if now is None:
        now = datetime.now(timezone.utc)

    rows = fetch_due_items(learner_id, now, limit)
    words = [VocabularyItem(**row) for row in rows]

    logger.info(f"Selected {len(words)} due words for user {learner_id} (limit {limit})")
    return words
