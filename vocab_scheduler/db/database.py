import os
import logging
import psycopg2
from psycopg2.extras import RealDictCursor
from typing import Dict, List, Optional, Any
from datetime import datetime

from vocab_scheduler.models.errors import StoreUnavailable

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Параметры подключения к базе данных по умолчанию
DB_PARAMS = {
    "dbname": "vocab",
    "user": "postgres",
    "password": "",
    "host": "localhost",
    "port": "5432"
}

# Строка подключения
DATABASE_URL = os.environ.get("DATABASE_URL", f"postgresql://{DB_PARAMS['user']}:{DB_PARAMS['password']}@{DB_PARAMS['host']}:{DB_PARAMS['port']}/{DB_PARAMS['dbname']}")

# Колонки слова, которые отдаются планировщику
ITEM_COLUMNS = """
    id, user_id, word, definition, example_sentence, source_context,
    mastery_level, retention_score, review_count, last_reviewed_at, next_review_at
"""

EVENT_COLUMNS = """
    id, user_id, vocabulary_id, review_type, is_correct, response_time_seconds,
    confidence_level, user_answer, correct_answer,
    mastery_level_before, mastery_level_after, created_at
"""


def get_db_connection():
    """Возвращает соединение с базой данных."""
    try:
        conn = psycopg2.connect(DATABASE_URL, cursor_factory=RealDictCursor)
        return conn
    except psycopg2.Error as e:
        logger.error(f"Ошибка подключения к базе данных: {e}")
        raise StoreUnavailable(str(e)) from e


def close_db_connection(conn):
    """Закрывает соединение с БД."""
    if conn:
        conn.close()


def learner_exists(learner_id: str) -> bool:
    """Проверяет, что пользователь существует."""
    conn = get_db_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT EXISTS (SELECT 1 FROM users WHERE id = %s) AS found
                """, (learner_id,))
                result = cur.fetchone()
                return bool(result and result['found'])
    except psycopg2.DataError as e:
        # Идентификатор неправильного формата: такого пользователя нет
        logger.warning(f"Malformed learner id {learner_id!r}: {e}")
        return False
    except psycopg2.Error as e:
        logger.error(f"Ошибка проверки пользователя: {e}")
        raise StoreUnavailable(str(e)) from e
    finally:
        close_db_connection(conn)


def fetch_due_items(learner_id: str, now: datetime, limit: int) -> List[Dict[str, Any]]:
    """Возвращает слова пользователя, которые пора повторить."""
    conn = get_db_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                # Сначала новые слова (NULL), затем самые просроченные
                cur.execute(f"""
                    SELECT {ITEM_COLUMNS}
                    FROM user_vocabulary
                    WHERE user_id = %s
                    AND (next_review_at IS NULL OR next_review_at <= %s)
                    ORDER BY next_review_at ASC NULLS FIRST
                    LIMIT %s
                """, (learner_id, now, limit))
                return cur.fetchall()
    except psycopg2.Error as e:
        logger.error(f"Ошибка выборки слов на повторение: {e}")
        raise StoreUnavailable(str(e)) from e
    finally:
        close_db_connection(conn)


def fetch_item(learner_id: str, vocabulary_id: str) -> Optional[Dict[str, Any]]:
    """Возвращает слово по ID, только если оно принадлежит пользователю."""
    conn = get_db_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {ITEM_COLUMNS}
                    FROM user_vocabulary
                    WHERE id = %s AND user_id = %s
                """, (vocabulary_id, learner_id))
                return cur.fetchone()
    except psycopg2.DataError as e:
        logger.warning(f"Malformed vocabulary id {vocabulary_id!r}: {e}")
        return None
    except psycopg2.Error as e:
        logger.error(f"Ошибка получения слова: {e}")
        raise StoreUnavailable(str(e)) from e
    finally:
        close_db_connection(conn)


def apply_review(
    learner_id: str,
    vocabulary_id: str,
    expected_review_count: Optional[int],
    item_update: Dict[str, Any],
    event: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """
    Обновляет состояние слова и записывает событие повторения в одной транзакции.
    Обновление выполняется только если review_count не изменился с момента чтения.
    Возвращает сохранённое событие или None, если запись уже изменена другим запросом.
    """
    conn = get_db_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute("""
                    UPDATE user_vocabulary
                    SET mastery_level = %s,
                        retention_score = %s,
                        review_count = %s,
                        last_reviewed_at = %s,
                        next_review_at = %s
                    WHERE id = %s AND user_id = %s
                    AND review_count IS NOT DISTINCT FROM %s
                    RETURNING id
                """, (
                    item_update['mastery_level'], item_update['retention_score'],
                    item_update['review_count'], item_update['last_reviewed_at'],
                    item_update['next_review_at'],
                    vocabulary_id, learner_id, expected_review_count
                ))
                if cur.fetchone() is None:
                    return None

                cur.execute(f"""
                    INSERT INTO user_vocabulary_reviews
                    (user_id, vocabulary_id, review_type, is_correct, response_time_seconds,
                     confidence_level, user_answer, correct_answer,
                     mastery_level_before, mastery_level_after, created_at)
                    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
                    RETURNING {EVENT_COLUMNS}
                """, (
                    learner_id, vocabulary_id, event['review_type'], event['is_correct'],
                    event['response_time_seconds'], event.get('confidence_level'),
                    event.get('user_answer'), event.get('correct_answer'),
                    event['mastery_level_before'], event['mastery_level_after'],
                    item_update['last_reviewed_at']
                ))
                return cur.fetchone()
    except psycopg2.Error as e:
        # Выход из блока with откатил обе записи
        logger.error(f"Ошибка сохранения повторения: {e}")
        raise StoreUnavailable(str(e)) from e
    finally:
        close_db_connection(conn)


def fetch_schedule_rows(learner_id: str) -> List[Dict[str, Any]]:
    """Возвращает уровень и дату следующего повторения всех слов пользователя."""
    conn = get_db_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute("""
                    SELECT COALESCE(mastery_level, 0) AS mastery_level, next_review_at
                    FROM user_vocabulary
                    WHERE user_id = %s
                """, (learner_id,))
                return cur.fetchall()
    except psycopg2.Error as e:
        logger.error(f"Ошибка получения статистики словаря: {e}")
        raise StoreUnavailable(str(e)) from e
    finally:
        close_db_connection(conn)


def fetch_review_events(learner_id: str, vocabulary_id: str) -> List[Dict[str, Any]]:
    """Возвращает историю повторений слова в порядке создания."""
    conn = get_db_connection()
    try:
        with conn:
            with conn.cursor() as cur:
                cur.execute(f"""
                    SELECT {EVENT_COLUMNS}
                    FROM user_vocabulary_reviews
                    WHERE user_id = %s AND vocabulary_id = %s
                    ORDER BY created_at ASC
                """, (learner_id, vocabulary_id))
                return cur.fetchall()
    except psycopg2.Error as e:
        logger.error(f"Ошибка получения истории повторений: {e}")
        raise StoreUnavailable(str(e)) from e
    finally:
        close_db_connection(conn)
