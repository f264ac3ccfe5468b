from fastapi import APIRouter, HTTPException, status, Cookie
from typing import Optional
import logging

from vocab_scheduler.db.database import learner_exists
from vocab_scheduler.models.errors import StoreUnavailable
from vocab_scheduler.models.messages import ERROR_MESSAGES

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

router = APIRouter()


def normalize_learner_id(user_id: Optional[str]) -> Optional[str]:
    """Убирает пробелы вокруг ID из cookie; пустое значение считается отсутствующим."""
    if user_id is None:
        return None
    return user_id.strip() or None


def get_current_learner(user_id: Optional[str] = Cookie(None)) -> str:
    """Возвращает ID пользователя из cookie, выставленной сервисом авторизации."""
    learner_id = normalize_learner_id(user_id)
    if learner_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=ERROR_MESSAGES["unauthorized"]
        )
    return learner_id


@router.get("/user")
def get_current_user(user_id: Optional[str] = Cookie(None)):
    """Возвращает информацию о текущем пользователе."""
    learner_id = normalize_learner_id(user_id)
    if learner_id is None:
        return {"isLoggedIn": False}

    try:
        if not learner_exists(learner_id):
            return {"isLoggedIn": False}
    except StoreUnavailable:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=ERROR_MESSAGES["store_unavailable"]
        )

    return {"isLoggedIn": True, "userId": learner_id}
