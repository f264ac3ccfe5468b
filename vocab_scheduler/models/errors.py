# Типизированные ошибки планировщика повторений.
# Каждая ошибка несёт код (kind) и признак того, имеет ли смысл повторить запрос.


class SchedulerError(Exception):
    """Базовая ошибка планировщика."""
    kind = "scheduler_error"
    retryable = False

    def __init__(self, message: str = None):
        super().__init__(message or self.kind)
        self.message = message or self.kind


class NotAuthenticated(SchedulerError):
    """Нет действительного идентификатора пользователя."""
    kind = "not_authenticated"


class ItemNotFound(SchedulerError):
    """Слово не существует или принадлежит другому пользователю."""
    kind = "item_not_found"


class InvalidOutcome(SchedulerError):
    """Некорректные входные данные повторения."""
    kind = "invalid_outcome"


class ConcurrentUpdateConflict(SchedulerError):
    """Запись изменилась между чтением и записью, повтор исчерпан."""
    kind = "concurrent_update_conflict"
    retryable = True


class StoreUnavailable(SchedulerError):
    """База данных недоступна."""
    kind = "store_unavailable"
    retryable = True
