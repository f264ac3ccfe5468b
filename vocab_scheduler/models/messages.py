# Модуль для хранения текстовых сообщений сервиса

# Сообщения ошибок
ERROR_MESSAGES = {
    "unauthorized": "Требуется авторизация",
    "item_not_found": "Слово не найдено",
    "invalid_outcome": "Некорректный результат повторения",
    "concurrent_update": "Слово уже обновляется. Попробуйте снова.",
    "store_unavailable": "Сервис временно недоступен. Попробуйте позже.",
    "general_error": "Произошла ошибка. Попробуйте снова."
}
