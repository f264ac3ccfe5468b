# Словарь конфигурационных параметров планировщика повторений
CONFIG = {
    "MIN_MASTERY_LEVEL": 0,                # Нижняя граница уровня освоения
    "MAX_MASTERY_LEVEL": 5,                # Верхняя граница уровня освоения
    "DEFAULT_MASTERY_LEVEL": 0,            # Уровень слова, которое ещё не повторяли
    "DEFAULT_RETENTION": 0.5,              # Начальная оценка запоминания

    # Изменение оценки запоминания
    "RETENTION_STEP_UP": 0.1,              # Прибавка за правильный ответ
    "RETENTION_STEP_DOWN": 0.2,            # Штраф за ошибку

    # Интервалы до следующего повторения (дни)
    "MASTERED_LEVEL": 4,                   # С этого уровня слово считается выученным
    "LEARNING_LEVEL": 2,                   # С этого уровня слово в процессе изучения
    "MASTERED_INTERVAL_DAYS": 30,          # Выученные слова: раз в месяц
    "LEARNING_INTERVAL_DAYS": 7,           # Изучаемые слова: раз в неделю
    "NEW_INTERVAL_DAYS": 1,                # Новые слова: каждый день
    "WRONG_ANSWER_INTERVAL_DAYS": 1,       # После ошибки: завтра

    # Размер выборки слов на повторение
    "DEFAULT_BATCH_SIZE": 10,              # Количество слов по умолчанию
    "MAX_BATCH_SIZE": 100,                 # Ограничение стоимости запроса

    # Ответ пользователя
    "CONFIDENCE_MIN": 1,                   # Минимальная уверенность
    "CONFIDENCE_MAX": 5,                   # Максимальная уверенность

    # Конкурентные обновления
    "CONFLICT_RETRIES": 1,                 # Повторов при конфликте версии записи
}

# Стадии освоения для статистики (нижняя граница уровня)
MASTERY_STAGES = {
    "new": 0,
    "learning": 1,
    "mastered": CONFIG["MASTERED_LEVEL"]
}
