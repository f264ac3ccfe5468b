"""Планировщик повторения слов: выбор слов на повторение и учёт результатов."""

__version__ = "1.0.0"
