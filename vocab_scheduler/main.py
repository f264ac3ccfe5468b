from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import os
import uvicorn
import logging

# Импорт модулей приложения
from vocab_scheduler.api.auth import router as auth_router
from vocab_scheduler.api.review import router as review_router

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

# Создание приложения FastAPI
app = FastAPI(
    title="Vocab Scheduler",
    description="Планировщик повторения слов",
    version="1.0.0"
)

# CORS настройки для API
app.add_middleware(
    CORSMiddleware,
    allow_origins=os.environ.get("CORS_ORIGINS", "*").split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Подключение роутеров API
app.include_router(auth_router, prefix="/api/auth", tags=["auth"])
app.include_router(review_router, prefix="/api/review", tags=["review"])


@app.get("/health")
def health():
    return {"status": "ok"}


def run():
    uvicorn.run("vocab_scheduler.main:app", host="0.0.0.0", port=int(os.environ.get("PORT", 8000)))


# Запуск приложения (для отладки)
if __name__ == "__main__":
    run()
