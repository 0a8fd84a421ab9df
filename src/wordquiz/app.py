import logging
import os
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from .config import Settings, settings as default_settings
from .database import init_db
from .fetcher import TranslationFetcher
from .log_handler import SQLiteHandler
from .routes import STATIC_DIR, router
from .session import Fetcher, QuizSession
from .store import WordStore, WordStoreFactory

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


# --- Logging Setup ---
def setup_logging(config: Settings = default_settings) -> Optional[str]:
    """Attaches the file or SQLite handler to the package logger.

    Returns the SQLite path when logging to the database.
    """
    logger = logging.getLogger("wordquiz")
    logger.setLevel(logging.DEBUG if config.DEBUG else logging.INFO)
    # Each app instance gets fresh handlers
    for old in list(logger.handlers):
        logger.removeHandler(old)
        old.close()

    db_path = None
    if config.LOG_TO_DB:
        db_path = init_db(config)
        handler: logging.Handler = SQLiteHandler(db_path)
    else:
        os.makedirs(config.LOG_DIR, exist_ok=True)
        log_path = os.path.join(config.LOG_DIR, config.LOG_FILE)
        handler = RotatingFileHandler(log_path, maxBytes=5_000_000, backupCount=3)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)
    return db_path


# --- Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    quiz: QuizSession = app.state.quiz
    await quiz.start()
    yield
    await quiz.close()
    if hasattr(quiz.fetcher, "close"):
        quiz.fetcher.close()


# --- App Factory ---
def create_app(
    config: Settings = default_settings,
    store: Optional[WordStore] = None,
    fetcher: Optional[Fetcher] = None,
) -> FastAPI:
    db_path = setup_logging(config)
    app = FastAPI(
        title=config.PROJECT_NAME,
        debug=config.DEBUG,
        lifespan=lifespan,
        root_path=config.ROOT_PATH,
    )

    app.state.settings = config
    app.state.db_path = db_path
    app.state.quiz = QuizSession(
        store=store or WordStoreFactory.create(config.STORE_BACKEND, config),
        fetcher=fetcher or TranslationFetcher(config),
        advance_delay=config.ADVANCE_DELAY_SECONDS,
        sort_in_place=config.SORT_IN_PLACE,
        history_size=config.HISTORY_SIZE,
    )

    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.include_router(router)

    return app


def run():
    uvicorn.run(
        "wordquiz.app:create_app",
        factory=True,
        host="0.0.0.0",
        port=8000,
        reload=default_settings.DEBUG,
    )


if __name__ == "__main__":
    run()
