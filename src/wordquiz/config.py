import os


def _flag(name: str, default: str) -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Settings:
    PROJECT_NAME: str = "wordquiz"
    DEBUG: bool = _flag("DEBUG", "0")
    ROOT_PATH: str = os.environ.get("ROOT_PATH", "")
    LOG_DIR: str = os.environ.get("LOG_DIR", "log")
    LOG_FILE: str = "wordquiz.log"
    LOG_TO_DB: bool = _flag("LOG_TO_DB", "0")
    DB_DIR: str = os.environ.get("DB_DIR", "db")
    DB_FILE: str = "wordquiz.db"

    # Word store
    STORE_BACKEND: str = os.environ.get("STORE_BACKEND", "csv")
    DATA_DIR: str = os.environ.get("DATA_DIR", "data")
    WORDS_FILE: str = "words.csv"
    MODE_FILE: str = "mode.txt"
    REDIS_URL: str = os.environ.get("REDIS_URL", "redis://localhost:6379/0")
    REDIS_PREFIX: str = "wordquiz"

    # Upstream services
    SYNONYM_URL: str = "https://api.datamuse.com/words"
    TRANSLATE_URL: str = "https://api.mymemory.translated.net/get"
    LANGUAGE_PAIR: str = os.environ.get("LANGUAGE_PAIR", "en|hy")
    MAX_SYNONYMS: int = 5
    REQUEST_TIMEOUT: float = float(os.environ.get("REQUEST_TIMEOUT", "10"))

    # Quiz behaviour
    ADVANCE_DELAY_SECONDS: float = float(os.environ.get("ADVANCE_DELAY_SECONDS", "2"))
    SORT_IN_PLACE: bool = _flag("SORT_IN_PLACE", "1")
    HISTORY_SIZE: int = 50


settings = Settings()
