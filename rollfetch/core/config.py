import os
from pathlib import Path
from typing import List


def _env_bool(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "t")


class Settings:
    PROJECT_NAME: str = "Roll Result Fetcher"
    PROJECT_VERSION: str = "1.0.0"
    API_V1_STR: str = "/api/v1"  # Base path for API v1

    # This is for detecting test mode, but the primary mechanism for setting
    # test config is conftest.py, which will monkeypatch these values.
    TESTING: bool = _env_bool("TESTING", "False")

    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    # Working directories; each run gets its own sub-directory
    DOWNLOADS_DIR: Path = Path(os.getenv("DOWNLOADS_DIR", "downloads")).resolve()
    MERGED_DIR: Path = Path(os.getenv("MERGED_DIR", "merged")).resolve()
    MERGED_URL_PREFIX: str = "/merged"
    MERGED_FILENAME: str = os.getenv("MERGED_FILENAME", "Final_Merged.pdf")
    MERGED_RUNS_TO_KEEP: int = int(os.getenv("MERGED_RUNS_TO_KEEP", "10"))

    # Roll number layout
    ROLL_NUMBER_WIDTH: int = 4
    MAX_RANGE_SIZE: int = int(os.getenv("MAX_RANGE_SIZE", "10000"))

    # Browser
    BROWSER_HEADLESS: bool = _env_bool("BROWSER_HEADLESS", "True")
    BROWSER_ARGS: List[str] = ["--no-sandbox", "--disable-setuid-sandbox"]
    NAVIGATION_TIMEOUT_MS: int = int(os.getenv("NAVIGATION_TIMEOUT_MS", "30000"))
    NAVIGATION_WAIT_UNTIL: str = os.getenv("NAVIGATION_WAIT_UNTIL", "networkidle")
    RESULT_TIMEOUT_MS: int = int(os.getenv("RESULT_TIMEOUT_MS", "4000"))

    # Result portal form
    ROLL_INPUT_SELECTOR: str = os.getenv("ROLL_INPUT_SELECTOR", "#txtRollNo")
    SUBMIT_SELECTOR: str = os.getenv("SUBMIT_SELECTOR", "#btnGetResult")
    RESULT_SELECTOR: str = os.getenv("RESULT_SELECTOR", "#lblName")
    DOCUMENT_LINK_SELECTOR: str = os.getenv(
        "DOCUMENT_LINK_SELECTOR", 'a[href$=".pdf"]'
    )

    # How the lookup is submitted: "click" or "postback"
    LOOKUP_TRIGGER: str = os.getenv("LOOKUP_TRIGGER", "click")
    POSTBACK_EVENT_TARGET: str = os.getenv(
        "POSTBACK_EVENT_TARGET", "btnGetResult"
    )
    POSTBACK_EVENT_ARGUMENT: str = os.getenv("POSTBACK_EVENT_ARGUMENT", "")

    # Document download
    DOWNLOAD_TIMEOUT_SECONDS: float = float(
        os.getenv("DOWNLOAD_TIMEOUT_SECONDS", "30")
    )
    USER_AGENT: str = os.getenv(
        "USER_AGENT",
        "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36",
    )

    # CORS
    BACKEND_CORS_ORIGINS: List[str] = [
        "http://localhost",
        "http://localhost:3000",
        "http://localhost:5000",
        "http://localhost:8000",
    ]

    # Production Celery settings (will be patched for tests)
    CELERY_BROKER_URL: str = os.getenv(
        "CELERY_BROKER_URL", "redis://redis:6379/0"
    )
    CELERY_RESULT_BACKEND: str = os.getenv(
        "CELERY_RESULT_BACKEND", "redis://redis:6379/0"
    )

    # Celery settings for testing (will be True only when patched by conftest.py)
    CELERY_TASK_ALWAYS_EAGER: bool = False
    CELERY_TASK_EAGER_PROPAGATES: bool = False


settings = Settings()
