# matchday/config.py
import os
from dotenv import load_dotenv
from pathlib import Path


# Carga el archivo .env
load_dotenv()

class Settings:
    DB_HOST = os.getenv("DB_HOST")
    DB_PORT = os.getenv("DB_PORT")
    DB_NAME = os.getenv("DB_NAME")
    DB_USER = os.getenv("DB_USER")
    DB_PASSWORD = os.getenv("DB_PASSWORD")

    # DATABASE_URL tiene prioridad (tests usan SQLite)
    DATABASE_URL = os.getenv("DATABASE_URL") or (
        f"postgresql+psycopg://{DB_USER}:{DB_PASSWORD}@{DB_HOST}:{DB_PORT}/{DB_NAME}"
    )

    BASE_DIR = Path(__file__).resolve().parent
    API_BASE_URL: str = os.getenv("API_BASE_URL", "http://127.0.0.1:8000")
    API_BASE_PATH: str = os.getenv("API_BASE_PATH", "/matchday")

    SECRET_KEY: str = os.getenv("SECRET_KEY", "secret_dev")  # cambiá esto en producción
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    EMAIL_TOKEN_EXPIRE_HOURS: int = int(os.getenv("EMAIL_TOKEN_EXPIRE_HOURS", "48"))

    # Token compartido de los jobs programados (determine, start-due, dispatch)
    SCHEDULER_TOKEN: str | None = os.getenv("SCHEDULER_TOKEN")

    # Votación MOTM
    VOTING_GRACE_PERIOD_MINUTES: int = int(os.getenv("VOTING_GRACE_PERIOD_MINUTES", "10"))
    MOTM_VOTE_THRESHOLD: int = int(os.getenv("MOTM_VOTE_THRESHOLD", "0"))  # 0 = sin umbral

    # Cola de notificaciones
    NOTIFICATION_MAX_ATTEMPTS: int = int(os.getenv("NOTIFICATION_MAX_ATTEMPTS", "3"))
    NOTIFICATION_RETRY_DELAY_SECONDS: int = int(os.getenv("NOTIFICATION_RETRY_DELAY_SECONDS", "60"))
    NOTIFICATION_POLL_INTERVAL: float = float(os.getenv("NOTIFICATION_POLL_INTERVAL", "30"))
    NOTIFICATION_WORKER_ENABLED: bool = os.getenv("NOTIFICATION_WORKER_ENABLED", "1") == "1"

    EMAIL_API_URL: str | None = os.getenv("EMAIL_API_URL")
    EMAIL_API_KEY: str | None = os.getenv("EMAIL_API_KEY")
    EMAIL_FROM: str = os.getenv("EMAIL_FROM", "no-reply@matchday.local")

    @property
    def api_root(self) -> str:
        return f"{self.API_BASE_URL.rstrip('/')}{self.API_BASE_PATH}"


settings = Settings()
