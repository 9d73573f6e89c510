# classquiz/core/config.py
from typing import List, Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Classroom Quiz Grading Service"

    # Database
    # SQLite file next to the app by default; any SQLAlchemy URL works
    DATABASE_URL: str = "sqlite:///./tests.db"

    # Grading: "six_point" (2.00 - 6.00) or "letter" (A - F)
    GRADE_SCALE: Literal["six_point", "letter"] = "six_point"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Frontend dev servers allowed by CORS
    CORS_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
