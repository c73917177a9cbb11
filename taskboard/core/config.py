from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str = os.getenv("DATABASE_URL", "sqlite:///./taskboard.db")
    SQL_ECHO: bool = False
    CREATE_TABLES_ON_STARTUP: bool = True

    # Session token settings
    SECRET_KEY: str = os.getenv("SECRET_KEY", "your-super-secret-key-change-in-production")
    ALGORITHM: str = os.getenv("ALGORITHM", "HS256")
    ACCESS_TOKEN_EXPIRE_MINUTES: int = int(os.getenv("ACCESS_TOKEN_EXPIRE_MINUTES", "60"))
    SESSION_COOKIE_NAME: str = "taskboard_session"
    SESSION_COOKIE_SECURE: bool = False

    # Password hashing work factor
    BCRYPT_ROUNDS: int = 10

    # Project settings
    PROJECT_NAME: str = os.getenv("PROJECT_NAME", "Taskboard")
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    LOG_LEVEL: str = "INFO"

    class Config:
        env_file = ".env"
        # Unknown keys in .env are ignored rather than rejected
        extra = "ignore"

settings = Settings()
