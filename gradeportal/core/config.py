# gradeportal/core/config.py
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_NAME: str = "Submission Grading Portal"

    # Database
    # Use PostgreSQL for production
    DATABASE_URL: str = "sqlite:///./gradeportal.db"

    # Redis (for the evaluation queue)
    REDIS_URL: str = "redis://localhost:6379/0"

    LOG_LEVEL: str = "INFO"

    # Remote grader (OpenAI-compatible chat completions)
    REMOTE_GRADER_ENABLED: bool = False
    REMOTE_GRADER_URL: str = "https://api.openai.com/v1/chat/completions"
    REMOTE_GRADER_API_KEY: str | None = None
    REMOTE_GRADER_MODEL: str = "gpt-3.5-turbo"
    REMOTE_GRADER_TIMEOUT_SECONDS: float = 20.0
    REMOTE_GRADER_TEMPERATURE: float = 0.3
    REMOTE_GRADER_MAX_TOKENS: int = 500

    # Question catalog
    QUESTION_CACHE_TTL_SECONDS: float = 300.0

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
