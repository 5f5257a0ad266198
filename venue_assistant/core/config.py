from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    APP_NAME: str = "eventvenue-assistant"
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"

    # primary provider: OpenAI-compatible chat completions on Groq
    GROQ_API_KEY: str = ""
    GROQ_BASE_URL: str = "https://api.groq.com/openai/v1"
    GROQ_MODEL: str = "llama-3.3-70b-versatile"

    # secondary provider: Gemini generateContent
    GEMINI_API_KEY: str = ""
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1"
    GEMINI_MODEL: str = "gemini-2.0-flash"

    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 1000
    PROVIDER_TIMEOUT_SECONDS: float = 20.0
    MIN_API_KEY_LENGTH: int = 20

    RETRY_MAX_ATTEMPTS: int = 3
    # seconds per attempt number; rate limits back off twice as long
    RATE_LIMIT_BACKOFF_SECONDS: float = 2.0
    FAILURE_BACKOFF_SECONDS: float = 1.0

    PRIMARY_MAX_CHUNKS: int = 7
    SECONDARY_MAX_CHUNKS: int = 5
    FALLBACK_MAX_CHUNKS: int = 4

    MAX_MESSAGE_CHARS: int = 1000
    MAX_HISTORY_MESSAGES: int = 10

    KNOWLEDGE_BASE_PATH: str | None = None
    SUPPORT_EMAIL: str = "pranaib20@gmail.com"

    class Config:
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"

settings = Settings()


def current_settings() -> Settings:
    # re-read env/.env so rotated API keys apply without a restart
    return Settings()
