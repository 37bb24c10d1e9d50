from typing import List, Optional
from pydantic_settings import BaseSettings
from functools import lru_cache

class Settings(BaseSettings):
    # App Settings
    APP_NAME: str = "DailyDare"
    APP_VERSION: str = "0.1.0"
    DEBUG: bool = False

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8080

    # Security Settings
    JWT_SECRET_KEY: str = "change-me-daily-dare-development-secret-key"
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Endpoint-specific rate limits (requests per minute)
    RATE_LIMIT_REROLL: int = 10         # Reroll attempts
    RATE_LIMIT_PURCHASE: int = 10       # Token purchases
    RATE_LIMIT_BONUS: int = 5           # Bonus dare generation (external AI call)
    RATE_LIMIT_DOUBLE_DARE: int = 10    # Double dare awards
    RATE_LIMIT_DEFAULT: int = 60        # Default for other endpoints

    # CORS
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:8081",  # Expo dev server
        "http://localhost:19006",  # Expo web
    ]

    # Redis Settings
    REDIS_URL: str = "redis://localhost:6379/0"
    REDIS_MAX_CONNECTIONS: int = 10

    # PostgreSQL Settings (dare activity ledger)
    ACTIVITY_LOG_ENABLED: bool = False
    POSTGRES_HOST: str = "localhost"
    POSTGRES_PORT: int = 5432
    POSTGRES_USER: str = "dailydare"
    POSTGRES_PASSWORD: str = "dailydare"
    POSTGRES_DB: str = "dailydare"
    POSTGRES_MIN_POOL_SIZE: int = 2
    POSTGRES_MAX_POOL_SIZE: int = 10
    DB_LOGGING_ENABLED: bool = False

    # Dare Economy Settings
    FREE_REROLLS_PER_DAY: int = 2
    REROLL_COST: int = 50  # Points charged for a reroll once free tokens run out
    REROLL_TOKEN_COST: int = 50  # Points charged for buying one extra token
    DOUBLE_DARE_COST: int = 50
    DARE_TIMEZONE: str = "UTC"  # Default zone for the daily cutover
    PROFILE_UPDATE_MAX_RETRIES: int = 5  # Optimistic concurrency retries
    SEED_DARES_ON_STARTUP: bool = True

    # Leaderboard / Feed Settings
    LEADERBOARD_SIZE: int = 50
    LEADERBOARD_SEARCH_WINDOW: int = 200
    FEED_PAGE_SIZE: int = 20

    # Bonus (Overtime) Dare Settings
    GEMINI_API_KEY: Optional[str] = None
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_MODEL: str = "models/gemini-1.5-flash"
    BONUS_DARE_PREFIX: str = "ai_"

    # HTTP Client Settings
    HTTP_DEFAULT_TIMEOUT: float = 10.0
    HTTP_GEMINI_TIMEOUT: float = 30.0
    HTTP_MAX_CONNECTIONS: int = 20
    HTTP_MAX_KEEPALIVE_CONNECTIONS: int = 5

    class Config:
        env_file = ".env"
        case_sensitive = True

@lru_cache()
def get_settings() -> Settings:
    return Settings()

settings = get_settings()
