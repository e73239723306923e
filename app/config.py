import os
from typing import List, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator

load_dotenv()


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Settings(BaseModel):
    """Application settings loaded from environment variables"""

    # Database
    DATABASE_URL: str = "sqlite:///./tidytap.db"

    # Supabase auth
    SUPABASE_URL: Optional[str] = None
    SUPABASE_ANON_KEY: Optional[str] = None
    OAUTH_REDIRECT_URL: Optional[str] = None

    # Assistant (OpenAI-compatible chat completions endpoint)
    ASSISTANT_API_URL: str = "https://api.openai.com/v1/chat/completions"
    ASSISTANT_API_KEY: str = ""
    ASSISTANT_MODEL: str = "gpt-3.5-turbo"
    ASSISTANT_TIMEOUT_SECONDS: float = 30.0

    # Households
    INVITE_CODE_PREFIX: str = "TIDY"
    HOUSEHOLD_QUERY_BATCH_SIZE: int = Field(10, ge=1)
    REMOVE_MEMBER_CLEARS_HOUSEHOLD: bool = False

    # HTTP
    CORS_ORIGINS: List[str] = ["http://localhost:3000", "http://127.0.0.1:3000"]
    LOG_LEVEL: str = "INFO"

    @field_validator("CORS_ORIGINS", mode="before")
    @classmethod
    def parse_origins(cls, v):
        if isinstance(v, str):
            return [origin.strip() for origin in v.split(",") if origin.strip()]
        return v


def load_settings() -> Settings:
    values = {
        "DATABASE_URL": os.getenv("DATABASE_URL"),
        "SUPABASE_URL": os.getenv("SUPABASE_URL"),
        "SUPABASE_ANON_KEY": os.getenv("SUPABASE_ANON_KEY"),
        "OAUTH_REDIRECT_URL": os.getenv("OAUTH_REDIRECT_URL"),
        "ASSISTANT_API_URL": os.getenv("ASSISTANT_API_URL"),
        "ASSISTANT_API_KEY": os.getenv("ASSISTANT_API_KEY")
        or os.getenv("OPENAI_API_KEY"),
        "ASSISTANT_MODEL": os.getenv("ASSISTANT_MODEL"),
        "ASSISTANT_TIMEOUT_SECONDS": os.getenv("ASSISTANT_TIMEOUT_SECONDS"),
        "INVITE_CODE_PREFIX": os.getenv("INVITE_CODE_PREFIX"),
        "HOUSEHOLD_QUERY_BATCH_SIZE": os.getenv("HOUSEHOLD_QUERY_BATCH_SIZE"),
        "CORS_ORIGINS": os.getenv("CORS_ORIGINS"),
        "LOG_LEVEL": os.getenv("LOG_LEVEL"),
    }
    # Unset variables fall back to the model defaults
    values = {key: value for key, value in values.items() if value is not None}
    values["REMOVE_MEMBER_CLEARS_HOUSEHOLD"] = _env_flag(
        "REMOVE_MEMBER_CLEARS_HOUSEHOLD"
    )
    return Settings(**values)


settings = load_settings()
