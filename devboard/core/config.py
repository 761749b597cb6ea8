# devboard/core/config.py
from typing import List
from pydantic_settings import BaseSettings

class Settings(BaseSettings):
    # App
    APP_ENV: str = "development"
    SECRET_KEY: str = "change-me"  # override in .env / secrets
    PORT: int = 5000
    LOG_LEVEL: str = "INFO"
    # comma separated list of allowed origins, "*" for any
    CORS_ORIGINS: str = "*"

    # MongoDB
    MONGODB_URI: str = "mongodb://localhost:27017/devboard"
    MONGODB_DB: str = "devboard"

    # Tokens are valid for a day unless overridden
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24

    # Resume uploads
    UPLOAD_DIR: str = "uploads"
    MAX_RESUME_BYTES: int = 5 * 1024 * 1024

    # Pydantic v2 settings: read from .env file
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

# single shared settings instance
settings = Settings()
