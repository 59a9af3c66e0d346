from typing import List, Optional
from pydantic import validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv

# Explicitly load .env file and override existing environment variables
# This ensures that values from .env take precedence over system-wide environment variables.
load_dotenv(override=True)

class Settings(BaseSettings):
    """Base settings for the CarLens service."""

    # API settings
    API_PREFIX: str = ""
    PROJECT_NAME: str = "CarLens"
    HOST: str = "0.0.0.0"
    PORT: int = 3000
    LOG_LEVEL: str = "INFO"

    # CORS settings, comma separated
    FRONTEND_ORIGIN: str = "http://localhost:5173"

    # Database settings
    # Default values for local development, override these in .env file
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_USER: str = "postgres"
    POSTGRES_PASSWORD: str = "postgres"
    POSTGRES_DB: str = "carlens"
    POSTGRES_PORT: int = 5432

    # Any SQLAlchemy URL, takes precedence over the POSTGRES_* components
    DATABASE_URL: Optional[str] = None

    SQLALCHEMY_DATABASE_URI: Optional[str] = None

    AUTO_CREATE_TABLES: bool = True

    @validator("SQLALCHEMY_DATABASE_URI", pre=True, always=True)
    def assemble_db_connection(cls, v: Optional[str], values: dict) -> str:
        if values.get("DATABASE_URL"):
            return values.get("DATABASE_URL")

        if isinstance(v, str):
            return v
        return (
            f"postgresql://{values.get('POSTGRES_USER')}:{values.get('POSTGRES_PASSWORD')}"
            f"@{values.get('POSTGRES_SERVER')}:{values.get('POSTGRES_PORT')}"
            f"/{values.get('POSTGRES_DB') or ''}"
        )

    # JWT Authentication settings
    JWT_SECRET_KEY: str = "your-secret-key"  # Change this in production
    JWT_ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Generative AI settings
    GEMINI_API_KEY: str = ""
    GEMINI_MODEL: str = "gemini-1.5-flash"

    # Uploaded images live under UPLOAD_DIR/<user id>/ and are served from UPLOAD_URL_PREFIX
    UPLOAD_DIR: str = "cars"
    UPLOAD_URL_PREFIX: str = "/cars"

    @property
    def cors_origins(self) -> List[str]:
        return [origin.strip() for origin in self.FRONTEND_ORIGIN.split(",") if origin.strip()]

    model_config = {
        "case_sensitive": True,
        "env_file": ".env",
        "extra": "ignore",
    }

# Create settings instance
settings = Settings()
