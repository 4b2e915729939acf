from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    APP_ENV: str = "development"
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 3000
    CORS_ORIGINS: List[str] = ["*"]

    # Temporary storage for uploads and rendered files
    UPLOAD_DIR: str = "uploads"

    # Rendering
    FFMPEG_BINARY: str = "ffmpeg"
    RENDER_TIMEOUT_SEC: int = 300

    # Upload
    MAX_UPLOAD_SIZE_MB: int = 100
    ALLOWED_AUDIO_TYPES: List[str] = [
        "audio/mpeg", "audio/mp3",
        "audio/wav", "audio/x-wav",
    ]
    ALLOWED_EXTENSIONS: List[str] = [".mp3", ".wav"]


@lru_cache
def get_settings() -> Settings:
    return Settings()


settings = get_settings()
