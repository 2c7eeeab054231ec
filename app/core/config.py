# app/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite+aiosqlite:///./trends_feed.db"

    MEDIA_DIR: str = "./media"
    ALLOWED_ORIGINS: str = "*"

    # 🖼️ bucket de imágenes de posts (carpeta dentro de MEDIA_DIR)
    POST_IMAGES_BUCKET: str = "post-images"
    PUBLIC_BASE_URL: str = "http://127.0.0.1:8000"
    IMAGE_CACHE_CONTROL: str = "3600"

    # 👤 identidad fija mientras no haya auth real
    FIXED_USER_ID: str = "123e4567-e89b-12d3-a456-426614174000"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def allow_origins_list(self) -> List[str]:
        if self.ALLOWED_ORIGINS == "*":
            return ["*"]
        return [o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip()]


settings = Settings()
