import os
import tempfile
from typing import List

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./dev.db"
    APP_HOST: str = "127.0.0.1"
    APP_PORT: int = 8000
    FRONTEND_ORIGINS: List[str] = ["http://localhost:3000"]
    LOG_LEVEL: str = "INFO"

    # storefront
    DELIVERY_FEE_CENTS: int = 599
    ORDER_CODE_PREFIX: str = "ER"
    ORDER_CODE_WIDTH: int = 3

    # 0 disables the background job that accepts stale PENDING orders
    AUTO_RECEIVE_AFTER_SECONDS: int = 0

    LOCKS_DIR: str = os.path.join(tempfile.gettempdir(), "storefront_locks")

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()
