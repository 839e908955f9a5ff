from pydantic_settings import BaseSettings
from pydantic import Field
import os
from dotenv import load_dotenv

from models.enums import StorageBackend

load_dotenv()

class Settings(BaseSettings):
    # Telegram bot token
    bot_token: str = Field(default=os.getenv("CONCIERGE_BOT_TOKEN", ""))

    # State persistence
    storage_backend: StorageBackend = Field(default=os.getenv("STORAGE_BACKEND", StorageBackend.MEMORY.value))
    storage_directory: str = Field(default=os.getenv("STORAGE_DIRECTORY", "state"))

    # Guard against flows that never wait for input
    max_steps_per_turn: int = Field(default=int(os.getenv("MAX_STEPS_PER_TURN", "100")))

    log_level: str = Field(default=os.getenv("LOG_LEVEL", "INFO"))

    class Config:
        env_file = ".env"

settings = Settings()
