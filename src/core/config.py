from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # Database settings
    DATABASE_URL: str

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int

    # Shared secret expected in the X-Auth-Token header
    AUTH_TOKEN: str

    # Application settings
    DEBUG: bool = False
    PROJECT_NAME: str = "Chord Stats API"
    REQUEST_TIMEOUT_SECONDS: float = 60.0

    # What to do with a body that cannot be decoded on POST /stats:
    # "accept" stores a zero-valued record, "reject" answers 400
    INVALID_PAYLOAD_POLICY: Literal["accept", "reject"] = "accept"

    # CORS settings
    ALLOWED_ORIGIN_REGEX: str = r"https?://.*"
    ALLOWED_METHODS: list[str] = ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
    CORS_MAX_AGE: int = 300

    # Logging
    LOG_DIR: Path = Path(__file__).parent.parent / "logs"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


def get_settings(**overrides) -> Settings:
    return Settings(**overrides)
