from pydantic_settings import BaseSettings
from typing import Optional


class ClientSettings(BaseSettings):
    BASE_URL: str = "http://localhost:8000/api/v1"

    # None keeps the transport's own default
    TIMEOUT: Optional[float] = None

    # Minimum gap between two non-forced summary refreshes
    SUMMARY_THROTTLE_SECONDS: float = 5.0

    class Config:
        env_prefix = "FINTOOLS_"
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"


client_settings = ClientSettings()
