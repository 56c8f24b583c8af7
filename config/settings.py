import os
import logging
from dataclasses import dataclass, field
from typing import List

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load environment variables
load_dotenv()

VALID_LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def _split_origins(raw: str) -> List[str]:
    origins = [origin.strip() for origin in raw.split(",") if origin.strip()]
    return origins or ["*"]


@dataclass(frozen=True)
class Settings:
    app_name: str = "BuzzU Signaling Server"
    app_version: str = "1.0"
    host: str = "0.0.0.0"
    port: int = 8000
    log_level: str = "INFO"
    environment: str = "development"
    peer_id_prefix: str = "peer_"
    allowed_origins: List[str] = field(default_factory=lambda: ["*"])

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def banner(self) -> str:
        return f"{self.app_name} v{self.app_version}"


def get_settings() -> Settings:
    """Read settings from the environment"""
    return Settings(
        app_name=os.getenv("APP_NAME", "BuzzU Signaling Server"),
        app_version=os.getenv("APP_VERSION", "1.0"),
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", 8000)),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        environment=os.getenv("ENVIRONMENT", "development"),
        peer_id_prefix=os.getenv("PEER_ID_PREFIX", "peer_"),
        allowed_origins=_split_origins(os.getenv("ALLOWED_ORIGINS", "*")),
    )


def validate_settings(settings: Settings):
    """Validate that the configured values are usable"""
    problems = []
    if not 0 < settings.port < 65536:
        problems.append(f"PORT out of range: {settings.port}")
    if settings.log_level not in VALID_LOG_LEVELS:
        problems.append(f"LOG_LEVEL must be one of {', '.join(VALID_LOG_LEVELS)}")
    if problems:
        raise RuntimeError(f"Invalid configuration: {'; '.join(problems)}")
    logger.debug(f"Settings validated for {settings.environment} environment")


settings = get_settings()
