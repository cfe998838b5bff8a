from pydantic_settings import BaseSettings
from dotenv import load_dotenv
from pathlib import Path
import logging
import os

_logger = logging.getLogger(__name__)

# Look for .env in api directory (parent of studyloop directory)
api_dir = Path(__file__).parent.parent.parent
env_path = api_dir / ".env"

if env_path.exists():
    load_dotenv(env_path, override=True)
    _logger.info(f"Loaded .env file from: {env_path}")
else:
    # Fallback to current directory
    current_env = Path(".env")
    if current_env.exists():
        load_dotenv(current_env, override=True)
        _logger.info(f"Loaded .env file from: {current_env.absolute()}")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Database
    database_url: str = ""

    # API
    api_v1_prefix: str = "/api/v1"

    # CORS
    cors_origins: list[str] = ["*"]

    # Runtime
    environment: str = "production"
    log_level: str = "INFO"

    # Review projector
    projector_algorithm: str = "fibonacci"  # 'fibonacci' or 'doubling'
    projector_start_days: int = 1  # Interval unit in days for level 1
    max_projection_steps: int = 1000  # Upper bound for forward simulation per card
    max_level: int = 15  # Highest progress level; intervals stop growing past it

    # Progress defaults
    default_recall_threshold: float = 0.8
    answer_time_smoothing: float = 0.3  # Weight of the newest answer in the estimate

    class Config:
        env_file = ".env"
        case_sensitive = False

    def __init__(self, **kwargs):
        # Ensure we read DATABASE_URL from environment (hosts usually provide it uppercase)
        if not kwargs.get("database_url"):
            kwargs["database_url"] = os.getenv("DATABASE_URL", "")
        super().__init__(**kwargs)


# Create settings instance
settings = Settings()

# Validate required DATABASE_URL
if not settings.database_url:
    raise ValueError("DATABASE_URL environment variable is required")
