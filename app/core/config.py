# app/core/config.py
import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

BASE_DIR = Path(__file__).resolve().parent.parent.parent


@dataclass(frozen=True)
class Settings:
    """Runtime configuration, read from the environment"""

    data_dir: Path
    backup_dir: Path
    port: int = 3000
    environment: str = "production"
    max_request_size: int = 10 * 1024 * 1024  # 10MB
    api_url: str = "http://localhost:3000"
    offline_dir: Path = BASE_DIR / ".offline"

    @property
    def reload(self) -> bool:
        return self.environment == "development"


def _path_from_env(name: str, default: Path) -> Path:
    value = os.getenv(name)
    return Path(value).expanduser() if value else default


@lru_cache()
def get_settings() -> Settings:
    return Settings(
        data_dir=_path_from_env("CAFE_DATA_DIR", BASE_DIR / "data"),
        backup_dir=_path_from_env("CAFE_BACKUP_DIR", BASE_DIR / "backups"),
        port=int(os.getenv("PORT", 3000)),
        environment=os.getenv("ENVIRONMENT", "production"),
        max_request_size=int(os.getenv("MAX_REQUEST_SIZE", 10 * 1024 * 1024)),
        api_url=os.getenv("CAFE_API_URL", "http://localhost:3000"),
        offline_dir=_path_from_env("CAFE_OFFLINE_DIR", BASE_DIR / ".offline"),
    )


__all__ = ["Settings", "get_settings"]
