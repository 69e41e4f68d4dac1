"""Application settings and configuration."""

from pathlib import Path
from dataclasses import dataclass, field
from typing import Optional
import os
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

# Project root directory
PROJECT_ROOT = Path(__file__).parent.parent


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


@dataclass
class FilterConfig:
    """Filter engine behaviour settings."""

    url_sync: bool = field(
        default_factory=lambda: _env_flag("VAULT_FILTERS_URL_SYNC", "true")
    )
    max_active_filters: int = field(
        default_factory=lambda: int(os.getenv("VAULT_FILTERS_MAX_ACTIVE", "0"))
    )  # 0 = unlimited
    default_module: str = field(
        default_factory=lambda: os.getenv("VAULT_FILTERS_DEFAULT_MODULE", "deals")
    )


@dataclass
class DataConfig:
    """Data paths configuration."""

    presets_path: Path = field(
        default_factory=lambda: Path(
            os.getenv(
                "VAULT_FILTERS_PRESETS_PATH",
                str(PROJECT_ROOT / "data" / "presets.json"),
            )
        )
    )
    exports_path: Path = field(
        default_factory=lambda: Path(
            os.getenv(
                "VAULT_FILTERS_EXPORTS_PATH", str(PROJECT_ROOT / "data" / "exports")
            )
        )
    )


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = field(
        default_factory=lambda: os.getenv("VAULT_FILTERS_LOG_LEVEL", "INFO")
    )
    log_file: Optional[Path] = field(
        default_factory=lambda: (
            Path(os.environ["VAULT_FILTERS_LOG_FILE"])
            if os.getenv("VAULT_FILTERS_LOG_FILE")
            else None
        )
    )


@dataclass
class Config:
    """Main configuration container."""

    filters: FilterConfig = field(default_factory=FilterConfig)
    data: DataConfig = field(default_factory=DataConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.data.presets_path.parent.mkdir(parents=True, exist_ok=True)
        self.data.exports_path.mkdir(parents=True, exist_ok=True)


# Global config instance
config = Config()
