from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from pydantic_settings import BaseSettings

# Application version - single source of truth
APP_VERSION = "0.1.0"

# Base directory for path calculations
_base_dir = Path(__file__).resolve().parent.parent.parent.parent

# Known spools and the grams already used from each before history tracking began
DEFAULT_SPOOL_ROSTER: Mapping[str, float] = MappingProxyType(
    {
        "White Spool": 823.0,
        "New Black Spool": 893.0,
        "Kevin's Spool": 958.0,
        "Grey Spool": 710.0,
        "Blue Spool": 870.0,
        "Black Spool": 977.0,
        "Orange Spool": 63.0,
    }
)


class Settings(BaseSettings):
    app_name: str = "SpoolTally"
    debug: bool = False  # Default to production mode

    # Paths
    base_dir: Path = _base_dir
    log_dir: Path = base_dir / "logs"

    # Logging
    log_level: str = "INFO"  # Override with LOG_LEVEL env var or DEBUG=true
    log_to_file: bool = True  # Set to false to disable file logging

    # Server
    port: int = 8787

    # Printer history service (Moonraker)
    printer_host: str = "192.168.1.8"
    history_start: int = 108
    history_order: str = "asc"
    history_timeout: float = 5.0  # Seconds before the upstream fetch is abandoned

    @property
    def history_base_url(self) -> str:
        return f"http://{self.printer_host}"

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


settings = Settings()

if settings.log_to_file:
    settings.log_dir.mkdir(exist_ok=True)
