import os
from pathlib import Path
from pydantic import BaseModel

DEFAULT_MAX_FILE_SIZE = 50 * 1024 * 1024  # 50MB
DEFAULT_DATABASE_NAME = "consolidator.db"


class Settings(BaseModel):
    """Runtime settings, read from CONSOLIDATOR_* environment variables."""
    data_dir: Path
    database_path: Path
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    log_level: str = "INFO"


def _default_data_dir() -> Path:
    # CONSOLIDATOR_DATA_DIR if set (e.g. /data in Docker),
    # otherwise ~/.config/consolidator for local use
    data_dir = os.environ.get("CONSOLIDATOR_DATA_DIR")
    return Path(data_dir) if data_dir else Path.home() / ".config" / "consolidator"


def load_settings() -> Settings:
    """Build settings from the environment."""
    data_dir = _default_data_dir()
    database = os.environ.get("CONSOLIDATOR_DATABASE")
    database_path = Path(database) if database else data_dir / DEFAULT_DATABASE_NAME

    max_size = os.environ.get("CONSOLIDATOR_MAX_FILE_SIZE")

    return Settings(
        data_dir=data_dir,
        database_path=database_path,
        max_file_size=int(max_size) if max_size else DEFAULT_MAX_FILE_SIZE,
        log_level=os.environ.get("CONSOLIDATOR_LOG_LEVEL", "INFO"),
    )


def ensure_data_dir(settings: Settings) -> None:
    """Ensure the directory holding the database exists."""
    settings.database_path.parent.mkdir(parents=True, exist_ok=True)
