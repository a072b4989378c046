# config.py
import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

ENV_PREFIX = "TASKS"
PROJECT_DIR = Path(__file__).parent

DEFAULT_DATA_DIR = Path("data")
DEFAULT_FILE_NAME = "tasks.txt"
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000
DEFAULT_STATIC_DIR = PROJECT_DIR / "static"
DEFAULT_LOG_LEVEL = "INFO"


def _env(suffix: str) -> str | None:
    value = os.getenv(f"{ENV_PREFIX}_{suffix}")
    if value is None or value.strip() == "":
        return None
    return value.strip()


def _env_int(suffix: str, default: int) -> int:
    raw = _env(suffix)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_path(suffix: str, default: Path) -> Path:
    raw = _env(suffix)
    return default if raw is None else Path(raw).expanduser()


@dataclass(frozen=True)
class Settings:
    data_dir: Path = DEFAULT_DATA_DIR
    file_name: str = DEFAULT_FILE_NAME
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    static_dir: Path = DEFAULT_STATIC_DIR
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def tasks_file(self) -> Path:
        return self.data_dir / self.file_name


def load_settings() -> Settings:
    """
    Builds the settings from TASKS_* environment variables.
    A .env file in the working directory is loaded first; real environment variables win.
    """
    load_dotenv(override=False)
    return Settings(
        data_dir=_env_path("DATA_DIR", DEFAULT_DATA_DIR),
        file_name=_env("FILE_NAME") or DEFAULT_FILE_NAME,
        host=_env("HOST") or DEFAULT_HOST,
        port=_env_int("PORT", DEFAULT_PORT),
        static_dir=_env_path("STATIC_DIR", DEFAULT_STATIC_DIR),
        log_level=(_env("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
    )
