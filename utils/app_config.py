"""Pre-DB bootstrap configuration. Zero imports from the rest of the app.

Stores user preferences that must be known before opening the DB (db_folder)
along with process-wide preferences (language, last backup reminder) so they
can be passed around explicitly instead of living in module globals.
Config lives in ~/.tally/config.json; TALLY_CONFIG_DIR overrides the folder.
"""
import json
import os
from dataclasses import asdict, dataclass
from pathlib import Path

DEFAULT_CONFIG_DIR = Path.home() / ".tally"
CONFIG_FILENAME = "config.json"
LANGUAGES = ("zh", "en")


def config_dir() -> Path:
    override = os.getenv("TALLY_CONFIG_DIR")
    return Path(override) if override else DEFAULT_CONFIG_DIR


def config_file() -> Path:
    return config_dir() / CONFIG_FILENAME


@dataclass
class AppConfig:
    db_folder: str | None = None
    language: str = "zh"
    last_backup_reminder: str = ""   # 'YYYY-M' of the last month a reminder was shown

    @classmethod
    def from_dict(cls, data: dict) -> "AppConfig":
        language = data.get("language")
        return cls(
            db_folder=data.get("db_folder") or None,
            language=language if language in LANGUAGES else "zh",
            last_backup_reminder=str(data.get("last_backup_reminder") or ""),
        )

    def to_dict(self) -> dict:
        return asdict(self)


def load_config() -> AppConfig:
    """Returns defaults on missing or corrupt file — never raises."""
    try:
        with open(config_file(), "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()
    return AppConfig.from_dict(data)


def save_config(config: AppConfig) -> None:
    """Creates the config folder if needed; atomic write via .tmp + os.replace()."""
    target = config_file()
    target.parent.mkdir(parents=True, exist_ok=True)
    tmp = target.with_suffix(".tmp")
    try:
        with open(tmp, "w", encoding="utf-8") as f:
            json.dump(config.to_dict(), f, indent=2)
        os.replace(tmp, target)
    except OSError:
        tmp.unlink(missing_ok=True)
        raise


def set_db_folder(config: AppConfig, path: str | None) -> AppConfig:
    """Update db_folder in config and save."""
    config.db_folder = path
    save_config(config)
    return config


def set_language(config: AppConfig, language: str) -> AppConfig:
    if language not in LANGUAGES:
        raise ValueError(f"Unsupported language: {language}")
    config.language = language
    save_config(config)
    return config
