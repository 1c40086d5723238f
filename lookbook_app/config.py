"""Configuration helpers for the Lookbook styling service."""

from dataclasses import dataclass
from pathlib import Path
import os
from typing import Dict, Optional

DEFAULT_GEMINI_MODEL = "gemini-1.5-flash"
DEFAULT_LOCATION = "London,UK"
DEFAULT_DB_PATH = "data/lookbook.db"
DEFAULT_MAX_COMBINATIONS = 200
DEFAULT_RECOMMENDATION_LIMIT = 5


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in {'"', "'"}:
        return value[1:-1]
    return value


def read_settings_file(path: Path) -> Dict[str, str]:
    """Read flat ``key: value`` pairs from an environment settings file.

    Only the flat subset of YAML used by ``config/environments/*.yaml`` is
    understood: one scalar per line, ``#`` comments and optional quotes.
    """

    settings: Dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.split(" #", 1)[0].strip()
        if not line or line.startswith("#"):
            continue
        key, separator, value = line.partition(":")
        if not separator:
            continue
        settings[key.strip().lower()] = _unquote(value.strip())
    return settings


@dataclass
class LookbookConfig:
    """Configuration values for the Lookbook service.

    Secrets (Gemini and OpenWeather keys) are optional so the service can run
    fully offline; the collaborators fall back to deterministic output when
    they are missing.
    """

    environment: Optional[str] = None
    model: str = DEFAULT_GEMINI_MODEL
    gemini_api_key: Optional[str] = None
    weather_api_key: Optional[str] = None
    default_location: str = DEFAULT_LOCATION
    wardrobe_db_path: str = DEFAULT_DB_PATH
    max_combinations: int = DEFAULT_MAX_COMBINATIONS
    default_limit: int = DEFAULT_RECOMMENDATION_LIMIT
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "LookbookConfig":
        """Build a config from environment variables layered over a settings file.

        The file is ``APP_CONFIG_PATH`` when set, otherwise
        ``<LOOKBOOK_CONFIG_DIR>/<APP_ENV>.yaml``. Environment variables (upper
        case keys) always win so secrets never need to live in the file.
        """

        env_name = os.getenv("APP_ENV")
        file_settings: Dict[str, str] = {}
        settings_path = cls._settings_path(env_name)
        if settings_path is not None and settings_path.exists():
            file_settings = read_settings_file(settings_path)

        def setting(key: str) -> Optional[str]:
            value = os.getenv(key.upper())
            if value is None:
                value = file_settings.get(key)
            return value or None

        return cls(
            environment=env_name,
            model=setting("gemini_model") or DEFAULT_GEMINI_MODEL,
            gemini_api_key=setting("google_api_key"),
            weather_api_key=setting("openweather_api_key"),
            default_location=setting("default_location") or DEFAULT_LOCATION,
            wardrobe_db_path=setting("wardrobe_db_path") or DEFAULT_DB_PATH,
            max_combinations=cls._as_int("max_combinations", setting("max_combinations"), DEFAULT_MAX_COMBINATIONS),
            default_limit=cls._as_int(
                "recommendation_limit", setting("recommendation_limit"), DEFAULT_RECOMMENDATION_LIMIT
            ),
            log_level=(setting("log_level") or "INFO").upper(),
        )

    @staticmethod
    def _settings_path(env_name: Optional[str]) -> Optional[Path]:
        explicit = os.getenv("APP_CONFIG_PATH")
        if explicit:
            return Path(explicit)
        if env_name:
            return Path(os.getenv("LOOKBOOK_CONFIG_DIR", "config/environments")) / f"{env_name}.yaml"
        return None

    @staticmethod
    def _as_int(key: str, raw: Optional[str], default: int) -> int:
        if raw is None:
            return default
        try:
            value = int(raw.strip())
        except ValueError as exc:
            raise ValueError(f"Config value '{key}' must be an integer, got {raw!r}") from exc
        if value < 1:
            raise ValueError(f"Config value '{key}' must be positive, got {value}")
        return value
