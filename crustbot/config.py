from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

BASE_DIR = Path(__file__).resolve().parent
DEFAULT_DATA_DIR = BASE_DIR / "data"


class ConfigError(RuntimeError):
    """Raised when required runtime configuration is missing."""


@dataclass(frozen=True)
class Settings:
    """Configuration container for static data paths, matching limits, and adapters."""
    static_answers_path: Path
    regions_path: Path
    knowledge_base_path: Path
    kb_min_word_length: int
    kb_match_threshold: int
    typing_delay_ms: int
    log_level: str
    web_host: str
    web_port: int
    slack_bot_token: str
    slack_signing_secret: str
    slack_app_token: str

    def require_slack(self) -> None:
        """Purpose: Ensure the Slack adapter has every token it needs.
        Inputs/Outputs: No inputs; returns None when all tokens are set.
        Side Effects / State: None.
        Dependencies: Used by the Slack adapter before building the Bolt app.
        Failure Modes: Raises ConfigError naming the missing variables.
        If Removed: Bolt fails later with a less specific authentication error.
        Testing Notes: Build Settings with a blank token and expect ConfigError.
        """
        # Collect the env var names of blank tokens for a single error message.
        missing = [
            name
            for name, value in (
                ("SLACK_BOT_TOKEN", self.slack_bot_token),
                ("SLACK_SIGNING_SECRET", self.slack_signing_secret),
                ("SLACK_APP_TOKEN", self.slack_app_token),
            )
            if not value
        ]
        if missing:
            raise ConfigError(f"Missing Slack configuration: {', '.join(missing)}")


def load_env() -> None:
    """Load a .env file from the package directory, then from the working directory."""
    env_path = BASE_DIR / ".env"
    if env_path.exists():
        load_dotenv(env_path, override=True)
    load_dotenv()


def load_settings() -> Settings:
    """Purpose: Load configuration from environment variables and defaults.
    Inputs/Outputs: No inputs; returns a Settings instance.
    Side Effects / State: Reads environment variables and filesystem paths.
    Dependencies: Uses os.getenv and DEFAULT_DATA_DIR for default paths.
    Failure Modes: Non-integer KB_*, TYPING_DELAY_MS or WEB_PORT values raise
        ValueError.
    If Removed: Adapters cannot locate the static data files and fail at startup.
    Testing Notes: Verify defaults and overrides via environment variables.
    """
    # Resolve the data directory first so per-file overrides can fall back to it.
    data_dir_env = os.getenv("DATA_DIR")
    data_dir = Path(data_dir_env).resolve() if data_dir_env else DEFAULT_DATA_DIR

    return Settings(
        static_answers_path=_path_from_env("STATIC_ANSWERS_PATH", data_dir / "data.json"),
        regions_path=_path_from_env("REGIONS_PATH", data_dir / "region_list.json"),
        knowledge_base_path=_path_from_env("KNOWLEDGE_BASE_PATH", data_dir / "knowledge_base.json"),
        kb_min_word_length=int(os.getenv("KB_MIN_WORD_LENGTH", "4")),
        kb_match_threshold=int(os.getenv("KB_MATCH_THRESHOLD", "3")),
        typing_delay_ms=int(os.getenv("TYPING_DELAY_MS", "1200")),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        web_host=os.getenv("WEB_HOST", "127.0.0.1"),
        web_port=int(os.getenv("WEB_PORT", "8000")),
        slack_bot_token=os.getenv("SLACK_BOT_TOKEN", ""),
        slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
        slack_app_token=os.getenv("SLACK_APP_TOKEN", ""),
    )


def _path_from_env(name: str, default: Path) -> Path:
    value = os.getenv(name)
    if value:
        return Path(value).resolve()
    return default
