"""Configuration management for tasktracker."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

TASKTRACKER_HOME = Path(os.environ.get("TASKTRACKER_HOME", Path.home() / "tasktracker"))
CONFIG_FILE = TASKTRACKER_HOME / "config" / "tasktracker.conf"
DATA_DIR = TASKTRACKER_HOME / "data"

LLM_BACKENDS = ("claude", "ollama", "none")


@dataclass
class Config:
    """tasktracker configuration."""

    # Task extraction
    llm_backend: str = "claude"
    llm_timeout: float = 60.0
    ollama_base_url: str = "http://localhost:11434"
    ollama_model: str = "llama3.1"
    # Storage
    tasks_file: str = ""
    preferences_file: str = ""
    # Notification daemon
    timezone: str = ""  # empty = system local time
    refresh_interval: int = 60

    @property
    def tasks_path(self) -> Path:
        if self.tasks_file:
            return Path(self.tasks_file).expanduser()
        return DATA_DIR / "tasks.json"

    @property
    def preferences_path(self) -> Path:
        if self.preferences_file:
            return Path(self.preferences_file).expanduser()
        return TASKTRACKER_HOME / "config" / "preferences.json"


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment on unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        if end_quote != -1:
            return value[1:end_quote]
        return value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from tasktracker.conf."""
    config = Config()
    path = path or CONFIG_FILE

    if not path.exists():
        return config

    for line in path.read_text().splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "llm_backend":
                backend = value.lower()
                if backend in LLM_BACKENDS:
                    config.llm_backend = backend
                else:
                    logger.warning(f"Unknown LLM_BACKEND {value!r}, keeping {config.llm_backend!r}")
            case "llm_timeout":
                try:
                    config.llm_timeout = float(value)
                except ValueError:
                    logger.warning(f"Invalid LLM_TIMEOUT: {value}")
            case "ollama_base_url":
                config.ollama_base_url = value.rstrip("/")
            case "ollama_model":
                config.ollama_model = value
            case "tasks_file":
                config.tasks_file = value
            case "preferences_file":
                config.preferences_file = value
            case "timezone":
                config.timezone = value
            case "refresh_interval":
                try:
                    config.refresh_interval = max(1, int(value))
                except ValueError:
                    logger.warning(f"Invalid REFRESH_INTERVAL: {value}")

    return config
