"""Configuration management for JamGuide."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

JAMGUIDE_HOME = Path(os.environ.get("JAMGUIDE_HOME", Path.home() / "jamguide"))
CONFIG_FILE = JAMGUIDE_HOME / "config" / "jamguide.conf"
DATA_DIR = JAMGUIDE_HOME / "data"

BACKENDS = ("file", "supabase")


@dataclass
class Config:
    """JamGuide configuration."""

    backend: str = "file"
    supabase_url: str = ""
    supabase_anon_key: str = ""
    data_dir: str = ""
    request_timeout: float = 10.0

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir).expanduser() if self.data_dir else DATA_DIR


def _unquote(value: str) -> str:
    """Strip surrounding quotes, or an inline comment from unquoted values."""
    if value.startswith('"') or value.startswith("'"):
        quote = value[0]
        end_quote = value.find(quote, 1)
        return value[1:end_quote] if end_quote != -1 else value[1:]
    if "#" in value:
        return value.split("#")[0].strip()
    return value


def load_config(path: Path | None = None) -> Config:
    """Load configuration from jamguide.conf, then apply environment overrides."""
    config = Config()
    path = path or CONFIG_FILE

    if path.exists():
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
                case "backend":
                    if value.lower() in BACKENDS:
                        config.backend = value.lower()
                    else:
                        logger.warning(f"Unknown BACKEND {value!r}, using {config.backend!r}")
                case "supabase_url":
                    config.supabase_url = value
                case "supabase_anon_key":
                    config.supabase_anon_key = value
                case "data_dir":
                    config.data_dir = value
                case "request_timeout":
                    try:
                        config.request_timeout = float(value)
                    except ValueError:
                        logger.warning(f"Failed to parse REQUEST_TIMEOUT {value!r}")

    if os.environ.get("SUPABASE_URL"):
        config.supabase_url = os.environ["SUPABASE_URL"]
    if os.environ.get("SUPABASE_ANON_KEY"):
        config.supabase_anon_key = os.environ["SUPABASE_ANON_KEY"]

    return config
