"""Configuration management for the pool hours service."""

import json
import os
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)

EXTRACTION_MODES = ("category", "combined")


class Config:
    """Configuration manager with environment variables and file fallback."""

    def __init__(self, config_path: str | None = None):
        """Initialize configuration.

        Args:
            config_path: Path to configuration file (optional)
        """
        self.config_path = config_path or os.getenv(
            "POOL_HOURS_CONFIG_PATH", "config/config.json"
        )
        self._config_data: dict[str, Any] = {}
        self._load_config()

    def _load_config(self) -> None:
        """Load configuration from file if it exists."""
        config_file = Path(self.config_path)
        if config_file.exists():
            try:
                with open(config_file, encoding="utf-8") as f:
                    self._config_data = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                print(f"Warning: Failed to load config file {self.config_path}: {e}")
                self._config_data = {}

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value with priority: env vars > config file > default.

        Args:
            key: Configuration key
            default: Default value if not found

        Returns:
            Configuration value
        """
        env_value = os.getenv(key.upper())
        if env_value is not None:
            return env_value

        if key in self._config_data:
            return self._config_data[key]

        return default

    @property
    def pool_url(self) -> str:
        """Get the URL of the pool schedule page."""
        return self.get(
            "POOL_HOURS_URL", "https://highlandsrec.ca.gov/pool-hours-e0d65e4"
        )

    @property
    def site_timezone(self) -> str:
        """Get the civil timezone the pool publishes its hours in."""
        return self.get("POOL_HOURS_SITE_TIMEZONE", "America/Los_Angeles")

    @property
    def client_timezone(self) -> str:
        """Get the default client timezone used for week boundaries."""
        return self.get("POOL_HOURS_CLIENT_TIMEZONE", "America/Los_Angeles")

    @property
    def request_timeout(self) -> float:
        """Get HTTP request timeout in seconds."""
        return float(self.get("POOL_HOURS_REQUEST_TIMEOUT", "10"))

    @property
    def user_agent(self) -> str:
        """Get the User-Agent header sent to the pool website."""
        return self.get("POOL_HOURS_USER_AGENT", DEFAULT_USER_AGENT)

    @property
    def extraction_mode(self) -> str:
        """Get the table extraction mode ("category" or "combined")."""
        mode = str(self.get("POOL_HOURS_EXTRACTION_MODE", "category")).lower()
        if mode not in EXTRACTION_MODES:
            raise ValueError(
                f"POOL_HOURS_EXTRACTION_MODE must be one of {EXTRACTION_MODES}, got: {mode}"
            )
        return mode

    @property
    def log_file(self) -> str:
        """Get the log file path."""
        return self.get("POOL_HOURS_LOG_FILE", "pool_hours.log")

    @property
    def http_host(self) -> str:
        """Get the bind host for the HTTP server."""
        return self.get("POOL_HOURS_HTTP_HOST", "0.0.0.0")

    @property
    def http_port(self) -> int:
        """Get the bind port for the HTTP server."""
        return int(self.get("POOL_HOURS_HTTP_PORT", "8000"))

    @property
    def enable_debug_mode(self) -> bool:
        """Check if debug mode is enabled."""
        return str(self.get("POOL_HOURS_DEBUG", "false")).lower() == "true"

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        return {
            "pool_url": self.pool_url,
            "site_timezone": self.site_timezone,
            "client_timezone": self.client_timezone,
            "request_timeout": self.request_timeout,
            "extraction_mode": self.extraction_mode,
            "log_file": self.log_file,
            "http_host": self.http_host,
            "http_port": self.http_port,
            "enable_debug_mode": self.enable_debug_mode,
        }


# Global configuration instance
config = Config()
