"""Configuration management for the Apigee auth tool."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional
from dotenv import load_dotenv


DEFAULT_APP_URL: str = "https://apigee.google.com/"

OUTPUT_FORMATS = ("curl", "json")


@dataclass(frozen=True)
class LoginTimeouts:
    """Wait budgets in milliseconds for each stage of the login flow."""

    email_field_ms: int = 5000
    password_field_ms: int = 5000
    app_loaded_ms: int = 5000
    app_ready_ms: int = 10000
    user_org_ms: int = 10000
    click_ms: int = 5000


@dataclass(frozen=True)
class AuthOptions:
    """Everything one login run needs, fixed for the duration of the run."""

    username: str
    password: str = field(repr=False)
    headless: bool = True
    debug: bool = False
    output_format: str = "curl"
    app_url: str = DEFAULT_APP_URL
    output_directory: Path = Path(".")
    settle_delay_ms: int = 2000
    timeouts: LoginTimeouts = field(default_factory=LoginTimeouts)

    def __post_init__(self):
        if not self.username:
            raise ValueError("username is required")
        if not self.password:
            raise ValueError("password is required")
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {self.output_format}. Must be one of {', '.join(OUTPUT_FORMATS)}"
            )


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in ("true", "1", "yes")


class Config:
    """Application configuration loaded from environment variables."""

    def __init__(self, env_file: Optional[str] = None):
        """Initialize configuration.

        Args:
            env_file: Path to .env file (default: .env in project root)
        """
        if env_file:
            load_dotenv(env_file)
        else:
            # Try to find .env in project root
            project_root = Path(__file__).parent.parent.parent
            env_path = project_root / ".env"
            if env_path.exists():
                load_dotenv(env_path)

    # Google account credentials
    @property
    def username(self) -> Optional[str]:
        """Google account username."""
        return os.getenv("APIGEE_USERNAME") or None

    @property
    def password(self) -> Optional[str]:
        """Google account password."""
        return os.getenv("APIGEE_PASSWORD") or None

    @property
    def app_url(self) -> str:
        """Apigee application URL."""
        return os.getenv("APIGEE_URL", DEFAULT_APP_URL)

    @property
    def headless_mode(self) -> bool:
        """Run browser in headless mode (default: True)."""
        return _env_flag("HEADLESS_MODE", "true")

    @property
    def debug(self) -> bool:
        """Verbose logging and debug artifacts on failure."""
        return _env_flag("DEBUG", "false")

    @property
    def output_format(self) -> str:
        """Auth file format: 'curl' or 'json'."""
        return os.getenv("OUTPUT_FORMAT", "curl").lower()

    @property
    def output_directory(self) -> Path:
        """Directory for the auth file and debug artifacts."""
        return Path(os.getenv("OUTPUT_DIRECTORY", "."))

    @property
    def settle_delay_ms(self) -> int:
        """Milliseconds to let the page react after each button click."""
        return int(os.getenv("CLICK_SETTLE_MS", "2000"))

    @property
    def log_level(self) -> str:
        """Logging level."""
        return os.getenv("LOG_LEVEL", "INFO").upper()

    @property
    def log_dir(self) -> Optional[Path]:
        """Directory for component log files (optional)."""
        path_str = os.getenv("LOG_DIR")
        if not path_str:
            return None
        return Path(path_str)

    def validate(self) -> bool:
        """Validate configuration values that have no command-line override.

        The output format is checked once flags are merged, in ``to_options``.

        Returns:
            bool: True if configuration is valid

        Raises:
            ValueError: If a value is malformed
        """
        if self.settle_delay_ms < 0:
            raise ValueError("CLICK_SETTLE_MS must not be negative")
        return True

    def to_options(self, **overrides) -> AuthOptions:
        """Build the options record for a run.

        Keyword arguments override the environment; ``None`` values are
        ignored so unset command-line flags fall through.

        Raises:
            ValueError: If credentials are missing or a value is invalid
        """
        values = {
            "username": self.username,
            "password": self.password,
            "headless": self.headless_mode,
            "debug": self.debug,
            "output_format": self.output_format,
            "app_url": self.app_url,
            "output_directory": self.output_directory,
            "settle_delay_ms": self.settle_delay_ms,
        }
        values.update({key: value for key, value in overrides.items() if value is not None})

        if not values["username"]:
            raise ValueError("Username required: pass --username or set APIGEE_USERNAME")
        if not values["password"]:
            raise ValueError("Password required: pass --password or set APIGEE_PASSWORD")
        return AuthOptions(**values)


# Global config instance
_config: Optional[Config] = None


def get_config(env_file: Optional[str] = None) -> Config:
    """Get global configuration instance.

    Args:
        env_file: Path to .env file (optional)

    Returns:
        Config: Global configuration instance
    """
    global _config
    if _config is None:
        _config = Config(env_file)
    return _config
