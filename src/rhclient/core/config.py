"""Configuration management for the Robinhood client"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv
from loguru import logger

from rhclient.shared.exceptions import ConfigurationError

DEFAULT_API_URL = "https://api.robinhood.com/"
DEFAULT_TIMEOUT = 20


@dataclass
class Config:
    """Credentials and transport settings for a client session"""

    username: str
    password: str = ""
    api_url: str = DEFAULT_API_URL

    # Seconds; enforced by the HTTP transport only
    timeout: int = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.api_url.endswith("/"):
            self.api_url = f"{self.api_url}/"

    @classmethod
    def from_env(cls, env_file: str | Path | None = None) -> "Config":
        """Load configuration from environment variables

        A ``.env`` file is loaded first when present; variables already set
        in the process environment take precedence.

        Args:
            env_file: Optional explicit path to a dotenv file

        Returns:
            Config instance with values from environment

        Raises:
            ConfigurationError: If credentials are missing or the timeout is
                not an integer
        """
        if env_file is not None:
            load_dotenv(env_file)
        else:
            load_dotenv()

        username = os.getenv("ROBINHOOD_USERNAME")
        password = os.getenv("ROBINHOOD_PASSWORD")

        required_vars = {
            "ROBINHOOD_USERNAME": username,
            "ROBINHOOD_PASSWORD": password,
        }
        missing = [k for k, v in required_vars.items() if not v]
        if missing:
            raise ConfigurationError(f"Missing Robinhood configuration: {missing}")

        timeout_env = os.getenv("ROBINHOOD_TIMEOUT", str(DEFAULT_TIMEOUT))
        try:
            timeout = int(timeout_env)
        except ValueError as e:
            raise ConfigurationError(
                f"ROBINHOOD_TIMEOUT must be an integer, got {timeout_env!r}"
            ) from e

        config = cls(
            username=username,  # type: ignore[arg-type]
            password=password,  # type: ignore[arg-type]
            api_url=os.getenv("ROBINHOOD_API_URL", DEFAULT_API_URL),
            timeout=timeout,
        )

        logger.info("Configuration loaded:")
        logger.info(f"  Username: {config.username}")
        logger.info(
            f"  Password: {'Configured' if config.password else 'Not configured'}"
        )
        logger.info(f"  API URL: {config.api_url}")
        logger.info(f"  Timeout: {config.timeout} seconds")

        return config
