"""Config module for storing the TMDB API key locally."""
import json
import logging
import os
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)


CONFIG_FILE = "custom-recognition.config"
API_KEY_FIELD = "tmdb_api_key"
API_KEY_ENV = "TMDB_API_KEY"


def load_env_api_key() -> str | None:
    """
    Load TMDB API key from environment or .env file.

    Priority:
    1. TMDB_API_KEY environment variable
    2. .env file in current directory
    3. .env file in user home directory

    Returns:
        API key string or None if not found
    """
    api_key = os.environ.get(API_KEY_ENV)
    if api_key:
        return api_key

    for env_path in (Path.cwd() / ".env", Path.home() / ".env"):
        if env_path.exists():
            load_dotenv(env_path)
            api_key = os.environ.get(API_KEY_ENV)
            if api_key:
                return api_key

    return None


class CredentialStore:
    """JSON file holding the TMDB API key."""

    def __init__(self, config_path: Path | None = None, use_env: bool = True):
        """
        Initialize the store.

        Args:
            config_path: Config file path. Defaults to CONFIG_FILE in the
                         current directory.
            use_env: Also look at TMDB_API_KEY and .env files
        """
        if config_path is None:
            config_path = Path.cwd() / CONFIG_FILE
        self.config_path = Path(config_path)
        self.use_env = use_env

    def _load(self) -> dict:
        if not self.config_path.exists():
            return {}
        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Ignoring unreadable config %s: %s", self.config_path, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load_api_key(self) -> str | None:
        """Return the stored API key, or None if there is none."""
        if self.use_env:
            api_key = load_env_api_key()
            if api_key:
                return api_key
        api_key = self._load().get(API_KEY_FIELD)
        return api_key or None

    def save_api_key(self, api_key: str) -> None:
        """
        Write the API key to the config file.

        Raises:
            OSError: If the file cannot be written
        """
        data = self._load()
        data[API_KEY_FIELD] = api_key
        with open(self.config_path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=4, ensure_ascii=False)
            f.write("\n")
