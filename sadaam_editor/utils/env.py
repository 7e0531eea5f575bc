"""Environment and utility functions."""

import logging
import os
import sys
from pathlib import Path

import keyring
from keyring.errors import KeyringError

from ..config import API_KEY_ENV, API_KEY_ENV_FALLBACK, ENV_FILE, LOG_FORMAT, LOG_DATE_FORMAT

SERVICE_NAME = "sadaam_editor"
KEYRING_USERNAME = "gemini_api_key"

# Default log file location
DEFAULT_LOG_FILE = "sadaam_editor.log"

logger = logging.getLogger(__name__)


def setup_logging(level: int = logging.INFO, log_file: str | None = DEFAULT_LOG_FILE) -> None:
    """Set up logging configuration.

    Logs are written to both console (stderr) and a file.

    Args:
        level: Logging level
        log_file: Path to log file (None to disable file logging)
    """
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            handlers.append(file_handler)
        except OSError as e:
            # Fall back to console-only if file logging fails
            print(f"Warning: Could not open log file '{log_file}': {e}", file=sys.stderr)

    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        handlers=handlers,
        force=True  # Replace any existing handlers
    )


def _read_key_from_file(env_path: Path) -> str | None:
    """Read the API key from a .env file (fallback method)."""
    if not env_path.exists():
        return None
    try:
        with open(env_path, encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                for name in (API_KEY_ENV, API_KEY_ENV_FALLBACK):
                    if line.startswith(f"{name}="):
                        key = line.split('=', 1)[1].strip().strip('"\'')
                        if key and key != 'your_key_here':
                            return key
    except OSError as e:
        logger.debug(f"Failed to read {env_path}: {e}")
    return None


def store_key_secure(api_key: str) -> bool:
    """Store the API key in the system keyring.

    Returns:
        True if stored in keyring, False if no usable keyring backend
    """
    try:
        keyring.set_password(SERVICE_NAME, KEYRING_USERNAME, api_key)
        return True
    except KeyringError as e:
        logger.debug(f"Keyring unavailable: {e}")
        return False


def retrieve_key_secure() -> str | None:
    """Retrieve the API key from the system keyring."""
    try:
        return keyring.get_password(SERVICE_NAME, KEYRING_USERNAME)
    except KeyringError as e:
        logger.debug(f"Keyring unavailable: {e}")
        return None


def load_api_key(env_file: Path | str = ENV_FILE) -> str | None:
    """Load the Gemini API key from environment, keyring, or .env file.

    Returns:
        Key string or None if not found
    """
    key = os.getenv(API_KEY_ENV) or os.getenv(API_KEY_ENV_FALLBACK)
    if key:
        return key.strip()

    key = retrieve_key_secure() or _read_key_from_file(Path(env_file))
    if key:
        os.environ[API_KEY_ENV] = key
        return key

    return None


def save_api_key(api_key: str, env_file: Path | str = ENV_FILE) -> None:
    """Save the API key to the system keyring if available, otherwise .env file.

    Args:
        api_key: Key to save

    Raises:
        ValueError: If the key is empty
    """
    if not api_key or not api_key.strip():
        raise ValueError("API key cannot be empty")

    api_key = api_key.strip()
    os.environ[API_KEY_ENV] = api_key

    if store_key_secure(api_key):
        return

    env_path = Path(env_file)
    lines: list[str] = []
    if env_path.exists():
        with open(env_path, encoding='utf-8') as f:
            lines = f.readlines()

    for i, line in enumerate(lines):
        if line.strip().startswith(f"{API_KEY_ENV}="):
            lines[i] = f"{API_KEY_ENV}={api_key}\n"
            break
    else:
        if not lines:
            lines.append("# Gemini API key\n")
            lines.append("# SECURITY: This file contains sensitive data.\n")
        lines.append(f"{API_KEY_ENV}={api_key}\n")

    with open(env_path, 'w', encoding='utf-8') as f:
        f.writelines(lines)

    # rw------- on Unix; not supported on every platform
    try:
        os.chmod(env_path, 0o600)
    except OSError:
        pass

    logger.warning(
        f"API key saved to {env_path.absolute()}. "
        "Note: Key is stored in plaintext. Ensure this file is not committed to version control."
    )
