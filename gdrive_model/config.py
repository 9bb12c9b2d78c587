"""
Configuration for the gdrive model.

Path constants live here so the CLI, the authorizer and the model agree on
where tokens and client secrets are kept.
"""

import json
import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from .errors import InvalidArgument

logger = logging.getLogger(__name__)

# Base paths
CONFIG_DIR = Path(os.environ.get("GDRIVE_MODEL_CONFIG_DIR", "~/.config/gdrive-model")).expanduser()
CONFIG_FILE = CONFIG_DIR / "gdrive_model.json"
CREDENTIALS_FILE = CONFIG_DIR / "gdrive_credentials.json"
TOKEN_FILE = "gdrive_token.json"

DEFAULT_SCOPES = [
    "https://www.googleapis.com/auth/drive.file",
    "https://www.googleapis.com/auth/drive.metadata",
]

# OAuth redirect port for the consent flow
OAUTH_PORT = 8085


@dataclass
class GdriveConfig:
    """Settings needed to build a GdriveModel."""
    scopes: List[str] = field(default_factory=lambda: list(DEFAULT_SCOPES))
    token_file: str = TOKEN_FILE
    token_dir: Path = CONFIG_DIR
    client_secret_file: Path = CREDENTIALS_FILE
    user_id: str = "me"
    log_level: str = "INFO"


def load_config(path: Optional[Path] = None) -> GdriveConfig:
    """
    Load settings from a JSON config file.

    Expected layout:
        {
          "auth": {"scopes": [...], "token_file": "...", "token_dir": "...",
                   "client_secret_file": "..."},
          "user_id": "me",
          "log_level": "INFO"
        }

    Missing keys fall back to defaults; a missing file yields the defaults.

    Raises:
        InvalidArgument: If the file is not valid JSON or has the wrong shape
    """
    config_path = Path(path) if path else CONFIG_FILE
    config = GdriveConfig()

    if not config_path.exists():
        logger.info(f"No config found at {config_path}, using defaults")
        return config

    try:
        data = json.loads(config_path.read_text())
    except (OSError, ValueError) as e:
        raise InvalidArgument(f"Failed to load config {config_path}: {e}", e) from e

    if not isinstance(data, dict):
        raise InvalidArgument(f"Config {config_path} must contain a JSON object")

    auth = data.get("auth", {})
    if not isinstance(auth, dict):
        raise InvalidArgument(f"Config {config_path}: 'auth' must be an object")

    if "scopes" in auth:
        config.scopes = list(auth["scopes"])
    if "token_file" in auth:
        config.token_file = auth["token_file"]
    if "token_dir" in auth:
        config.token_dir = Path(auth["token_dir"]).expanduser()
    if "client_secret_file" in auth:
        config.client_secret_file = Path(auth["client_secret_file"]).expanduser()
    config.user_id = data.get("user_id", config.user_id)
    config.log_level = data.get("log_level", config.log_level)

    logger.info(f"Loaded config from {config_path}")
    return config
