"""Project configuration stored in .epictrac/config.json"""

import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(".epictrac")
CONFIG_FILE = CONFIG_DIR / "config.json"

DEFAULT_CONFIG = {
    "project_prefix": "ep",
    "database_url": "sqlite:///.epictrac/database.db",
}

DATABASE_URL_ENV = "EPICTRAC_DATABASE_URL"
LOG_LEVEL_ENV = "EPICTRAC_LOG_LEVEL"


def get_project_config() -> dict:
    """Get project configuration, falling back to defaults for missing keys"""
    config = dict(DEFAULT_CONFIG)
    if CONFIG_FILE.exists():
        try:
            with open(CONFIG_FILE, "r") as f:
                config.update(json.load(f))
        except (OSError, ValueError) as e:
            logger.warning("Could not read config %s: %s", CONFIG_FILE, e)
    return config


def save_project_config(config: dict):
    """Save project configuration to .epictrac/config.json"""
    CONFIG_DIR.mkdir(exist_ok=True)
    
    with open(CONFIG_FILE, "w") as f:
        json.dump(config, f, indent=2)


def get_database_url() -> str:
    """Database URL for the current project; the environment wins over config.json"""
    return os.environ.get(DATABASE_URL_ENV) or get_project_config()["database_url"]


def get_log_level() -> str:
    return os.environ.get(LOG_LEVEL_ENV, "WARNING").upper()
