'''
Settings

Environment-driven configuration. Values are read once at import time, after loading
any `.env` file found from the working directory upward.
'''
from dotenv import load_dotenv
load_dotenv()

import os
import logging


def getenv_bool(key: str, default: str = "0") -> bool:
    return os.getenv(key, str(default)).lower() in ("1", "true")

def getenv_log_level(key: str, default: int) -> int:
    name = os.getenv(key, "")
    return logging.getLevelNamesMapping().get(name.upper(), logging.NOTSET) or default


# Database settings
DATABASE_URL = os.getenv("COREL_DATABASE_URL", "sqlite://")
ECHO_SQL     = getenv_bool("COREL_ECHO_SQL", "0")

# Logging settings
LOG_LEVEL = getenv_log_level("COREL_LOG_LEVEL", logging.INFO)

# Verify matcher output covers the whole parent batch after each eager pass
STRICT_MATCHING = getenv_bool("COREL_STRICT_MATCHING", "0")
