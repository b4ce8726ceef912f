from culturia_sync.env.env import (
    ConfigError,
    Environment,
    _load_dotenv,
    get_env,
    get_logging_env,
    reset_env_caches,
)
from culturia_sync.env.paths import PROJECT_ROOT

__all__ = [
    "Environment",
    "get_env",
    "reset_env_caches",
    "get_logging_env",
    "ConfigError",
    "PROJECT_ROOT",
    "_load_dotenv",
]
