#!filepath: tickreplay/__init__.py

from .utils.logger import Logging, logs, init_logging
from .config.app_config import AppConfig
from .utils.datetime_utils import DateTimeUtils

datetime_utils = DateTimeUtils

__version__ = "0.1.0"

__all__ = [
    "logs", "Logging", "init_logging",
    "AppConfig",
    "datetime_utils",
]
