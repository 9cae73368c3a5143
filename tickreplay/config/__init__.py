from .app_config import AppConfig
from .log_config import LogConfig
from .replay_config import ReplayConfig
from .store_config import StoreConfig

__all__ = ["AppConfig", "LogConfig", "ReplayConfig", "StoreConfig"]
