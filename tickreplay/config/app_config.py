#!filepath: tickreplay/config/app_config.py
import yaml
from pydantic import BaseModel
from dotenv import load_dotenv
import os

from .log_config import LogConfig
from .store_config import StoreConfig
from .replay_config import ReplayConfig


def project_root() -> str:
    """
    返回项目根目录（基于当前文件位置推导）:
    tickreplay/config/app_config.py → tickreplay/config → tickreplay → project_root
    """
    return os.path.abspath(os.path.join(os.path.dirname(__file__), "../../"))


class AppConfig(BaseModel):
    log: LogConfig = LogConfig()
    store: StoreConfig = StoreConfig()
    replay: ReplayConfig = ReplayConfig()

    @classmethod
    def load(cls, path: str | None = None) -> "AppConfig":
        """
        加载 YAML 配置 + .env
        - 默认使用 tickreplay/config/base.yml
        - 不依赖当前工作目录
        """
        root = project_root()

        # 1) 先加载 .env（在项目根目录下）
        load_dotenv(os.path.join(root, ".env"))

        # 2) 决定配置文件路径
        if path is None:
            path = os.path.join(os.path.dirname(__file__), "base.yml")

        if not os.path.exists(path):
            raise FileNotFoundError(f"Config file not found: {path}")

        # 3) 读取 YAML
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        # 4) env 覆盖
        store_root = os.getenv("TICKREPLAY_STORE_ROOT")
        if store_root:
            raw.setdefault("store", {})["root"] = store_root

        log_level = os.getenv("TICKREPLAY_LOG_LEVEL")
        if log_level:
            raw.setdefault("log", {})["level"] = log_level

        return cls(**raw)
